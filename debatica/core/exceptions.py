"""
Custom exceptions for Debatica
Organized by concern with detailed error information
"""

from typing import Any, Optional


class DebaticaException(Exception):
    """Base exception for all service errors"""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        code: str = "UNKNOWN_ERROR",
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = True,
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        self.recoverable = recoverable
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for API responses"""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
            "recoverable": self.recoverable,
        }


# ===========================================
# Configuration Exceptions
# ===========================================


class ConfigurationError(DebaticaException):
    """Configuration error, e.g. a provider credential is not set"""

    status_code = 500

    def __init__(self, message: str, config_key: Optional[str] = None):
        super().__init__(
            message=message,
            code="CONFIGURATION_ERROR",
            details={"config_key": config_key} if config_key else {},
            recoverable=False,
        )
        self.config_key = config_key


# ===========================================
# LLM Exceptions
# ===========================================


class LLMException(DebaticaException):
    """Base exception for LLM-related errors"""

    pass


class ProviderError(LLMException):
    """Upstream provider call failed or returned an error status"""

    status_code = 502

    def __init__(self, provider: str, error: str):
        super().__init__(
            message=f"LLM provider error ({provider}): {error}",
            code="LLM_PROVIDER_ERROR",
            details={"provider": provider, "error": error},
            recoverable=True,
        )
        self.provider = provider
        self.error = error


class UnknownTierError(LLMException):
    """Tier has no mapped provider"""

    status_code = 400

    def __init__(self, tier: Any):
        super().__init__(
            message=f"Unknown tier: {tier}",
            code="UNKNOWN_TIER",
            details={"tier": str(tier)},
            recoverable=False,
        )
        self.tier = tier


# ===========================================
# Feature Exceptions
# ===========================================


class FeatureException(DebaticaException):
    """Base exception for feature invocation errors"""

    pass


class PromptNotFoundError(FeatureException):
    """No prompt template exists for the feature"""

    status_code = 404

    def __init__(self, feature: str):
        super().__init__(
            message=f"Prompt template not found for feature: {feature}",
            code="PROMPT_NOT_FOUND",
            details={"feature": feature},
            recoverable=False,
        )
        self.feature = feature


class UnsupportedFileError(FeatureException):
    """Uploaded file has a type we cannot extract text from"""

    status_code = 400

    def __init__(self, filename: Optional[str], content_type: Optional[str]):
        super().__init__(
            message="File must be a PDF",
            code="UNSUPPORTED_FILE",
            details={"filename": filename, "content_type": content_type},
            recoverable=True,
        )


# ===========================================
# API Exceptions
# ===========================================


class AuthenticationError(DebaticaException):
    """Missing or invalid API key"""

    status_code = 401

    def __init__(self, path: str):
        super().__init__(
            message="Invalid or missing API key",
            code="AUTHENTICATION_REQUIRED",
            details={"path": path},
            recoverable=True,
        )


class StreamAborted(Exception):
    """
    A streamed response failed after its status line was sent.

    Not a DebaticaException: once the body has started there is no error
    response to send, so it propagates and the connection is dropped.
    """

    def __init__(self, cause: DebaticaException):
        super().__init__(cause.message)
        self.cause = cause
