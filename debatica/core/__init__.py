"""Core module - Exceptions and logging"""

from .exceptions import (
    DebaticaException,
    ConfigurationError,
    LLMException,
    ProviderError,
    UnknownTierError,
    FeatureException,
    PromptNotFoundError,
    UnsupportedFileError,
    AuthenticationError,
    StreamAborted,
)
from .logging import configure_logging

__all__ = [
    "DebaticaException",
    "ConfigurationError",
    "LLMException",
    "ProviderError",
    "UnknownTierError",
    "FeatureException",
    "PromptNotFoundError",
    "UnsupportedFileError",
    "AuthenticationError",
    "StreamAborted",
    "configure_logging",
]
