"""
Debatica - Configuration Settings
Environment-driven settings for the API server, LLM providers and prompts
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class OpenAISettings(BaseSettings):
    """OpenAI API configuration (precise and balanced tiers)"""

    model_config = SettingsConfigDict(env_prefix="OPENAI_", env_file=".env", extra="ignore")

    api_key: SecretStr = Field(default="")
    precise_model: str = Field(default="gpt-4o-mini")
    balanced_model: str = Field(default="gpt-4o")


class GoogleSettings(BaseSettings):
    """Google Gemini API configuration (fast tier)"""

    model_config = SettingsConfigDict(env_prefix="GOOGLE_", env_file=".env", extra="ignore")

    api_key: SecretStr = Field(default="")
    fast_model: str = Field(default="gemini-2.0-flash")


class LLMSettings(BaseSettings):
    """Tier defaults"""

    model_config = SettingsConfigDict(env_prefix="LLM_", env_file=".env", extra="ignore")

    default_tier: Literal["precise", "balanced", "fast"] = Field(default="fast")
    precise_temperature: float = Field(default=0.2, ge=0, le=2)
    default_temperature: float = Field(default=0.7, ge=0, le=2)


class PromptSettings(BaseSettings):
    """Prompt template storage"""

    model_config = SettingsConfigDict(env_prefix="PROMPTS_", env_file=".env", extra="ignore")

    # None means the templates bundled with the package
    dir: Optional[Path] = Field(default=None)


class Settings(BaseSettings):
    """Main application settings"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="debatica")
    app_env: Literal["development", "test", "staging", "production"] = Field(
        default="development"
    )
    debug: bool = Field(default=False)

    # API
    api_host: str = Field(default="0.0.0.0")
    api_port: int = Field(default=8000)
    api_workers: int = Field(default=1)
    # Empty disables the API key middleware
    api_key: SecretStr = Field(default="")
    # Comma-separated origins, or "*"
    allowed_origins: str = Field(default="*")

    # Nested settings
    openai: OpenAISettings = Field(default_factory=OpenAISettings)
    google: GoogleSettings = Field(default_factory=GoogleSettings)
    llm: LLMSettings = Field(default_factory=LLMSettings)
    prompts: PromptSettings = Field(default_factory=PromptSettings)

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO"
    )
    log_format: Literal["json", "text"] = Field(default="json")

    @property
    def cors_origins(self) -> list[str]:
        if self.allowed_origins.strip() == "*":
            return ["*"]
        return [o.strip() for o in self.allowed_origins.split(",") if o.strip()]

    @property
    def auth_enabled(self) -> bool:
        return bool(self.api_key.get_secret_value())


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


settings = get_settings()
