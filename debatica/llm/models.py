"""
LLM request/response types and tier routing table
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Provider(str, Enum):
    """Supported upstream providers"""

    OPENAI = "openai"
    GOOGLE = "google"


class Tier(str, Enum):
    """Model tiers offered to users"""

    PRECISE = "precise"  # Most deterministic, low temperature
    BALANCED = "balanced"
    FAST = "fast"  # Quick responses from Gemini


# Environment variable holding each provider's credential
CREDENTIALS: dict[Provider, str] = {
    Provider.OPENAI: "OPENAI_API_KEY",
    Provider.GOOGLE: "GOOGLE_API_KEY",
}


@dataclass(frozen=True)
class TierRoute:
    """Where a tier is served from"""

    provider: Provider
    model: str
    temperature: float

    @property
    def credential(self) -> str:
        return CREDENTIALS[self.provider]


@dataclass
class LLMRequest:
    """Request descriptor, built fresh for each call"""

    tier: Tier
    system_prompt: str
    user_input: str
    stream: bool = False
    temperature: Optional[float] = None


@dataclass
class ProviderResult:
    """Raw result of a buffered provider call"""

    content: str
    token_count: Optional[int] = None


@dataclass
class LLMResponse:
    """Standardized LLM response"""

    content: str
    latency_ms: int
    token_count: Optional[int] = None
    tier: Optional[Tier] = None
    provider: Optional[Provider] = None
    model: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "content": self.content,
            "token_count": self.token_count,
            "latency_ms": self.latency_ms,
            "tier": self.tier.value if self.tier else None,
            "provider": self.provider.value if self.provider else None,
            "model": self.model,
        }


def build_routes(settings) -> dict[Tier, TierRoute]:
    """Tier routing table from settings"""
    return {
        Tier.PRECISE: TierRoute(
            provider=Provider.OPENAI,
            model=settings.openai.precise_model,
            temperature=settings.llm.precise_temperature,
        ),
        Tier.BALANCED: TierRoute(
            provider=Provider.OPENAI,
            model=settings.openai.balanced_model,
            temperature=settings.llm.default_temperature,
        ),
        Tier.FAST: TierRoute(
            provider=Provider.GOOGLE,
            model=settings.google.fast_model,
            temperature=settings.llm.default_temperature,
        ),
    }
