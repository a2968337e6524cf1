"""LLM Integration Module"""

from .models import LLMRequest, LLMResponse, Provider, Tier, TierRoute, build_routes
from .providers import BaseProvider, GeminiProvider, OpenAIProvider
from .router import LLMRouter, build_router

__all__ = [
    "LLMRequest",
    "LLMResponse",
    "Provider",
    "Tier",
    "TierRoute",
    "build_routes",
    "BaseProvider",
    "GeminiProvider",
    "OpenAIProvider",
    "LLMRouter",
    "build_router",
]
