"""
LLM Router - tier to provider dispatch

Selects the provider for a request's tier, checks its credential before any
network I/O, and normalizes buffered and streaming output. There is no
fallback between providers and no retry: failures surface to the caller.
"""

import time
from typing import AsyncIterator, Mapping, Optional

import openai
import structlog
from google import genai

from debatica.core.exceptions import ConfigurationError, UnknownTierError
from debatica.llm.models import (
    LLMRequest,
    LLMResponse,
    Provider,
    Tier,
    TierRoute,
    build_routes,
)
from debatica.llm.providers import BaseProvider, GeminiProvider, OpenAIProvider

logger = structlog.get_logger(__name__)


class LLMRouter:
    """
    Routes requests to the provider configured for their tier.

    Provider handlers are built once at startup and passed in; a provider
    missing from ``providers`` means its credential was not configured.

    Usage:
        router = build_router(settings)
        response = await router.generate(request)
        async for fragment in router.stream(request):
            ...
    """

    def __init__(
        self,
        providers: Mapping[Provider, BaseProvider],
        routes: Mapping[Tier, TierRoute],
    ):
        self._providers = dict(providers)
        self._routes = dict(routes)

    @property
    def routes(self) -> dict[Tier, TierRoute]:
        return dict(self._routes)

    def is_available(self, tier: Tier) -> bool:
        """Whether the tier's provider credential is configured"""
        route = self._routes.get(tier)
        return route is not None and route.provider in self._providers

    def _resolve(self, request: LLMRequest) -> tuple[Tier, TierRoute, BaseProvider]:
        """Validate tier and credential. Never touches the network."""
        try:
            tier = Tier(request.tier)
        except ValueError:
            raise UnknownTierError(request.tier) from None

        route = self._routes.get(tier)
        if route is None:
            raise UnknownTierError(tier.value)

        provider = self._providers.get(route.provider)
        if provider is None:
            raise ConfigurationError(
                f"{route.provider.value} API key not configured. "
                f"Please set {route.credential} for the {tier.value} tier.",
                config_key=route.credential,
            )
        return tier, route, provider

    async def generate(self, request: LLMRequest) -> LLMResponse:
        """Buffered completion with latency and, where reported, token usage"""
        tier, route, provider = self._resolve(request)

        logger.info(
            "LLM dispatch",
            tier=tier.value,
            provider=route.provider.value,
            model=route.model,
            prompt_chars=len(request.system_prompt),
            input_chars=len(request.user_input),
        )

        start = time.perf_counter()
        result = await provider.generate(request, route)
        latency_ms = max(0, int((time.perf_counter() - start) * 1000))

        logger.info(
            "LLM generation complete",
            tier=tier.value,
            provider=route.provider.value,
            model=route.model,
            latency_ms=latency_ms,
            token_count=result.token_count,
        )

        return LLMResponse(
            content=result.content,
            latency_ms=latency_ms,
            token_count=result.token_count,
            tier=tier,
            provider=route.provider,
            model=route.model,
        )

    def stream(self, request: LLMRequest) -> AsyncIterator[str]:
        """
        Stream completion fragments.

        Validation happens here, eagerly, so configuration errors are raised
        before the caller has started its own response. The returned iterator
        is single-pass; closing it closes the upstream connection.
        """
        tier, route, provider = self._resolve(request)

        logger.info(
            "LLM stream dispatch",
            tier=tier.value,
            provider=route.provider.value,
            model=route.model,
            prompt_chars=len(request.system_prompt),
            input_chars=len(request.user_input),
        )
        return self._relay(tier, route, provider.stream(request, route))

    async def _relay(
        self,
        tier: Tier,
        route: TierRoute,
        fragments: AsyncIterator[str],
    ) -> AsyncIterator[str]:
        start = time.perf_counter()
        count = 0
        completed = False
        try:
            async for fragment in fragments:
                count += 1
                yield fragment
            completed = True
        except Exception as e:
            logger.error(
                "LLM stream failed",
                tier=tier.value,
                provider=route.provider.value,
                fragments=count,
                error=str(e),
            )
            raise
        finally:
            aclose = getattr(fragments, "aclose", None)
            if aclose is not None:
                await aclose()
            logger.info(
                "LLM stream closed",
                tier=tier.value,
                provider=route.provider.value,
                model=route.model,
                fragments=count,
                completed=completed,
                latency_ms=int((time.perf_counter() - start) * 1000),
            )


def build_router(settings, routes: Optional[Mapping[Tier, TierRoute]] = None) -> LLMRouter:
    """Construct provider clients for every configured credential"""
    providers: dict[Provider, BaseProvider] = {}

    openai_key = settings.openai.api_key.get_secret_value()
    if openai_key:
        providers[Provider.OPENAI] = OpenAIProvider(openai.AsyncOpenAI(api_key=openai_key))

    google_key = settings.google.api_key.get_secret_value()
    if google_key:
        providers[Provider.GOOGLE] = GeminiProvider(genai.Client(api_key=google_key))

    logger.info(
        "LLM router initialized",
        providers=sorted(p.value for p in providers),
    )
    return LLMRouter(providers, routes or build_routes(settings))
