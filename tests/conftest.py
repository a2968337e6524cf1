"""
Pytest configuration and fixtures for Debatica tests
"""

import asyncio
import os
from typing import AsyncIterator, Optional

import pytest
import pytest_asyncio

# Set test environment before importing app modules
os.environ["APP_ENV"] = "test"
os.environ["API_KEY"] = ""
os.environ["OPENAI_API_KEY"] = "test-openai-key"
os.environ["GOOGLE_API_KEY"] = "test-google-key"
os.environ["LOG_FORMAT"] = "text"
os.environ["LOG_LEVEL"] = "WARNING"

from debatica.llm.models import (  # noqa: E402
    LLMRequest,
    Provider,
    ProviderResult,
    Tier,
    TierRoute,
)
from debatica.llm.providers import BaseProvider  # noqa: E402
from debatica.llm.router import LLMRouter  # noqa: E402


class FakeProvider(BaseProvider):
    """
    Deterministic provider with a network-call counter.

    ``echo`` returns the prompt the way Gemini receives it; otherwise the
    configured fragments are returned (joined for buffered calls).
    """

    def __init__(
        self,
        provider: Provider,
        fragments: Optional[list[str]] = None,
        echo: bool = False,
        delay: float = 0.0,
        fail_after: Optional[int] = None,
        token_count: Optional[int] = 42,
    ):
        self.provider = provider
        self.fragments = fragments if fragments is not None else ["Hello", ", ", "debater", "."]
        self.echo = echo
        self.delay = delay
        self.fail_after = fail_after
        self.token_count = token_count
        self.calls = 0
        self.closed = False
        self.last_temperature: Optional[float] = None

    def _pieces(self, request: LLMRequest) -> list[str]:
        if self.echo:
            return [request.system_prompt, "\n\nUser Input: ", request.user_input]
        return list(self.fragments)

    async def generate(self, request: LLMRequest, route: TierRoute) -> ProviderResult:
        self.calls += 1
        self.last_temperature = self.temperature_for(request, route)
        if self.delay:
            await asyncio.sleep(self.delay)
        return ProviderResult(
            content="".join(self._pieces(request)),
            token_count=self.token_count,
        )

    async def stream(self, request: LLMRequest, route: TierRoute) -> AsyncIterator[str]:
        from debatica.core.exceptions import ProviderError

        self.calls += 1
        self.last_temperature = self.temperature_for(request, route)
        try:
            for i, piece in enumerate(self._pieces(request)):
                if self.fail_after is not None and i >= self.fail_after:
                    raise ProviderError(self.provider.value, "connection reset by peer")
                if self.delay:
                    await asyncio.sleep(self.delay)
                yield piece
        finally:
            self.closed = True


@pytest.fixture
def routes() -> dict[Tier, TierRoute]:
    return {
        Tier.PRECISE: TierRoute(Provider.OPENAI, "gpt-4o-mini", 0.2),
        Tier.BALANCED: TierRoute(Provider.OPENAI, "gpt-4o", 0.7),
        Tier.FAST: TierRoute(Provider.GOOGLE, "gemini-2.0-flash", 0.7),
    }


@pytest.fixture
def openai_provider() -> FakeProvider:
    return FakeProvider(Provider.OPENAI)


@pytest.fixture
def google_provider() -> FakeProvider:
    return FakeProvider(Provider.GOOGLE)


@pytest.fixture
def make_provider():
    """Factory for providers with custom behaviour"""
    return FakeProvider


@pytest.fixture
def llm_router(routes, openai_provider, google_provider) -> LLMRouter:
    return LLMRouter(
        {Provider.OPENAI: openai_provider, Provider.GOOGLE: google_provider},
        routes,
    )


@pytest.fixture
def test_settings():
    from config import Settings

    return Settings(app_env="test", api_key="", debug=True)


@pytest.fixture
def prompt_store(tmp_path):
    from debatica.features.prompts import PromptStore

    (tmp_path / "rebuttal.md").write_text("You write rebuttals.", encoding="utf-8")
    (tmp_path / "extemp.md").write_text("You coach extemp.", encoding="utf-8")
    return PromptStore(tmp_path)


@pytest_asyncio.fixture
async def test_client(test_settings, llm_router, prompt_store):
    """Create a test client for API tests"""
    from httpx import ASGITransport, AsyncClient
    from debatica.api.main import create_app

    app = create_app(
        settings=test_settings,
        llm_router=llm_router,
        prompt_store=prompt_store,
    )
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


# Markers for test categorization
def pytest_configure(config):
    """Register custom markers"""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests")
