"""Unit tests for the OpenAI and Gemini provider handlers"""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import httpx
import openai
import pytest

from debatica.core.exceptions import ProviderError
from debatica.llm.models import LLMRequest, Provider, Tier, TierRoute
from debatica.llm.providers import GeminiProvider, OpenAIProvider

OPENAI_ROUTE = TierRoute(Provider.OPENAI, "gpt-4o-mini", 0.2)
GEMINI_ROUTE = TierRoute(Provider.GOOGLE, "gemini-2.0-flash", 0.7)


def make_request(tier=Tier.PRECISE, **kwargs) -> LLMRequest:
    return LLMRequest(tier=tier, system_prompt="S", user_input="U", **kwargs)


def openai_chunk(text):
    return SimpleNamespace(choices=[SimpleNamespace(delta=SimpleNamespace(content=text))])


class FakeOpenAIStream:
    """Async-iterable stand-in for openai.AsyncStream"""

    def __init__(self, chunks, error=None):
        self.chunks = chunks
        self.error = error
        self.closed = False

    async def __aiter__(self):
        for chunk in self.chunks:
            yield chunk
        if self.error is not None:
            raise self.error

    async def close(self):
        self.closed = True


def connection_error() -> openai.APIConnectionError:
    return openai.APIConnectionError(
        request=httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
    )


@pytest.fixture
def openai_client():
    client = MagicMock()
    client.chat.completions.create = AsyncMock()
    return client


@pytest.fixture
def gemini_client():
    client = MagicMock()
    client.aio.models.generate_content = AsyncMock()
    client.aio.models.generate_content_stream = AsyncMock()
    return client


@pytest.mark.unit
class TestOpenAIProvider:
    """Tests for OpenAI chat completions"""

    @pytest.mark.asyncio
    async def test_generate(self, openai_client):
        openai_client.chat.completions.create.return_value = SimpleNamespace(
            choices=[SimpleNamespace(message=SimpleNamespace(content="A rebuttal."))],
            usage=SimpleNamespace(total_tokens=12),
        )
        provider = OpenAIProvider(openai_client)

        result = await provider.generate(make_request(), OPENAI_ROUTE)

        assert result.content == "A rebuttal."
        assert result.token_count == 12

        kwargs = openai_client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "gpt-4o-mini"
        assert kwargs["temperature"] == 0.2
        assert kwargs["messages"] == [
            {"role": "system", "content": "S"},
            {"role": "user", "content": "U"},
        ]
        assert "stream" not in kwargs

    @pytest.mark.asyncio
    async def test_generate_without_usage(self, openai_client):
        openai_client.chat.completions.create.return_value = SimpleNamespace(
            choices=[SimpleNamespace(message=SimpleNamespace(content=None))],
            usage=None,
        )
        result = await OpenAIProvider(openai_client).generate(make_request(), OPENAI_ROUTE)

        assert result.content == ""
        assert result.token_count is None

    @pytest.mark.asyncio
    async def test_temperature_override(self, openai_client):
        openai_client.chat.completions.create.return_value = SimpleNamespace(
            choices=[], usage=None
        )
        await OpenAIProvider(openai_client).generate(
            make_request(temperature=1.1), OPENAI_ROUTE
        )
        assert openai_client.chat.completions.create.call_args.kwargs["temperature"] == 1.1

    @pytest.mark.asyncio
    async def test_generate_wraps_api_errors(self, openai_client):
        openai_client.chat.completions.create.side_effect = connection_error()

        with pytest.raises(ProviderError) as exc_info:
            await OpenAIProvider(openai_client).generate(make_request(), OPENAI_ROUTE)

        assert exc_info.value.provider == "openai"

    @pytest.mark.asyncio
    async def test_stream(self, openai_client):
        upstream = FakeOpenAIStream([
            openai_chunk("Hel"),
            SimpleNamespace(choices=[]),
            openai_chunk(None),
            openai_chunk("lo"),
        ])
        openai_client.chat.completions.create.return_value = upstream

        fragments = [
            f async for f in OpenAIProvider(openai_client).stream(make_request(), OPENAI_ROUTE)
        ]

        assert fragments == ["Hel", "lo"]
        assert upstream.closed
        assert openai_client.chat.completions.create.call_args.kwargs["stream"] is True

    @pytest.mark.asyncio
    async def test_stream_error_mid_way(self, openai_client):
        upstream = FakeOpenAIStream([openai_chunk("partial")], error=connection_error())
        openai_client.chat.completions.create.return_value = upstream

        received = []
        with pytest.raises(ProviderError):
            async for fragment in OpenAIProvider(openai_client).stream(
                make_request(), OPENAI_ROUTE
            ):
                received.append(fragment)

        assert received == ["partial"]
        assert upstream.closed

    @pytest.mark.asyncio
    async def test_stream_closed_early(self, openai_client):
        upstream = FakeOpenAIStream([openai_chunk("a"), openai_chunk("b")])
        openai_client.chat.completions.create.return_value = upstream

        fragments = OpenAIProvider(openai_client).stream(make_request(), OPENAI_ROUTE)
        assert await fragments.__anext__() == "a"
        await fragments.aclose()

        assert upstream.closed


@pytest.mark.unit
class TestGeminiProvider:
    """Tests for Gemini via google-genai"""

    @pytest.mark.asyncio
    async def test_generate(self, gemini_client):
        gemini_client.aio.models.generate_content.return_value = SimpleNamespace(
            text="Quick answer",
            usage_metadata=SimpleNamespace(total_token_count=7),
        )
        provider = GeminiProvider(gemini_client)

        result = await provider.generate(make_request(Tier.FAST), GEMINI_ROUTE)

        assert result.content == "Quick answer"
        assert result.token_count == 7

        kwargs = gemini_client.aio.models.generate_content.call_args.kwargs
        assert kwargs["model"] == "gemini-2.0-flash"
        assert kwargs["contents"] == "S\n\nUser Input: U"
        assert kwargs["config"].temperature == 0.7

    @pytest.mark.asyncio
    async def test_generate_without_usage(self, gemini_client):
        gemini_client.aio.models.generate_content.return_value = SimpleNamespace(
            text=None,
            usage_metadata=None,
        )
        result = await GeminiProvider(gemini_client).generate(
            make_request(Tier.FAST), GEMINI_ROUTE
        )
        assert result.content == ""
        assert result.token_count is None

    @pytest.mark.asyncio
    async def test_generate_wraps_transport_errors(self, gemini_client):
        gemini_client.aio.models.generate_content.side_effect = httpx.ConnectError("refused")

        with pytest.raises(ProviderError) as exc_info:
            await GeminiProvider(gemini_client).generate(make_request(Tier.FAST), GEMINI_ROUTE)

        assert exc_info.value.provider == "google"
        assert "refused" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_stream(self, gemini_client):
        state = {"closed": False}

        async def chunks():
            try:
                for text in ["Fast ", "", "reply"]:
                    yield SimpleNamespace(text=text)
            finally:
                state["closed"] = True

        gemini_client.aio.models.generate_content_stream.return_value = chunks()

        fragments = [
            f async for f in GeminiProvider(gemini_client).stream(
                make_request(Tier.FAST), GEMINI_ROUTE
            )
        ]

        assert fragments == ["Fast ", "reply"]
        assert state["closed"]

    @pytest.mark.asyncio
    async def test_stream_error_mid_way(self, gemini_client):
        async def chunks():
            yield SimpleNamespace(text="partial")
            raise httpx.ReadError("reset")

        gemini_client.aio.models.generate_content_stream.return_value = chunks()

        received = []
        with pytest.raises(ProviderError):
            async for fragment in GeminiProvider(gemini_client).stream(
                make_request(Tier.FAST), GEMINI_ROUTE
            ):
                received.append(fragment)

        assert received == ["partial"]
