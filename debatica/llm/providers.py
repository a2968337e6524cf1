"""
LLM Providers - OpenAI and Google Gemini handlers

Each provider wraps an SDK client constructed once at startup and exposes the
same buffered/streaming contract to the router.
"""

from abc import ABC, abstractmethod
from typing import Any, AsyncIterator

import httpx
import openai
import structlog
from google.genai import errors as genai_errors
from google.genai import types as genai_types

from debatica.core.exceptions import ProviderError
from debatica.llm.models import LLMRequest, Provider, ProviderResult, TierRoute

logger = structlog.get_logger(__name__)


class BaseProvider(ABC):
    """Base class for provider handlers"""

    provider: Provider

    @abstractmethod
    async def generate(self, request: LLMRequest, route: TierRoute) -> ProviderResult:
        """Buffered completion"""
        pass

    @abstractmethod
    def stream(self, request: LLMRequest, route: TierRoute) -> AsyncIterator[str]:
        """Stream completion text fragments"""
        pass

    @staticmethod
    def temperature_for(request: LLMRequest, route: TierRoute) -> float:
        if request.temperature is not None:
            return request.temperature
        return route.temperature


class OpenAIProvider(BaseProvider):
    """OpenAI chat completions"""

    provider = Provider.OPENAI

    def __init__(self, client: openai.AsyncOpenAI):
        self.client = client

    @staticmethod
    def _messages(request: LLMRequest) -> list[dict[str, str]]:
        return [
            {"role": "system", "content": request.system_prompt},
            {"role": "user", "content": request.user_input},
        ]

    async def generate(self, request: LLMRequest, route: TierRoute) -> ProviderResult:
        try:
            completion = await self.client.chat.completions.create(
                model=route.model,
                messages=self._messages(request),
                temperature=self.temperature_for(request, route),
            )
        except openai.APIError as e:
            logger.error("OpenAI API error", model=route.model, error=str(e))
            raise ProviderError(self.provider.value, str(e)) from e

        content = ""
        if completion.choices:
            content = completion.choices[0].message.content or ""

        usage = getattr(completion, "usage", None)
        return ProviderResult(
            content=content,
            token_count=usage.total_tokens if usage else None,
        )

    async def stream(self, request: LLMRequest, route: TierRoute) -> AsyncIterator[str]:
        try:
            stream = await self.client.chat.completions.create(
                model=route.model,
                messages=self._messages(request),
                temperature=self.temperature_for(request, route),
                stream=True,
            )
        except openai.APIError as e:
            logger.error("OpenAI API error", model=route.model, error=str(e))
            raise ProviderError(self.provider.value, str(e)) from e

        try:
            async for chunk in stream:
                if not chunk.choices:
                    continue
                delta = chunk.choices[0].delta.content
                if delta:
                    yield delta
        except (openai.APIError, httpx.HTTPError) as e:
            logger.error("OpenAI stream error", model=route.model, error=str(e))
            raise ProviderError(self.provider.value, str(e)) from e
        finally:
            await stream.close()


class GeminiProvider(BaseProvider):
    """Google Gemini via the google-genai SDK"""

    provider = Provider.GOOGLE

    def __init__(self, client: Any):
        # google.genai.Client; the async surface lives under client.aio
        self.client = client

    @staticmethod
    def _prompt(request: LLMRequest) -> str:
        return f"{request.system_prompt}\n\nUser Input: {request.user_input}"

    def _config(self, request: LLMRequest, route: TierRoute) -> genai_types.GenerateContentConfig:
        return genai_types.GenerateContentConfig(
            temperature=self.temperature_for(request, route),
        )

    async def generate(self, request: LLMRequest, route: TierRoute) -> ProviderResult:
        try:
            response = await self.client.aio.models.generate_content(
                model=route.model,
                contents=self._prompt(request),
                config=self._config(request, route),
            )
        except (genai_errors.APIError, httpx.HTTPError) as e:
            logger.error("Gemini API error", model=route.model, error=str(e))
            raise ProviderError(self.provider.value, str(e)) from e

        usage = getattr(response, "usage_metadata", None)
        return ProviderResult(
            content=response.text or "",
            token_count=getattr(usage, "total_token_count", None) if usage else None,
        )

    async def stream(self, request: LLMRequest, route: TierRoute) -> AsyncIterator[str]:
        try:
            stream = await self.client.aio.models.generate_content_stream(
                model=route.model,
                contents=self._prompt(request),
                config=self._config(request, route),
            )
        except (genai_errors.APIError, httpx.HTTPError) as e:
            logger.error("Gemini API error", model=route.model, error=str(e))
            raise ProviderError(self.provider.value, str(e)) from e

        try:
            async for chunk in stream:
                text = chunk.text
                if text:
                    yield text
        except (genai_errors.APIError, httpx.HTTPError) as e:
            logger.error("Gemini stream error", model=route.model, error=str(e))
            raise ProviderError(self.provider.value, str(e)) from e
        finally:
            aclose = getattr(stream, "aclose", None)
            if aclose is not None:
                await aclose()
