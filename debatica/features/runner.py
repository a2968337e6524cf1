"""
Feature runner

Loads the feature's prompt, assembles the user input and hands the request
to the LLM router.
"""

from typing import AsyncIterator, Iterable, Optional, Union

import structlog

from debatica.features.inputs import DEFAULT_USER_INPUT, ConnectedFile, enhance_user_input
from debatica.features.prompts import PromptStore
from debatica.llm.models import LLMRequest, LLMResponse, Tier
from debatica.llm.router import LLMRouter

logger = structlog.get_logger(__name__)


class FeatureRunner:
    """Runs a feature against the router"""

    def __init__(
        self,
        router: LLMRouter,
        prompt_store: PromptStore,
        default_tier: Union[Tier, str] = Tier.FAST,
    ):
        self.router = router
        self.prompt_store = prompt_store
        self.default_tier = Tier(default_tier)

    def prepare(
        self,
        feature: str,
        user_input: str = "",
        tier: Optional[Union[Tier, str]] = None,
        files: Iterable[ConnectedFile] = (),
        temperature: Optional[float] = None,
        stream: bool = False,
    ) -> LLMRequest:
        """Build the request descriptor for one invocation"""
        system_prompt = self.prompt_store.load(feature)

        files = list(files)
        text = user_input if user_input and user_input.strip() else DEFAULT_USER_INPUT
        enhanced = enhance_user_input(text, files)
        if files:
            logger.info(
                "Enhanced user input with files",
                feature=feature,
                files=len(files),
                input_chars=len(enhanced),
            )

        return LLMRequest(
            tier=tier if tier is not None else self.default_tier,
            system_prompt=system_prompt,
            user_input=enhanced,
            stream=stream,
            temperature=temperature,
        )

    async def run(self, feature: str, **kwargs) -> LLMResponse:
        request = self.prepare(feature, stream=False, **kwargs)
        return await self.router.generate(request)

    def stream(self, feature: str, **kwargs) -> AsyncIterator[str]:
        """Raises prompt, tier and configuration errors before returning"""
        request = self.prepare(feature, stream=True, **kwargs)
        return self.router.stream(request)
