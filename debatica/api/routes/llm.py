"""Feature invocation routes"""

from typing import AsyncIterator, Optional

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse
from pydantic import AliasChoices, BaseModel, Field
import structlog

from debatica.api.deps import get_feature_runner
from debatica.core.exceptions import DebaticaException, StreamAborted
from debatica.features.inputs import ConnectedFile
from debatica.features.runner import FeatureRunner
from debatica.llm.models import Tier

logger = structlog.get_logger(__name__)

router = APIRouter()

STREAM_HEADERS = {
    "Cache-Control": "no-cache",
    "X-Accel-Buffering": "no",
}


class FeatureExtra(BaseModel):
    connected_files: list[ConnectedFile] = Field(
        default_factory=list,
        validation_alias=AliasChoices("connected_files", "connectedFiles"),
    )


class FeatureRunRequest(BaseModel):
    """Invocation of one feature"""

    feature: str = Field(min_length=1, max_length=100)
    tier: Optional[Tier] = None
    user_input: str = Field(
        default="",
        max_length=200_000,
        validation_alias=AliasChoices("user_input", "userInput"),
    )
    temperature: Optional[float] = Field(default=None, ge=0, le=2)
    stream: bool = True
    extra: FeatureExtra = Field(default_factory=FeatureExtra)


class FeatureRunResponse(BaseModel):
    content: str
    token_count: Optional[int] = None
    latency_ms: int
    tier: Optional[str] = None
    provider: Optional[str] = None
    model: Optional[str] = None


async def _encode(
    feature: str,
    first: Optional[str],
    fragments: AsyncIterator[str],
) -> AsyncIterator[bytes]:
    sent = 0
    try:
        if first is not None:
            sent += 1
            yield first.encode("utf-8")
        async for fragment in fragments:
            sent += 1
            yield fragment.encode("utf-8")
    except DebaticaException as e:
        logger.warning(
            "Feature stream aborted",
            feature=feature,
            fragments_sent=sent,
            error=e.code,
            message=e.message,
        )
        raise StreamAborted(e) from e
    finally:
        await fragments.aclose()


@router.post("", response_model=FeatureRunResponse)
async def run_feature(
    payload: FeatureRunRequest,
    runner: FeatureRunner = Depends(get_feature_runner),
):
    """Run a feature; streams plain text unless ``stream`` is false"""
    options = {
        "user_input": payload.user_input,
        "tier": payload.tier,
        "files": payload.extra.connected_files,
        "temperature": payload.temperature,
    }

    if not payload.stream:
        response = await runner.run(payload.feature, **options)
        return response.to_dict()

    # Prompt, tier and credential errors raise here
    fragments = runner.stream(payload.feature, **options)

    # Upstream failures before the first fragment still get an error status
    try:
        first = await fragments.__anext__()
    except StopAsyncIteration:
        first = None

    return StreamingResponse(
        _encode(payload.feature, first, fragments),
        media_type="text/plain; charset=utf-8",
        headers=STREAM_HEADERS,
    )
