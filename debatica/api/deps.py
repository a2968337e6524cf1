"""FastAPI dependencies for the objects built at startup"""

from fastapi import Request

from config import Settings
from debatica.features.prompts import PromptStore
from debatica.features.runner import FeatureRunner
from debatica.llm.router import LLMRouter


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_llm_router(request: Request) -> LLMRouter:
    return request.app.state.llm_router


def get_prompt_store(request: Request) -> PromptStore:
    return request.app.state.prompt_store


def get_feature_runner(request: Request) -> FeatureRunner:
    return request.app.state.feature_runner
