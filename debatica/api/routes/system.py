"""System API Routes"""

from fastapi import APIRouter, Depends

from config import Settings
from debatica.api.deps import get_app_settings, get_llm_router, get_prompt_store
from debatica.features.prompts import PromptStore
from debatica.llm.router import LLMRouter

router = APIRouter()


@router.get("/tiers")
async def list_tiers(llm_router: LLMRouter = Depends(get_llm_router)):
    """Tiers with their provider, model and whether they can be used"""
    return {
        "tiers": [
            {
                "tier": tier.value,
                "provider": route.provider.value,
                "model": route.model,
                "temperature": route.temperature,
                "credential": route.credential,
                "available": llm_router.is_available(tier),
            }
            for tier, route in llm_router.routes.items()
        ]
    }


@router.get("/features")
async def list_features(store: PromptStore = Depends(get_prompt_store)):
    """Feature identifiers that have a prompt template"""
    return {"features": store.list_features()}


@router.get("/config")
async def get_config(settings: Settings = Depends(get_app_settings)):
    """Get system configuration (non-sensitive)"""
    return {
        "app_name": settings.app_name,
        "app_env": settings.app_env,
        "auth_enabled": settings.auth_enabled,
        "llm": {
            "default_tier": settings.llm.default_tier,
            "precise_temperature": settings.llm.precise_temperature,
            "default_temperature": settings.llm.default_temperature,
        },
        "models": {
            "precise": settings.openai.precise_model,
            "balanced": settings.openai.balanced_model,
            "fast": settings.google.fast_model,
        },
    }
