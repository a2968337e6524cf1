"""
FastAPI Application - Main API for Debatica
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import structlog

from config import Settings, get_settings
from debatica import __version__
from debatica.api.middleware.auth import AuthMiddleware, public_paths
from debatica.core.exceptions import DebaticaException, StreamAborted
from debatica.core.logging import configure_logging
from debatica.features.prompts import PromptStore
from debatica.features.runner import FeatureRunner
from debatica.llm.router import LLMRouter, build_router

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan - startup and shutdown events"""
    settings: Settings = app.state.settings
    logger.info(
        "Starting Debatica",
        env=settings.app_env,
        tiers={
            tier.value: app.state.llm_router.is_available(tier)
            for tier in app.state.llm_router.routes
        },
        features=len(app.state.prompt_store.list_features()),
    )

    yield

    logger.info("Debatica stopped")


def create_app(
    settings: Optional[Settings] = None,
    llm_router: Optional[LLMRouter] = None,
    prompt_store: Optional[PromptStore] = None,
) -> FastAPI:
    """Create and configure the FastAPI application"""
    settings = settings or get_settings()
    configure_logging(settings)

    app = FastAPI(
        title="Debatica",
        description="AI-assisted writing tools for debate students",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
    )

    # Provider clients are built once here and shared by every request
    llm_router = llm_router or build_router(settings)
    prompt_store = prompt_store or PromptStore(settings.prompts.dir)

    app.state.settings = settings
    app.state.llm_router = llm_router
    app.state.prompt_store = prompt_store
    app.state.feature_runner = FeatureRunner(
        llm_router,
        prompt_store,
        default_tier=settings.llm.default_tier,
    )

    if settings.auth_enabled:
        app.add_middleware(
            AuthMiddleware,
            api_key=settings.api_key.get_secret_value(),
            public=public_paths(app),
        )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["X-API-Key", "Content-Type", "Authorization"],
    )

    # Exception handlers
    @app.exception_handler(DebaticaException)
    async def debatica_exception_handler(
        request: Request,
        exc: DebaticaException,
    ) -> JSONResponse:
        logger.warning(
            "Request failed",
            path=request.url.path,
            error=exc.code,
            message=exc.message,
        )
        return JSONResponse(
            status_code=exc.status_code,
            content=exc.to_dict(),
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        # Already logged by the streaming route; the response is not sent
        if not isinstance(exc, StreamAborted):
            logger.error("Unhandled exception", error=str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "error": "INTERNAL_ERROR",
                "message": "An unexpected error occurred",
            },
        )

    # Include routers
    from .routes import documents, llm, system
    app.include_router(llm.router, prefix="/api/llm", tags=["llm"])
    app.include_router(documents.router, prefix="/api", tags=["documents"])
    app.include_router(system.router, prefix="/api/system", tags=["system"])

    @app.get("/health")
    async def health_check():
        return {
            "status": "healthy",
            "version": __version__,
        }

    return app


app = create_app()
