"""
Authentication Middleware
Optional API key gate, enabled when API_KEY is set
"""

import hmac
from typing import Iterable, Optional

from fastapi import FastAPI, Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

import structlog

from debatica.core.exceptions import AuthenticationError

logger = structlog.get_logger(__name__)


def public_paths(app: FastAPI) -> set[str]:
    """Health check plus whichever docs routes the app serves"""
    paths = {"/health"}
    if app.docs_url:
        paths.add(app.docs_url)
        if app.swagger_ui_oauth2_redirect_url:
            paths.add(app.swagger_ui_oauth2_redirect_url)
    paths.update(p for p in (app.redoc_url, app.openapi_url) if p)
    return paths


class AuthMiddleware(BaseHTTPMiddleware):
    """
    Checks the X-API-Key header or the api_key query parameter.

    CORS preflight requests and ``public`` paths pass through unchecked.
    Rejections use the same error body as every other API error.
    """

    def __init__(self, app, api_key: str, public: Iterable[str] = ("/health",)):
        super().__init__(app)
        self._api_key = api_key.encode()
        self.public = frozenset(public)

    def _verify_key(self, provided_key: Optional[str]) -> bool:
        if not provided_key:
            return False
        return hmac.compare_digest(provided_key.encode(), self._api_key)

    async def dispatch(self, request: Request, call_next):
        path = request.url.path
        if request.method == "OPTIONS" or path in self.public:
            return await call_next(request)

        provided = request.headers.get("X-API-Key") or request.query_params.get("api_key")
        if self._verify_key(provided):
            return await call_next(request)

        error = AuthenticationError(path)
        logger.warning(
            "Authentication failed",
            path=path,
            key_provided=bool(provided),
            client_ip=request.client.host if request.client else "unknown",
        )
        return JSONResponse(
            status_code=error.status_code,
            content=error.to_dict(),
            headers={"WWW-Authenticate": "ApiKey"},
        )
