"""
API Middleware
"""

from debatica.api.middleware.auth import AuthMiddleware, public_paths

__all__ = ["AuthMiddleware", "public_paths"]
