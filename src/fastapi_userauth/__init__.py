"""Login/logout redirect middleware for FastAPI and Starlette."""

# Primary API — the main entry points
from fastapi_userauth.core.classifier import PathKind, classify_path
from fastapi_userauth.core.config import UserAuthConfig, create_config
from fastapi_userauth.core.gate import AuthGate
from fastapi_userauth.core.referer import format_referer
from fastapi_userauth.core.responder import redirect

# Exceptions — for error handling
from fastapi_userauth.exceptions import (
    CallbackResultError,
    ConfigurationError,
    UserAuthError,
)
from fastapi_userauth.fastapi.middleware import UserAuthMiddleware, install_userauth

__all__ = [
    # Primary API
    "install_userauth",
    "UserAuthMiddleware",
    "AuthGate",
    "create_config",
    # Core types
    "PathKind",
    "UserAuthConfig",
    # Helpers
    "classify_path",
    "format_referer",
    "redirect",
    # Exceptions
    "CallbackResultError",
    "ConfigurationError",
    "UserAuthError",
]

__version__ = "1.0.0"
