"""FastAPI adapter for user auth."""

from fastapi_userauth.fastapi.middleware import UserAuthMiddleware, install_userauth

__all__ = ["UserAuthMiddleware", "install_userauth"]
