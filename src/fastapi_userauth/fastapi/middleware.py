"""FastAPI/Starlette adapter for the auth gate."""

import logging
from typing import Any

from fastapi import FastAPI
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.middleware.sessions import SessionMiddleware
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from fastapi_userauth.core.config import UserAuthConfig, create_config
from fastapi_userauth.core.gate import AuthGate
from fastapi_userauth.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class UserAuthMiddleware(BaseHTTPMiddleware):
    """Starlette middleware wrapping an AuthGate.

    Accepts either a prebuilt ``config`` or ``match`` plus create_config()
    keyword options. A session middleware must be added after this one so
    that it wraps the gate.

    Example:
        app.add_middleware(
            UserAuthMiddleware,
            match="/admin*",
            get_user=get_user,
            login_url_formatter=fmt,
        )
        app.add_middleware(SessionMiddleware, secret_key="...")
    """

    def __init__(
        self,
        app: ASGIApp,
        match: Any = None,
        *,
        config: UserAuthConfig | None = None,
        **options: Any,
    ) -> None:
        super().__init__(app)
        if config is not None and (match is not None or options):
            raise ConfigurationError("Pass either config or match/options, not both")
        self.gate = AuthGate(config if config is not None else create_config(match, **options))

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        return await self.gate(request, call_next)


def install_userauth(
    app: FastAPI,
    match: Any,
    *,
    secret_key: str | None = None,
    **options: Any,
) -> UserAuthConfig:
    """Add user auth (and optionally cookie sessions) to a FastAPI app.

    Args:
        app: The FastAPI application.
        match: Which paths need login, see create_config().
        secret_key: When given, Starlette's SessionMiddleware is added
            around the gate with this signing key.
        **options: Keyword options for create_config().

    Returns:
        The resolved UserAuthConfig.

    Example:
        install_userauth(
            app,
            "/admin*",
            secret_key=os.environ["SESSION_SECRET"],
            get_user=get_user,
            login_url_formatter=fmt,
        )
    """
    config = create_config(match, **options)
    app.add_middleware(UserAuthMiddleware, config=config)
    if secret_key is not None:
        app.add_middleware(SessionMiddleware, secret_key=secret_key)

    logger.info(
        "Installed user auth",
        extra={
            "login_path": config.login_path,
            "login_callback_path": config.login_callback_path,
            "logout_path": config.logout_path,
            "sessions": secret_key is not None,
        },
    )
    return config
