"""The auth gate: classifies each request and drives the auth flows.

AuthGate is a ``(request, call_next)`` middleware, so it plugs into
``@app.middleware("http")``, Starlette's BaseHTTPMiddleware, or any other
pipeline using that signature.
"""

import logging
from collections.abc import Awaitable, Callable
from typing import Any
from urllib.parse import quote

from starlette.requests import Request
from starlette.responses import Response

from fastapi_userauth.core.classifier import PathKind, classify_path
from fastapi_userauth.core.config import UserAuthConfig
from fastapi_userauth.core.flows import (
    handle_login,
    handle_login_callback,
    handle_logout,
    has_session,
    unpack_login_result,
)
from fastapi_userauth.core.responder import redirect
from fastapi_userauth.exceptions import CallbackResultError

logger = logging.getLogger(__name__)

CallNext = Callable[[Request], Awaitable[Response]]

# Characters encodeURIComponent leaves alone beyond quote()'s defaults
_URI_COMPONENT_SAFE = "!*'()"


def current_url(request: Request) -> str:
    """Return the request target: path plus query string."""
    url = request.url.path
    if request.url.query:
        url = f"{url}?{request.url.query}"
    return url


def login_redirect_url(request: Request, config: UserAuthConfig) -> str:
    """Build ``$login_path?redirect=$current_url`` for an unauthenticated request.

    Falls back to the unencoded URL when it cannot be encoded.

    Examples:
        "/admin/panel" -> "/login?redirect=%2Fadmin%2Fpanel"
        "/admin?tab=1" -> "/login?redirect=%2Fadmin%3Ftab%3D1"
    """
    url = current_url(request)
    try:
        encoded = quote(url, safe=_URI_COMPONENT_SAFE)
    except UnicodeEncodeError:
        encoded = url
    return f"{config.login_path}?redirect={encoded}"


class AuthGate:
    """Request-gating middleware enforcing login on matched paths.

    Example:
        config = create_config("/admin*", get_user=get_user, login_url_formatter=fmt)
        app.middleware("http")(AuthGate(config))
        app.add_middleware(SessionMiddleware, secret_key="...")
    """

    def __init__(self, config: UserAuthConfig) -> None:
        self.config = config

    async def __call__(self, request: Request, call_next: CallNext) -> Response:
        config = self.config
        path = request.url.path
        session_present = has_session(request)
        kind = classify_path(path, config, has_session=session_present)

        logger.debug(
            "Classified request",
            extra={"path": path, "kind": kind.value, "has_session": session_present},
        )

        match kind:
            case PathKind.LOGIN:
                return await handle_login(request, config)
            case PathKind.LOGIN_CALLBACK:
                return await handle_login_callback(request, config)
            case PathKind.LOGOUT:
                return await handle_logout(request, config)
            case PathKind.UNPROTECTED:
                return await call_next(request)
            case PathKind.PROTECTED:
                return await self._protect(request, call_next)

    async def _protect(self, request: Request, call_next: CallNext) -> Response:
        config = self.config

        if request.session.get(config.user_field) is not None and config.login_check(request):
            logger.debug("Session already logged in", extra={"path": request.url.path})
            return await call_next(request)

        user = await self._resolve_user(request)
        if user is None:
            return await self._redirect_to_login(request)

        logger.debug("Resolved user directly from request", extra={"path": request.url.path})
        stored_user, redirect_url = unpack_login_result(
            await config.login_callback(request, user)
        )
        request.session[config.user_field] = stored_user
        if redirect_url:
            return redirect(request, redirect_url)
        return await call_next(request)

    async def _resolve_user(self, request: Request) -> Any:
        """Call get_user, treating any failure as "no user"."""
        try:
            return await self.config.get_user(request)
        except Exception:
            logger.exception(
                "get_user failed, treating request as unauthenticated",
                extra={"path": request.url.path},
            )
            return None

    async def _redirect_to_login(self, request: Request) -> Response:
        config = self.config

        async def proceed() -> Response:
            login_url = login_redirect_url(request, config)
            logger.debug("Redirecting to login path", extra={"login_url": login_url})
            return redirect(request, login_url)

        response = await config.redirect_handler(request, proceed)
        if response is None:
            raise CallbackResultError("redirect_handler must return a response, got None")
        return response
