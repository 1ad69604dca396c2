"""Login, login callback and logout flows.

Each flow ends the request with a redirect; none of them call the next
handler.

Login flow:
    1. Unauthenticated user is sent to ``$login_path?redirect=$current_url``.
    2. The login path stores the return destination in the session and
       redirects to the identity provider URL from login_url_formatter().
    3. The identity provider sends the user to ``$login_callback_path``.
    4. get_user() resolves the user, login_callback() maps it, the result
       is stored at ``session[user_field]`` and the user goes back to the
       stored destination.
    5. The logout path runs logout_callback(), clears the session user and
       redirects back.
"""

import logging
from collections.abc import Sequence
from typing import Any

from starlette.requests import Request
from starlette.responses import Response

from fastapi_userauth.core.config import LOGIN_REFERER_KEY, UserAuthConfig
from fastapi_userauth.core.referer import format_referer
from fastapi_userauth.core.responder import redirect
from fastapi_userauth.exceptions import CallbackResultError

logger = logging.getLogger(__name__)


def has_session(request: Request) -> bool:
    """Check if a session middleware populated this request."""
    return "session" in request.scope


def unpack_login_result(result: Any) -> tuple[Any, str | None]:
    """Split a login_callback result into (stored_user, redirect_url).

    Raises:
        CallbackResultError: If the result is not a two-item sequence.
    """
    if isinstance(result, (str, bytes)) or not isinstance(result, Sequence) or len(result) != 2:
        raise CallbackResultError(
            f"login_callback must return (user, redirect_url), got {type(result).__name__}"
        )
    stored_user, redirect_url = result
    return stored_user, redirect_url


def callback_url(request: Request, config: UserAuthConfig) -> str:
    """Build the absolute login callback URL handed to the identity provider."""
    host = config.host or request.headers.get("host") or request.url.netloc
    return f"{config.protocol}://{host}{config.login_callback_path}"


async def handle_login(request: Request, config: UserAuthConfig) -> Response:
    """Remember where to return and redirect to the identity provider."""
    if has_session(request):
        referer = format_referer(request, config.login_path, config.root_path)
        request.session[LOGIN_REFERER_KEY] = referer
        logger.debug("Stored login referer", extra={"referer": referer})

    login_url = config.login_url_formatter(callback_url(request, config), config.root_path)
    logger.debug("Redirecting to login URL", extra={"login_url": login_url})
    return redirect(request, login_url)


async def handle_login_callback(request: Request, config: UserAuthConfig) -> Response:
    """Complete login and return to the stored destination.

    Errors raised by get_user or login_callback propagate to the framework.
    """
    session = request.session
    referer = session.get(LOGIN_REFERER_KEY) or config.root_path

    if session.get(config.user_field) is not None:
        logger.debug("Login callback for an authenticated session", extra={"referer": referer})
        return redirect(request, referer)

    user = await config.get_user(request)
    if user is None:
        logger.debug("Login callback could not resolve a user", extra={"referer": referer})
        return redirect(request, referer)

    stored_user, redirect_url = unpack_login_result(await config.login_callback(request, user))
    session[config.user_field] = stored_user
    if redirect_url:
        referer = redirect_url

    logger.info("User logged in", extra={"user_field": config.user_field, "referer": referer})
    return redirect(request, referer)


async def handle_logout(request: Request, config: UserAuthConfig) -> Response:
    """Run logout_callback, clear the session user and redirect back.

    Errors raised by logout_callback propagate to the framework.
    """
    referer = format_referer(request, config.logout_path, config.root_path)
    session = request.session
    user = session.get(config.user_field)
    if user is None:
        logger.debug("Logout without a session user", extra={"referer": referer})
        return redirect(request, referer)

    redirect_url = await config.logout_callback(request, user)
    session.pop(config.user_field, None)
    if redirect_url:
        referer = redirect_url

    logger.info("User logged out", extra={"user_field": config.user_field, "referer": referer})
    return redirect(request, referer)
