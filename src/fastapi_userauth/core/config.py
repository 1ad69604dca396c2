"""Auth configuration and default hooks.

Provides UserAuthConfig, the immutable options object shared by the gate and
the login/callback/logout flows, and create_config() which validates and
derives the paths from user options.
"""

import inspect
import posixpath
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from starlette.requests import Request
from starlette.responses import Response

from fastapi_userauth.core.matcher import Matcher, normalize_matcher
from fastapi_userauth.exceptions import ConfigurationError

LOGIN_REFERER_KEY = "_loginReferer"

Proceed = Callable[[], Awaitable[Response]]


async def default_login_callback(request: Request, user: Any) -> tuple[Any, str | None]:
    """Store the resolved user as-is and keep the computed redirect."""
    return user, None


async def default_logout_callback(request: Request, user: Any) -> str | None:
    return None


def default_login_check(request: Request) -> bool:
    return True


async def default_redirect_handler(request: Request, proceed: Proceed) -> Response:
    """Perform the default redirect to the login path."""
    return await proceed()


@dataclass(frozen=True)
class UserAuthConfig:
    """Resolved auth options.

    Created once by create_config() and shared read-only by every request.

    Attributes:
        root_path: Application mount root.
        login_path: Path that starts the login flow.
        login_callback_path: Path the identity provider returns to.
        logout_path: Path that clears the session user.
        user_field: Session key holding the authenticated user.
        matcher: Predicate deciding whether a path requires login.
        login_url_formatter: Builds the identity provider URL from
            (callback_url, root_path).
        get_user: Async hook resolving a user from the request.
        login_callback: Async hook mapping a user to (stored_user, redirect_url).
        logout_callback: Async hook run before logout, returns redirect_url.
        login_check: Extra predicate for "session user counts as logged in".
        redirect_handler: Async hook wrapping the default login redirect.
        protocol: Scheme of the callback URL.
        host: Host of the callback URL; None uses the request's host.
    """

    root_path: str
    login_path: str
    login_callback_path: str
    logout_path: str
    user_field: str
    matcher: Matcher
    login_url_formatter: Callable[[str, str], str]
    get_user: Callable[[Request], Awaitable[Any]]
    login_callback: Callable[[Request, Any], Awaitable[Any]] = default_login_callback
    logout_callback: Callable[[Request, Any], Awaitable[str | None]] = default_logout_callback
    login_check: Callable[[Request], bool] = default_login_check
    redirect_handler: Callable[[Request, Proceed], Awaitable[Response]] = default_redirect_handler
    protocol: str = "http"
    host: str | None = None


def join_path(root_path: str, path: str) -> str:
    """Join a path under root_path and normalize it.

    Examples:
        ("/app", "/login") -> "/app/login"
        ("/app/", "login/callback") -> "/app/login/callback"
    """
    return posixpath.normpath(f"{root_path.rstrip('/')}/{path.lstrip('/')}")


def _is_async_callable(fn: Any) -> bool:
    if inspect.iscoroutinefunction(fn):
        return True
    return callable(fn) and inspect.iscoroutinefunction(getattr(fn, "__call__", None))


def _require_async(name: str, fn: Any) -> None:
    if not callable(fn):
        raise ConfigurationError(f"{name} must be an async callable, got {type(fn).__name__}")
    if not _is_async_callable(fn):
        raise ConfigurationError(
            f"{name} must be async, got sync function {getattr(fn, '__name__', fn)!r}"
        )


def _require_callable(name: str, fn: Any) -> None:
    if not callable(fn):
        raise ConfigurationError(f"{name} must be callable, got {type(fn).__name__}")
    if _is_async_callable(fn):
        raise ConfigurationError(
            f"{name} must be a plain function, got async {getattr(fn, '__name__', fn)!r}"
        )


def create_config(
    match: Any,
    *,
    get_user: Callable[[Request], Awaitable[Any]] | None = None,
    login_url_formatter: Callable[[str, str], str] | None = None,
    root_path: str = "/",
    login_path: str = "/login",
    login_callback_path: str | None = None,
    logout_path: str = "/logout",
    user_field: str = "user",
    login_callback: Callable[[Request, Any], Awaitable[Any]] | None = None,
    logout_callback: Callable[[Request, Any], Awaitable[str | None]] | None = None,
    login_check: Callable[[Request], bool] | None = None,
    redirect_handler: Callable[[Request, Proceed], Awaitable[Response]] | None = None,
    protocol: str = "http",
    host: str | None = None,
) -> UserAuthConfig:
    """Validate auth options and build an immutable UserAuthConfig.

    Args:
        match: Which paths need login: path pattern, compiled regex, or
            ``path -> bool`` callable. Anything else protects nothing.
        get_user: Async hook resolving the user from the request.
        login_url_formatter: Builds the identity provider URL from
            (callback_url, root_path).
        root_path: Application mount root, default "/".
        login_path: Default "/login".
        login_callback_path: Default ``login_path + "/callback"``.
        logout_path: Default "/logout".
        user_field: Session key of the logged in user, default "user".
        login_callback: Async ``(request, user) -> (stored_user, redirect_url)``.
        logout_callback: Async ``(request, user) -> redirect_url``.
        login_check: ``request -> bool``, True meaning logged in.
        redirect_handler: Async ``(request, proceed) -> Response`` wrapping
            the redirect to the login path.
        protocol: Scheme used for the callback URL, default "http".
        host: Host used for the callback URL, default the request's host.

    Returns:
        Frozen UserAuthConfig.

    Raises:
        ConfigurationError: If a required hook is missing, a hook has the
            wrong type, root_path is not absolute, or the auth paths collide.

    Example:
        config = create_config(
            "/admin*",
            get_user=get_user_from_header,
            login_url_formatter=lambda url, root: f"https://sso.example/login?cb={url}",
        )
    """
    if get_user is None:
        raise ConfigurationError("get_user is required")
    if login_url_formatter is None:
        raise ConfigurationError("login_url_formatter is required")
    if not root_path.startswith("/"):
        raise ConfigurationError(f"root_path must start with '/', got {root_path!r}")

    _require_async("get_user", get_user)
    _require_callable("login_url_formatter", login_url_formatter)

    login_callback = login_callback or default_login_callback
    logout_callback = logout_callback or default_logout_callback
    login_check = login_check or default_login_check
    redirect_handler = redirect_handler or default_redirect_handler

    _require_async("login_callback", login_callback)
    _require_async("logout_callback", logout_callback)
    _require_async("redirect_handler", redirect_handler)
    _require_callable("login_check", login_check)

    # Callback default derives from the unjoined login path
    login_callback_path = login_callback_path or login_path.rstrip("/") + "/callback"

    if root_path != "/":
        login_path = join_path(root_path, login_path)
        login_callback_path = join_path(root_path, login_callback_path)
        logout_path = join_path(root_path, logout_path)

    paths = {
        "login_path": login_path,
        "login_callback_path": login_callback_path,
        "logout_path": logout_path,
    }
    seen: dict[str, str] = {}
    for name, value in paths.items():
        if not value.startswith("/"):
            raise ConfigurationError(f"{name} must start with '/', got {value!r}")
        if value in seen:
            raise ConfigurationError(f"{seen[value]} and {name} must differ, both are {value!r}")
        seen[value] = name

    return UserAuthConfig(
        root_path=root_path,
        login_path=login_path,
        login_callback_path=login_callback_path,
        logout_path=logout_path,
        user_field=user_field,
        matcher=normalize_matcher(match),
        login_url_formatter=login_url_formatter,
        get_user=get_user,
        login_callback=login_callback,
        logout_callback=logout_callback,
        login_check=login_check,
        redirect_handler=redirect_handler,
        protocol=protocol,
        host=host,
    )
