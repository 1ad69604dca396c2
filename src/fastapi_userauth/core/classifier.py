"""Request path classification for the auth gate.

Decides which of the five auth states a request falls into:
- LOGIN: no session, or the login path
- LOGIN_CALLBACK: the login callback path
- LOGOUT: the logout path
- UNPROTECTED: the matcher does not require login
- PROTECTED: everything else
"""

from enum import Enum

from fastapi_userauth.core.config import UserAuthConfig


class PathKind(Enum):
    """Auth state of a request path."""

    LOGIN = "login"
    LOGIN_CALLBACK = "login_callback"
    LOGOUT = "logout"
    PROTECTED = "protected"
    UNPROTECTED = "unprotected"

    @property
    def is_flow(self) -> bool:
        """Check if this kind is handled by a login/callback/logout flow."""
        return self in (PathKind.LOGIN, PathKind.LOGIN_CALLBACK, PathKind.LOGOUT)


def classify_path(path: str, config: UserAuthConfig, *, has_session: bool) -> PathKind:
    """Classify a request path. First matching rule wins.

    Args:
        path: The request path.
        config: Resolved auth configuration.
        has_session: Whether a session collaborator is present on the request.

    Returns:
        The PathKind for this request.

    Examples:
        "/login" -> LOGIN
        "/anything" without a session -> LOGIN
        "/login/callback" -> LOGIN_CALLBACK
        "/admin/panel" with matcher "/admin" -> PROTECTED
        "/public" with matcher "/admin" -> UNPROTECTED
    """
    if not has_session or path == config.login_path:
        return PathKind.LOGIN
    if path == config.login_callback_path:
        return PathKind.LOGIN_CALLBACK
    if path == config.logout_path:
        return PathKind.LOGOUT
    if not config.matcher(path):
        return PathKind.UNPROTECTED
    return PathKind.PROTECTED
