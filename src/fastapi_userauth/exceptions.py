"""Exception hierarchy for user-auth middleware errors."""


class UserAuthError(Exception):
    """Base exception for all user-auth errors.

    This is the parent class for all exceptions raised by the
    fastapi-userauth package. Catching this exception will catch
    all configuration and hook-contract errors.

    Example:
        try:
            config = create_config("/admin", get_user=get_user)
        except UserAuthError as e:
            logger.error(f"Failed to configure auth: {e}")
    """


class ConfigurationError(UserAuthError):
    """Raised when auth options are invalid at construction time.

    This exception is raised when:
        - A required hook (get_user, login_url_formatter) is missing
        - A hook that must be async is a plain function
        - root_path does not start with '/'
        - login, login callback and logout paths collide

    Example:
        ConfigurationError(
            "login_path and logout_path must differ, both are '/login'"
        )
    """


class CallbackResultError(UserAuthError):
    """Raised when a hook returns a value of the wrong shape.

    This exception is raised at request time when:
        - login_callback does not return a (user, redirect_url) pair
        - redirect_handler returns None instead of a response

    Example:
        CallbackResultError(
            "login_callback must return (user, redirect_url), got dict"
        )
    """
