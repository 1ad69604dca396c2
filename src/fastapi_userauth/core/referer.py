"""Safe post-login / post-logout return destinations."""

from starlette.requests import Request

_PROTOCOL_RELATIVE_PREFIXES = ("//", "/\\")


def format_referer(request: Request, pathname: str, root_path: str) -> str:
    """Compute where to send the user after login or logout.

    Takes ``?redirect=``, else the Referer header, else root_path. Falls back
    to root_path when the value is not a local absolute path or when it
    contains ``pathname`` (which would loop back into the auth flow).

    Args:
        request: The current request.
        pathname: The auth path being visited (login or logout path).
        root_path: Application mount root.

    Returns:
        A local path to redirect to.

    Examples:
        ?redirect=/admin/panel -> "/admin/panel"
        Referer: http://evil.example/x -> root_path
        Referer: //evil.example/x -> root_path
        ?redirect=/login?redirect=/x on the login path -> root_path
    """
    referer = request.query_params.get("redirect") or request.headers.get("referer") or root_path

    if not referer.startswith("/") or referer.startswith(_PROTOCOL_RELATIVE_PREFIXES):
        return root_path
    if pathname in referer:
        return root_path
    return referer
