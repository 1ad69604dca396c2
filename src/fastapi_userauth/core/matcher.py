"""Matcher normalization for protected paths.

Converts the user-supplied ``match`` option into a single predicate:
- "/admin" -> prefix match ending on a segment boundary
- "/admin*" -> "*" matches anything
- "/users/:id" -> ":id" matches exactly one segment
- re.compile(...) -> regex search against the path
- callable -> used as-is
"""

import logging
import re
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)

Matcher = Callable[[str], bool]

_TOKEN_PATTERN = re.compile(r":([A-Za-z_][A-Za-z0-9_]*)|\*")


def compile_path_pattern(pattern: str) -> re.Pattern[str]:
    """Compile a path pattern into a case-insensitive prefix regex.

    The pattern is matched against the start of the path and must end on a
    segment boundary. A trailing slash is optional on both sides.

    Args:
        pattern: Path pattern with optional ``:name`` and ``*`` tokens.

    Returns:
        Compiled regular expression.

    Examples:
        "/admin" matches "/admin", "/admin/", "/Admin/panel"; not "/administrator"
        "/admin*" matches "/admin/panel" and "/administrator"
        "/users/:id" matches "/users/42" and "/users/42/edit"; not "/users"
    """
    parts: list[str] = []
    position = 0
    for token in _TOKEN_PATTERN.finditer(pattern):
        parts.append(re.escape(pattern[position : token.start()]))
        parts.append("([^/]+?)" if token.group(1) else "(.*)")
        position = token.end()
    parts.append(re.escape(pattern[position:]))

    body = "".join(parts)
    if pattern.endswith("/"):
        body = body[:-1]

    return re.compile(f"^{body}(?:/(?=$))?(?=/|$)", re.IGNORECASE)


def _never(path: str) -> bool:
    return False


def normalize_matcher(match: Any) -> Matcher:
    """Normalize a match option to a ``path -> bool`` predicate.

    Accepts: path pattern string, compiled regex, or callable.
    Anything else protects nothing and logs a warning.

    Args:
        match: The match option given to create_config.

    Returns:
        Predicate deciding whether a path requires login.
    """
    if isinstance(match, str):
        compiled = compile_path_pattern(match)

        def match_pattern(path: str) -> bool:
            return compiled.match(path) is not None

        match_pattern.__name__ = f"match_pattern({match!r})"
        return match_pattern

    if isinstance(match, re.Pattern):

        def match_regex(path: str) -> bool:
            return match.search(path) is not None

        match_regex.__name__ = f"match_regex({match.pattern!r})"
        return match_regex

    if callable(match):

        def match_callable(path: str) -> bool:
            return bool(match(path))

        match_callable.__name__ = getattr(match, "__name__", "match_callable")
        return match_callable

    logger.warning(
        "No usable matcher configured; no path will require login",
        extra={"match_type": type(match).__name__},
    )
    return _never
