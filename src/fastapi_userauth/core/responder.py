"""Redirect responses with an HTML-vs-JSON split.

Browsers get a real redirect. API clients that prefer JSON get a 401 with
the destination in the Location header, since a redirect to an identity
provider is useless to them.
"""

import logging

from starlette.requests import Request
from starlette.responses import JSONResponse, RedirectResponse, Response

logger = logging.getLogger(__name__)

_HTML = ("text", "html")
_JSON = ("application", "json")
_CANDIDATES = (_HTML, _JSON)


def _parse_accept(header: str) -> list[tuple[str, str, float]]:
    """Parse an Accept header into (type, subtype, q) entries.

    Entries with parameters other than q are dropped, as they can never
    match the parameterless HTML and JSON types.
    """
    entries: list[tuple[str, str, float]] = []
    for raw in header.split(","):
        media_range, *params = (part.strip() for part in raw.split(";"))
        if "/" not in media_range:
            continue
        type_, subtype = (piece.strip().lower() for piece in media_range.split("/", 1))

        quality = 1.0
        extra_params = False
        for param in params:
            key, _, value = param.partition("=")
            if key.strip().lower() == "q":
                try:
                    quality = float(value.strip())
                except ValueError:
                    quality = 0.0
            elif key.strip():
                extra_params = True
        if extra_params:
            continue
        entries.append((type_, subtype, quality))
    return entries


def _priority(
    media: tuple[str, str],
    entries: list[tuple[str, str, float]],
) -> tuple[int, float, int] | None:
    """Find the best matching Accept entry as (specificity, q, index)."""
    best: tuple[int, float, int] | None = None
    for index, (type_, subtype, quality) in enumerate(entries):
        specificity = 0
        if type_ == media[0]:
            specificity |= 4
        elif type_ != "*":
            continue
        if subtype == media[1]:
            specificity |= 2
        elif subtype != "*":
            continue
        candidate = (specificity, quality, index)
        if best is None or candidate > best:
            best = candidate
    return best


def prefers_json(request: Request) -> bool:
    """Check if the client prefers JSON over HTML.

    Candidates are ranked by q-value, then match specificity, then position
    in the Accept header, then HTML before JSON. A missing Accept header
    means HTML.

    Examples:
        "application/json" -> True
        "text/html, application/json" -> False
        "application/json, text/html" -> True
        "text/html;q=0.5, application/json" -> True
        "*/*" -> False
    """
    header = request.headers.get("accept")
    if not header:
        return False

    entries = _parse_accept(header)
    ranked = []
    for order, media in enumerate(_CANDIDATES):
        priority = _priority(media, entries)
        if priority is None or priority[1] <= 0:
            continue
        specificity, quality, index = priority
        ranked.append((-quality, -specificity, index, order, media))

    if not ranked:
        return False
    return min(ranked)[4] == _JSON


def redirect(request: Request, url: str, status_code: int = 302) -> Response:
    """Send a redirect, or a JSON 401 for clients that prefer JSON.

    Args:
        request: The current request.
        url: Redirect destination.
        status_code: Redirect status for HTML clients, default 302.

    Returns:
        RedirectResponse, or JSONResponse with status 401 and a Location header.
    """
    if prefers_json(request):
        logger.debug("Responding 401 to JSON client", extra={"location": url})
        return JSONResponse(
            {"error": "401 Unauthorized"},
            status_code=401,
            headers={"Location": url},
        )
    logger.debug("Redirecting", extra={"location": url, "status_code": status_code})
    return RedirectResponse(url, status_code=status_code)
