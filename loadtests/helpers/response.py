"""Response error extraction for load test observability.

Parses storefront responses into human-readable messages. Handles three
shapes:

- Pydantic validation (422): {"detail": [{"loc": [...], "msg": "...", "type": "..."}]}
- Page data errors: {"error": "quote-unavailable"} or {"error": {"code": "...", "message": "..."}}
- Action redirects (303): the error flag travels in the Location query string
"""

from __future__ import annotations

from typing import TYPE_CHECKING
from urllib.parse import parse_qs, urlsplit

if TYPE_CHECKING:
    from requests import Response


def redirect_error(response: Response) -> str | None:
    """Return the ``error`` flag of a storefront action redirect, if any."""
    location = response.headers.get("location", "")
    values = parse_qs(urlsplit(location).query).get("error")
    return values[0] if values else None


def extract_error_detail(response: Response) -> str:
    """Extract a human-readable error message from a storefront response.

    Returns a compact string suitable for Locust failure messages and log lines.
    """
    if 300 <= response.status_code < 400:
        flag = redirect_error(response)
        return flag or f"redirect to {response.headers.get('location', '?')}"

    try:
        body = response.json()
    except ValueError:
        text = getattr(response, "text", "") or ""
        return text[:300] or "(empty response body)"

    if isinstance(body, dict) and isinstance(body.get("detail"), list):
        parts = []
        for err in body["detail"]:
            loc = ".".join(str(p) for p in err.get("loc", []))
            msg = err.get("msg", str(err))
            parts.append(f"{loc}: {msg}" if loc else msg)
        return " | ".join(parts)

    if isinstance(body, dict) and body.get("error"):
        error = body["error"]
        if isinstance(error, dict):
            return " | ".join(f"{k}: {v}" for k, v in error.items())
        return str(error)

    return str(body)[:300]
