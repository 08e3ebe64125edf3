"""Outbound request executor for the marketplace REST API.

A single place that attaches identity headers, serializes bodies and turns
responses into ``ApiCallResult`` objects. It never retries: a blind retry of a
non-idempotent call could double-submit, so retry policy belongs to the
callers that own an idempotency key.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Mapping

import httpx
import structlog

from shared.config import Settings
from shared.errors import UpstreamError, UpstreamUnavailable

logger = structlog.get_logger(__name__)

GUEST_TOKEN_HEADER = "X-Guest-Token"
GUEST_TOKEN_FIELD = "guest_token"


@dataclass(frozen=True)
class ApiCallResult:
    """Normalized outcome of one successful call."""

    payload: Any = field(default_factory=dict)
    guest_token: str | None = None
    status_code: int = 200


@dataclass(frozen=True)
class ApiDownload:
    """A successful binary response (invoice PDFs)."""

    content: bytes
    content_type: str | None = None
    content_disposition: str | None = None
    guest_token: str | None = None


def build_query(params: Mapping[str, Any]) -> dict[str, str]:
    """Drop unset values and stringify the rest for a query string."""
    query = {}
    for key, value in params.items():
        if value is None or value == "":
            continue
        query[key] = str(value)
    return query


def extract_error_detail(response: httpx.Response) -> tuple[str | None, str]:
    """Pull ``(code, message)`` out of an API error body.

    Handles ``{"error": {"code": ..., "message": ...}}``, ``{"error": "msg"}``
    and pydantic-style ``{"detail": [...]}`` bodies; anything else falls back
    to the truncated raw text.
    """
    try:
        body = response.json()
    except ValueError:
        return None, (response.text or "")[:300]

    if not isinstance(body, dict):
        return None, str(body)[:300]

    error = body.get("error")
    if isinstance(error, dict):
        return error.get("code"), str(error.get("message", ""))
    if error is not None:
        return None, str(error)

    detail = body.get("detail")
    if isinstance(detail, list):
        parts = []
        for err in detail:
            loc = ".".join(str(p) for p in err.get("loc", [])) if isinstance(err, dict) else ""
            msg = err.get("msg", str(err)) if isinstance(err, dict) else str(err)
            parts.append(f"{loc}: {msg}" if loc else msg)
        return None, " | ".join(parts)
    if detail is not None:
        return None, str(detail)

    return None, str(body)[:300]


class TransportClient:
    """Async JSON client bound to the configured API base URL."""

    def __init__(self, settings: Settings | None = None, client: httpx.AsyncClient | None = None) -> None:
        self.settings = settings or Settings.from_env()
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=self.settings.api_base_url,
            timeout=self.settings.timeout_seconds,
        )

    async def __aenter__(self) -> "TransportClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def request(
        self,
        path: str,
        method: str = "GET",
        body: Any = None,
        credential=None,
        params: Mapping[str, Any] | None = None,
    ) -> ApiCallResult:
        """Execute one call and normalize the result.

        Args:
            path: API path relative to the base URL, e.g. ``/cart/items``.
            method: HTTP verb.
            body: JSON-serializable body; ``None`` sends no body.
            credential: Optional ``identity.tokens.Credential``; contributes
                exactly one identity header.
            params: Optional query parameters; unset values are dropped.

        Raises:
            UpstreamError: the API answered with a non-2xx status.
            UpstreamUnavailable: the API could not be reached.
        """
        content = None if body is None else json.dumps(body)
        query = build_query(params) if params else None
        response = await self._send(method, path, credential, {"Content-Type": "application/json"}, content, query)

        header_token = response.headers.get(GUEST_TOKEN_HEADER) or None
        if response.status_code == 204:
            return ApiCallResult(payload={}, guest_token=header_token, status_code=204)

        raw = response.text
        try:
            payload = json.loads(raw) if raw else {}
        except ValueError as exc:
            raise UpstreamError(response.status_code, "response body is not valid JSON") from exc

        body_token = None
        if isinstance(payload, dict):
            body_token = payload.get(GUEST_TOKEN_FIELD) or None

        return ApiCallResult(
            payload=payload,
            guest_token=header_token or body_token,
            status_code=response.status_code,
        )

    async def download(self, path: str, credential=None) -> ApiDownload:
        """GET a binary resource; failures raise like ``request``."""
        response = await self._send("GET", path, credential, {"Accept": "*/*"}, None, None)
        return ApiDownload(
            content=response.content,
            content_type=response.headers.get("Content-Type"),
            content_disposition=response.headers.get("Content-Disposition"),
            guest_token=response.headers.get(GUEST_TOKEN_HEADER) or None,
        )

    async def _send(self, method: str, path: str, credential, headers: dict, content, query) -> httpx.Response:
        if credential is not None:
            name, value = credential.header()
            headers[name] = value

        logger.debug("api_request", method=method, path=path, role=getattr(credential, "role", None))
        try:
            response = await self._client.request(method, path, headers=headers, content=content, params=query)
        except httpx.TransportError as exc:
            logger.warning("api_unreachable", method=method, path=path, error=str(exc))
            raise UpstreamUnavailable(str(exc)) from exc

        if not response.is_success:
            code, message = extract_error_detail(response)
            logger.warning(
                "api_request_failed",
                method=method,
                path=path,
                status=response.status_code,
                code=code,
                message=message,
            )
            raise UpstreamError(response.status_code, message, code=code)
        return response
