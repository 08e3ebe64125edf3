"""Error taxonomy shared by every storefront context.

Malformed local input is reported with protean's ``ValidationError`` (raised
before any network call). The exceptions below cover the remaining failure
classes: missing identity, upstream failures, and the two checkout-specific
outcomes.
"""

from protean.exceptions import ValidationError

__all__ = [
    "AmbiguousOutcome",
    "AuthRequired",
    "PlacementFailed",
    "UpstreamError",
    "UpstreamUnavailable",
    "ValidationError",
]


class AuthRequired(Exception):
    """An operation needs an identity token that the session does not hold."""

    def __init__(self, role) -> None:
        self.role = role
        super().__init__(f"{getattr(role, 'value', role)} token required")


class UpstreamError(Exception):
    """The remote marketplace API answered with a non-2xx status or an unusable body."""

    def __init__(self, status: int | None, message: str = "", code: str | None = None) -> None:
        self.status = status
        self.message = message
        self.code = code
        super().__init__(f"api request failed: {status}" + (f" ({message})" if message else ""))

    @property
    def is_conflict(self) -> bool:
        return self.status == 409


class UpstreamUnavailable(UpstreamError):
    """The remote API could not be reached at all (DNS, connect, timeout)."""

    def __init__(self, message: str = "") -> None:
        super().__init__(None, message, code="unavailable")


class PlacementFailed(Exception):
    """Order placement was rejected; no payment call was attempted."""

    def __init__(self, idempotency_key: str, cause: Exception | None = None) -> None:
        self.idempotency_key = idempotency_key
        self.cause = cause
        super().__init__(f"order placement failed for key {idempotency_key!r}")


class AmbiguousOutcome(Exception):
    """A payment call failed after the order already exists.

    The order must be shown as pending with a method-specific caveat and must
    never be resubmitted.
    """

    def __init__(
        self,
        order_id: str,
        method,
        fallback_status: str,
        flag: str,
        reason: str = "",
    ) -> None:
        self.order_id = order_id
        self.method = method
        self.fallback_status = fallback_status
        self.flag = flag
        self.reason = reason
        super().__init__(f"payment for order {order_id} is ambiguous: {flag}")
