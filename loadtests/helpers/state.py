"""Per-user state tracking for Locust load test scenarios.

Each Locust user keeps its own state. Cookies (guest token, role tokens)
live in the user's HTTP session, so state only tracks the identifiers the
next step of a journey needs.
"""

from dataclasses import dataclass, field


@dataclass
class ShopperState:
    """Tracks one shopper's walk from search to confirmation."""

    product_ids: list[str] = field(default_factory=list)
    cart_item_ids: list[str] = field(default_factory=list)
    idempotency_key: str | None = None
    payment_method: str = "stripe"
    order_id: str | None = None
    confirmation_url: str | None = None


@dataclass
class VendorState:
    signed_in: bool = False
    verification_state: str | None = None
