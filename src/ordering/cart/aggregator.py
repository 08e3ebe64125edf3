"""Cart Aggregator — session-scoped cart mutations over the remote cart API.

Each mutation is one REST call that answers with the full updated cart and,
possibly, a rotated guest token. The token is adopted before the method
returns so the next call in the same flow never uses a stale one.
"""

from urllib.parse import quote

import structlog
from protean.exceptions import ValidationError
from pydantic import ValidationError as SchemaError

from identity.tokens import SessionContext
from ordering.cart.schemas import MAX_LINE_QTY, Cart, CartItemMutation, CartItemQty
from shared.errors import UpstreamError
from shared.transport import TransportClient

logger = structlog.get_logger(__name__)


def clamp_qty(raw, default: int = 1) -> int:
    """Coerce user input to a line quantity in ``[1, MAX_LINE_QTY]``.

    Non-numeric or non-positive input yields ``default``; the server enforces
    the real bound.
    """
    if isinstance(raw, bool):
        return default
    if isinstance(raw, int):
        value = raw
    else:
        try:
            value = int(str(raw).strip())
        except (TypeError, ValueError):
            return default
    if value <= 0:
        return default
    return min(value, MAX_LINE_QTY)


def _require_id(field: str, value: str | None) -> str:
    cleaned = (value or "").strip()
    if not cleaned:
        raise ValidationError({field: [f"{field} is required"]})
    return cleaned


class CartAggregator:
    def __init__(self, transport: TransportClient) -> None:
        self.transport = transport

    async def get_cart(self, session: SessionContext) -> Cart:
        """Current cart; an unreachable cart service reads as an empty cart."""
        try:
            result = await self.transport.request("/cart", credential=session.credential())
        except UpstreamError as exc:
            logger.warning("cart_unavailable", status=exc.status)
            return Cart(guest_token=session.guest_token)
        session.adopt_guest_token(result.guest_token)
        try:
            return Cart.model_validate(result.payload)
        except SchemaError as exc:
            logger.warning("cart_unreadable", errors=exc.error_count())
            return Cart(guest_token=session.guest_token)

    async def add(self, session: SessionContext, product_id: str, qty=1) -> Cart:
        body = CartItemMutation(product_id=_require_id("product_id", product_id), qty=clamp_qty(qty))
        return await self._mutate(session, "/cart/items", "POST", body.model_dump())

    async def set_qty(self, session: SessionContext, item_id: str, qty) -> Cart:
        item_id = _require_id("item_id", item_id)
        body = CartItemQty(qty=clamp_qty(qty))
        return await self._mutate(session, f"/cart/items/{quote(item_id, safe='')}", "PATCH", body.model_dump())

    async def remove(self, session: SessionContext, item_id: str) -> Cart:
        item_id = _require_id("item_id", item_id)
        return await self._mutate(session, f"/cart/items/{quote(item_id, safe='')}", "DELETE", None)

    async def _mutate(self, session: SessionContext, path: str, method: str, body) -> Cart:
        result = await self.transport.request(path, method=method, body=body, credential=session.credential())
        session.adopt_guest_token(result.guest_token)
        try:
            cart = Cart.model_validate(result.payload)
        except SchemaError as exc:
            # The mutation may have applied; the reply is unusable either way
            raise UpstreamError(result.status_code, "cart reply is not a valid cart", code="invalid_cart") from exc
        logger.info("cart_mutated", method=method, path=path, item_count=cart.item_count)
        return cart
