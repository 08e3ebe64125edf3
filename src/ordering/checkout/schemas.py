"""Pydantic contracts for quotes and orders.

These are external contracts: the remote pricing authority computes every
amount and the client never recomputes them.
"""

from enum import Enum

from pydantic import BaseModel, Field

from ordering.cart.schemas import CartItem


class OrderStatus(Enum):
    PENDING_PAYMENT = "pending_payment"
    COD_CONFIRMED = "cod_confirmed"
    PAID = "paid"
    PAYMENT_FAILED = "payment_failed"


class QuoteShipment(BaseModel):
    vendor_id: str
    item_count: int = 0
    subtotal_cents: int = 0
    shipping_fee_cents: int = 0
    total_cents: int = 0
    items: list[CartItem] = Field(default_factory=list)


class CheckoutQuote(BaseModel):
    currency: str = "USD"
    item_count: int = 0
    shipment_count: int = 0
    subtotal_cents: int = 0
    shipping_cents: int = 0
    total_cents: int = 0
    shipments: list[QuoteShipment] = Field(default_factory=list)
    guest_token: str | None = None

    @property
    def is_empty(self) -> bool:
        return not self.shipments

    def shipment_for(self, vendor_id: str) -> QuoteShipment | None:
        return next((s for s in self.shipments if s.vendor_id == vendor_id), None)

    @property
    def totals_consistent(self) -> bool:
        """True when the shipment totals add up to the quote total."""
        return sum(s.total_cents for s in self.shipments) == self.total_cents


class OrderShipment(BaseModel):
    id: str
    vendor_id: str
    status: str = "pending"
    item_count: int = 0
    subtotal_cents: int = 0
    shipping_fee_cents: int = 0
    total_cents: int = 0


class OrderItem(BaseModel):
    id: str
    shipment_id: str
    product_id: str
    vendor_id: str
    title: str
    qty: int
    unit_price_cents: int
    line_total_cents: int
    currency: str = "USD"


class Order(BaseModel):
    id: str
    buyer_user_id: str | None = None
    guest_token: str | None = None
    # later lifecycle states (shipped, delivered, ...) pass through as plain strings
    status: OrderStatus | str = Field(OrderStatus.PENDING_PAYMENT, union_mode="left_to_right")
    currency: str = "USD"
    item_count: int = 0
    shipment_count: int = 0
    subtotal_cents: int = 0
    shipping_cents: int = 0
    discount_cents: int = 0
    tax_cents: int = 0
    total_cents: int = 0
    idempotency_key: str = ""
    shipments: list[OrderShipment] = Field(default_factory=list)
    items: list[OrderItem] = Field(default_factory=list)
    created_at: str | None = None


class OrderResponse(BaseModel):
    order: Order
    guest_token: str | None = None


class PlaceOrderRequest(BaseModel):
    idempotency_key: str = Field(..., min_length=8, max_length=128)
