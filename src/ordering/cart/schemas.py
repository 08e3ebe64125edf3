"""Pydantic contracts for the remote cart endpoints."""

from pydantic import BaseModel, Field

MAX_LINE_QTY = 999


class CartItem(BaseModel):
    id: str
    product_id: str
    vendor_id: str
    title: str
    qty: int = Field(ge=1, le=MAX_LINE_QTY)
    unit_price_cents: int = Field(ge=0)
    line_total_cents: int = Field(0, ge=0)
    currency: str = "USD"
    available_stock: int = 0
    last_updated_unix: int = 0


class Cart(BaseModel):
    id: str = ""
    currency: str = "USD"
    item_count: int = 0
    subtotal_cents: int = 0
    items: list[CartItem] = Field(default_factory=list)
    updated_at: str = "1970-01-01T00:00:00Z"
    guest_token: str | None = None

    @property
    def is_empty(self) -> bool:
        return not self.items


class CartItemMutation(BaseModel):
    product_id: str = Field(..., min_length=1, max_length=128)
    qty: int = Field(ge=1, le=MAX_LINE_QTY)


class CartItemQty(BaseModel):
    qty: int = Field(ge=1, le=MAX_LINE_QTY)
