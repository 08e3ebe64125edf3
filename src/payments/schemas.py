"""Pydantic contracts for the remote payment endpoints.

These are external contracts (anti-corruption layer) — separate from the
ordering domain's checkout attempt.
"""

from pydantic import BaseModel, Field


class PaymentRequest(BaseModel):
    order_id: str = Field(..., min_length=1)
    idempotency_key: str = Field(..., min_length=8, max_length=160)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "order_id": "ord_1",
                    "idempotency_key": "pi_chk_1767225600000_a1b2c3d4e5f6",
                }
            ]
        }
    }


class PaymentAttempt(BaseModel):
    """One payment attempt against an order, as reported by the payment service."""

    id: str
    order_id: str
    method: str
    status: str
    provider: str | None = None
    provider_ref: str = ""
    client_secret: str | None = None
    amount_cents: int = 0
    currency: str = "USD"
    idempotency_key: str | None = None
    created_at: str | None = None
    updated_at: str | None = None
    guest_token: str | None = None
