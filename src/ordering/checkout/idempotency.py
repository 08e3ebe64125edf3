"""Idempotency keys for order placement and payment.

One placement key is minted per checkout page render and reused verbatim on
every retry of that attempt; the server deduplicates on it. Payment keys are
derived from the placement key so a retried payment call can never collide
with the placement or with the other payment method.
"""

import re
import secrets
import time

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import String

from ordering.domain import ordering
from payments.methods import PaymentMethod

MIN_KEY_LENGTH = 8
MAX_KEY_LENGTH = 128
MIN_DISTINCT_CHARS = 4

_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_\-:.]+$")

_PLACEHOLDERS = frozenset(
    {
        "undefined",
        "null",
        "none",
        "nil",
        "test",
        "testkey",
        "test_key",
        "placeholder",
        "changeme",
        "change_me",
        "idempotency_key",
        "idempotency-key",
        "idempotencykey",
        "your_idempotency_key",
    }
)

_PAYMENT_KEY_PREFIXES = {
    PaymentMethod.ONLINE: "pi_",
    PaymentMethod.PAY_ON_DELIVERY: "cod_",
}


@ordering.value_object
class IdempotencyKey:
    """Value object for a client-generated placement key.

    Format: letters, digits and ``_-:.``, 8-128 chars, not a placeholder.
    E.g., "chk_1767225600000_a1b2c3d4e5f6", "pi_12345678"
    """

    value: String(required=True, max_length=MAX_KEY_LENGTH)

    @invariant.post
    def value_must_be_usable_as_key(self):
        value = self.value

        if len(value) < MIN_KEY_LENGTH:
            raise ValidationError({"value": [f"Idempotency key must be at least {MIN_KEY_LENGTH} characters"]})

        if not _KEY_PATTERN.match(value):
            raise ValidationError(
                {"value": ["Idempotency key may contain only letters, digits, underscores, hyphens, colons and dots"]}
            )

        if len(set(value)) < MIN_DISTINCT_CHARS:
            raise ValidationError({"value": ["Idempotency key is not random enough"]})

        if value.lower() in _PLACEHOLDERS:
            raise ValidationError({"value": ["Idempotency key looks like a placeholder"]})


def validate_idempotency_key(raw: str | None) -> str:
    """Trim and validate a caller-supplied key, returning the cleaned value."""
    cleaned = (raw or "").strip()
    if not cleaned:
        raise ValidationError({"idempotency_key": ["Idempotency key is required"]})
    return IdempotencyKey(value=cleaned).value


def derive_payment_key(placement_key: str, method: PaymentMethod) -> str:
    """Payment-call key for ``method``, derived from the placement key."""
    return f"{_PAYMENT_KEY_PREFIXES[method]}{placement_key}"


def new_idempotency_key() -> str:
    """Mint a fresh placement key for one checkout attempt."""
    return f"chk_{int(time.time() * 1000)}_{secrets.token_hex(6)}"
