"""CheckoutAttempt aggregate — one shopper's pass through place-order and pay.

The attempt is a standard CQRS aggregate (not event sourced) that lives for a
single request. It guards the ordering rules of checkout: payment is only
requested once a concrete order id exists, and only once per attempt.

State Machine:
    NO_ORDER → PLACED → AWAITING_PAYMENT → PAID_ONLINE | COD_CONFIRMED | PAYMENT_FAILED
    NO_ORDER → PLACEMENT_FAILED
"""

from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import DateTime, Integer, String

from ordering.checkout.events import (
    CashOnDeliveryConfirmed,
    CheckoutOrderPlaced,
    CheckoutPlacementFailed,
    PaymentIntentCreated,
    PaymentRequestFailed,
)
from ordering.checkout.idempotency import MAX_KEY_LENGTH, derive_payment_key, validate_idempotency_key
from ordering.domain import ordering
from payments.methods import PaymentMethod


class AttemptStatus(Enum):
    NO_ORDER = "no_order"
    PLACED = "placed"
    AWAITING_PAYMENT = "awaiting_payment"
    PAID_ONLINE = "paid_online"
    COD_CONFIRMED = "cod_confirmed"
    PAYMENT_FAILED = "payment_failed"
    PLACEMENT_FAILED = "placement_failed"


_VALID_TRANSITIONS = {
    AttemptStatus.NO_ORDER: {AttemptStatus.PLACED, AttemptStatus.PLACEMENT_FAILED},
    AttemptStatus.PLACED: {AttemptStatus.AWAITING_PAYMENT},
    AttemptStatus.AWAITING_PAYMENT: {
        AttemptStatus.PAID_ONLINE,
        AttemptStatus.COD_CONFIRMED,
        AttemptStatus.PAYMENT_FAILED,
    },
    AttemptStatus.PAID_ONLINE: set(),  # Terminal
    AttemptStatus.COD_CONFIRMED: set(),  # Terminal
    AttemptStatus.PAYMENT_FAILED: set(),  # Terminal
    AttemptStatus.PLACEMENT_FAILED: set(),  # Terminal
}

# Payment status shown when the payment call failed and the real state is unknown
FALLBACK_PAYMENT_STATUS = {
    PaymentMethod.ONLINE: "pending",
    PaymentMethod.PAY_ON_DELIVERY: "pending_collection",
}

PAYMENT_FAILURE_FLAGS = {
    PaymentMethod.ONLINE: "stripe-intent-failed",
    PaymentMethod.PAY_ON_DELIVERY: "cod-confirmation-failed",
}

PLACEMENT_FAILURE_FLAG = "place-order-failed"


@ordering.aggregate
class CheckoutAttempt:
    placement_key = String(required=True, max_length=MAX_KEY_LENGTH)
    status = String(choices=AttemptStatus, default=AttemptStatus.NO_ORDER.value)
    order_id = String(max_length=255)
    order_total_cents = Integer(default=0)
    payment_method = String(choices=PaymentMethod)
    payment_key = String(max_length=MAX_KEY_LENGTH + 8)
    provider_ref = String(max_length=255)
    client_secret = String(max_length=255)
    provider_status = String(max_length=50)
    failure_reason = String(max_length=500)
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, placement_key):
        now = datetime.now(UTC)
        return cls(
            placement_key=validate_idempotency_key(placement_key),
            status=AttemptStatus.NO_ORDER.value,
            created_at=now,
            updated_at=now,
        )

    # -------------------------------------------------------------------
    # State transition helper
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target_status):
        """Validate that the current state allows transition to target."""
        current = AttemptStatus(self.status)
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise ValidationError({"status": [f"Cannot transition from {current.value} to {target_status.value}"]})

    def _move_to(self, target_status):
        self._assert_can_transition(target_status)
        self.status = target_status.value
        self.updated_at = datetime.now(UTC)

    # -------------------------------------------------------------------
    # Placement
    # -------------------------------------------------------------------
    def record_placement(self, order_id, total_cents=0, shipment_count=0):
        if not order_id:
            raise ValidationError({"order_id": ["Placement must return an order id"]})
        self._move_to(AttemptStatus.PLACED)
        self.order_id = order_id
        self.order_total_cents = total_cents

        self.raise_(
            CheckoutOrderPlaced(
                attempt_id=str(self.id),
                order_id=order_id,
                placement_key=self.placement_key,
                total_cents=total_cents,
                shipment_count=shipment_count,
            )
        )

    def record_placement_failure(self, reason=""):
        self._move_to(AttemptStatus.PLACEMENT_FAILED)
        self.failure_reason = (reason or "")[:500]

        self.raise_(
            CheckoutPlacementFailed(
                attempt_id=str(self.id),
                placement_key=self.placement_key,
                reason=self.failure_reason,
            )
        )

    # -------------------------------------------------------------------
    # Payment
    # -------------------------------------------------------------------
    def begin_payment(self, method):
        """Claim the single payment slot of this attempt and return its derived key."""
        method = PaymentMethod.parse(method)
        self._move_to(AttemptStatus.AWAITING_PAYMENT)
        self.payment_method = method.value
        self.payment_key = derive_payment_key(self.placement_key, method)
        return self.payment_key

    def record_payment(self, provider_ref, provider_status, client_secret=None):
        method = PaymentMethod(self.payment_method) if self.payment_method else None
        if method is PaymentMethod.ONLINE:
            self._move_to(AttemptStatus.PAID_ONLINE)
            event_cls = PaymentIntentCreated
        else:
            self._move_to(AttemptStatus.COD_CONFIRMED)
            event_cls = CashOnDeliveryConfirmed

        self.provider_ref = provider_ref or ""
        self.provider_status = provider_status or FALLBACK_PAYMENT_STATUS[method]
        self.client_secret = client_secret

        self.raise_(
            event_cls(
                attempt_id=str(self.id),
                order_id=self.order_id,
                payment_key=self.payment_key,
                provider_ref=self.provider_ref,
                payment_status=self.provider_status,
            )
        )

    def record_payment_failure(self, reason=""):
        self._move_to(AttemptStatus.PAYMENT_FAILED)
        self.failure_reason = (reason or "")[:500]

        self.raise_(
            PaymentRequestFailed(
                attempt_id=str(self.id),
                order_id=self.order_id,
                payment_key=self.payment_key,
                payment_method=self.payment_method,
                reason=self.failure_reason,
            )
        )

    # -------------------------------------------------------------------
    # Display helpers
    # -------------------------------------------------------------------
    @property
    def method(self):
        return PaymentMethod(self.payment_method) if self.payment_method else None

    @property
    def payment_status(self):
        """Payment status to show the shopper; a failed call reads as pending."""
        if AttemptStatus(self.status) == AttemptStatus.PAYMENT_FAILED:
            return FALLBACK_PAYMENT_STATUS[self.method]
        return self.provider_status

    @property
    def error_flag(self):
        status = AttemptStatus(self.status)
        if status == AttemptStatus.PAYMENT_FAILED:
            return PAYMENT_FAILURE_FLAGS[self.method]
        if status == AttemptStatus.PLACEMENT_FAILED:
            return PLACEMENT_FAILURE_FLAG
        return None
