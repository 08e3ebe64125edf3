"""Domain events for the CheckoutAttempt aggregate."""

from protean.fields import Identifier, Integer, String

from ordering.domain import ordering


@ordering.event(part_of="CheckoutAttempt")
class CheckoutOrderPlaced:
    """The server accepted the placement key and returned an order."""

    __version__ = 1

    attempt_id = Identifier(required=True)
    order_id = String(required=True)
    placement_key = String(required=True)
    total_cents = Integer(default=0)
    shipment_count = Integer(default=0)


@ordering.event(part_of="CheckoutAttempt")
class CheckoutPlacementFailed:
    """Placement was rejected; no payment was requested."""

    __version__ = 1

    attempt_id = Identifier(required=True)
    placement_key = String(required=True)
    reason = String(max_length=500)


@ordering.event(part_of="CheckoutAttempt")
class PaymentIntentCreated:
    """An online payment intent exists for the order."""

    __version__ = 1

    attempt_id = Identifier(required=True)
    order_id = String(required=True)
    payment_key = String(required=True)
    provider_ref = String()
    payment_status = String()


@ordering.event(part_of="CheckoutAttempt")
class CashOnDeliveryConfirmed:
    """The order will be paid on delivery."""

    __version__ = 1

    attempt_id = Identifier(required=True)
    order_id = String(required=True)
    payment_key = String(required=True)
    provider_ref = String()
    payment_status = String()


@ordering.event(part_of="CheckoutAttempt")
class PaymentRequestFailed:
    """The payment call failed after the order was placed.

    The order exists and must not be resubmitted; its payment state is unknown.
    """

    __version__ = 1

    attempt_id = Identifier(required=True)
    order_id = String(required=True)
    payment_key = String(required=True)
    payment_method = String(required=True)
    reason = String(max_length=500)
