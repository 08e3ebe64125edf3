"""Payment gateway factory.

``build_gateways()`` wires one adapter per payment method over a transport
client; tests pass ``FakeGateway`` instances to the orchestrator instead.
"""

from payments.gateway.port import PaymentGateway
from payments.gateway.remote_adapter import CashOnDeliveryGateway, StripeIntentGateway
from payments.methods import PaymentMethod


def build_gateways(transport) -> dict[PaymentMethod, PaymentGateway]:
    """Return the method → gateway mapping backed by the remote payment API."""
    return {
        PaymentMethod.ONLINE: StripeIntentGateway(transport),
        PaymentMethod.PAY_ON_DELIVERY: CashOnDeliveryGateway(transport),
    }
