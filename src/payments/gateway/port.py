"""Payment gateway port (abstract interface).

Defines the contract every payment method adapter implements, so the checkout
orchestrator can drive online payment and pay-on-delivery the same way and
tests can swap in ``FakeGateway``.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from payments.methods import PaymentMethod
from payments.schemas import PaymentAttempt


@dataclass(frozen=True)
class PaymentResult:
    """Result of one payment request."""

    success: bool
    attempt: PaymentAttempt | None = None
    guest_token: str | None = None
    failure_reason: str | None = None
    status_code: int | None = None


class PaymentGateway(ABC):
    """Abstract payment gateway interface."""

    method: PaymentMethod

    @abstractmethod
    async def request_payment(
        self,
        order_id: str,
        idempotency_key: str,
        credential=None,
    ) -> PaymentResult:
        """Ask the payment service to start (online) or confirm (COD) payment for an order."""
        ...
