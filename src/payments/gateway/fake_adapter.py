"""Configurable fake payment gateway for development and testing.

Simulates the payment service without any network calls. Repeating a request
with the same idempotency key returns the attempt created the first time,
the way the real service deduplicates.
"""

from uuid import uuid4

from payments.gateway.port import PaymentGateway, PaymentResult
from payments.methods import PaymentMethod
from payments.schemas import PaymentAttempt

_INITIAL_STATUS = {
    PaymentMethod.ONLINE: "pending",
    PaymentMethod.PAY_ON_DELIVERY: "pending_collection",
}


class FakeGateway(PaymentGateway):
    """Configurable fake payment gateway."""

    def __init__(self, method: PaymentMethod = PaymentMethod.ONLINE) -> None:
        self.method = method
        self.should_succeed: bool = True
        self.failure_reason: str = "Payment service unavailable"
        self.rotated_token: str | None = None
        self.calls: list[dict] = []
        self._attempts: dict[str, PaymentAttempt] = {}

    def configure(self, should_succeed: bool, failure_reason: str = "Payment service unavailable") -> None:
        """Configure gateway behavior at runtime."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    async def request_payment(self, order_id: str, idempotency_key: str, credential=None) -> PaymentResult:
        self.calls.append(
            {
                "method": self.method.value,
                "order_id": order_id,
                "idempotency_key": idempotency_key,
                "token": getattr(credential, "token", None),
            }
        )

        if not self.should_succeed:
            return PaymentResult(success=False, failure_reason=self.failure_reason, status_code=500)

        attempt = self._attempts.get(idempotency_key)
        if attempt is None:
            attempt = PaymentAttempt(
                id=f"pay_{uuid4().hex[:12]}",
                order_id=order_id,
                method=self.method.value,
                status=_INITIAL_STATUS[self.method],
                provider=self.method.value,
                provider_ref=f"fake_{self.method.value}_{uuid4().hex[:12]}",
                client_secret=f"secret_{uuid4().hex[:16]}" if self.method is PaymentMethod.ONLINE else None,
                idempotency_key=idempotency_key,
            )
            self._attempts[idempotency_key] = attempt
        return PaymentResult(success=True, attempt=attempt, guest_token=self.rotated_token, status_code=201)
