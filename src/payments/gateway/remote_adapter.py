"""Payment gateways backed by the marketplace payment endpoints."""

import structlog
from pydantic import ValidationError as SchemaError

from payments.gateway.port import PaymentGateway, PaymentResult
from payments.methods import PaymentMethod
from payments.schemas import PaymentAttempt, PaymentRequest
from shared.errors import UpstreamError
from shared.transport import TransportClient

logger = structlog.get_logger(__name__)


class RemotePaymentGateway(PaymentGateway):
    path: str

    def __init__(self, transport: TransportClient) -> None:
        self.transport = transport

    async def request_payment(self, order_id: str, idempotency_key: str, credential=None) -> PaymentResult:
        body = PaymentRequest(order_id=order_id, idempotency_key=idempotency_key)
        try:
            result = await self.transport.request(
                self.path,
                method="POST",
                body=body.model_dump(),
                credential=credential,
            )
        except UpstreamError as exc:
            logger.warning("payment_request_failed", method=self.method.value, order_id=order_id, status=exc.status)
            return PaymentResult(
                success=False,
                failure_reason=exc.message or str(exc),
                status_code=exc.status,
            )

        payload = result.payload if isinstance(result.payload, dict) else {}
        try:
            attempt = PaymentAttempt.model_validate({"idempotency_key": idempotency_key, **payload})
        except SchemaError as exc:
            # The payment may exist upstream; the caller reports it as unresolved
            logger.warning("payment_reply_unreadable", method=self.method.value, order_id=order_id)
            return PaymentResult(
                success=False,
                guest_token=result.guest_token,
                failure_reason=f"Unreadable payment reply: {exc.error_count()} invalid field(s)",
                status_code=result.status_code,
            )
        return PaymentResult(
            success=True,
            attempt=attempt,
            guest_token=result.guest_token,
            status_code=result.status_code,
        )


class StripeIntentGateway(RemotePaymentGateway):
    """Creates a Stripe payment intent; confirmation happens out of band."""

    method = PaymentMethod.ONLINE
    path = "/payments/stripe/intent"


class CashOnDeliveryGateway(RemotePaymentGateway):
    """Confirms that the order will be paid on delivery."""

    method = PaymentMethod.PAY_ON_DELIVERY
    path = "/payments/cod/confirm"
