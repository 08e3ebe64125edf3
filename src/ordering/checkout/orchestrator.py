"""Order Placement Orchestrator — place the order, then request payment.

Placement is keyed by the caller's idempotency key, which is reused verbatim
on a retry so the server can deduplicate. Payment is requested only once a
concrete order id exists, under a key derived from the placement key. A
failed payment call never resubmits the order: the outcome is reported as
ambiguous and the order is shown as pending.
"""

from dataclasses import dataclass
from urllib.parse import quote

import structlog
from protean.exceptions import ValidationError
from pydantic import ValidationError as SchemaError

from identity.tokens import SessionContext
from ordering.checkout.attempt import CheckoutAttempt
from ordering.checkout.idempotency import validate_idempotency_key
from ordering.checkout.schemas import Order, OrderResponse, PlaceOrderRequest
from payments.gateway import build_gateways
from payments.gateway.port import PaymentGateway
from payments.methods import DEFAULT_PAYMENT_METHOD, PaymentMethod
from payments.schemas import PaymentAttempt
from shared.errors import AmbiguousOutcome, PlacementFailed, UpstreamError
from shared.transport import ApiDownload, TransportClient

logger = structlog.get_logger(__name__)


def parse_payment_method(raw) -> PaymentMethod:
    """Form value → ``PaymentMethod``; blank selects the default method."""
    try:
        return PaymentMethod.parse(raw, default=DEFAULT_PAYMENT_METHOD)
    except ValueError as exc:
        raise ValidationError({"payment_method": [str(exc)]}) from exc


@dataclass(frozen=True)
class CheckoutOutcome:
    """Result of one checkout attempt that got as far as an order.

    ``ambiguity`` is set when the order exists but the payment call failed.
    """

    attempt: CheckoutAttempt
    order: Order
    payment: PaymentAttempt | None = None
    ambiguity: AmbiguousOutcome | None = None

    @property
    def ambiguous(self) -> bool:
        return self.ambiguity is not None

    @property
    def order_id(self) -> str:
        return self.order.id

    @property
    def method(self) -> PaymentMethod:
        return self.attempt.method

    @property
    def payment_status(self) -> str:
        return self.attempt.payment_status or ""

    @property
    def provider_ref(self) -> str:
        return self.attempt.provider_ref or ""

    @property
    def error_flag(self) -> str | None:
        return self.attempt.error_flag


class OrderPlacementOrchestrator:
    def __init__(
        self,
        transport: TransportClient,
        gateways: dict[PaymentMethod, PaymentGateway] | None = None,
    ) -> None:
        self.transport = transport
        self.gateways = gateways if gateways is not None else build_gateways(transport)

    async def place_order(self, placement_key: str, session: SessionContext) -> Order:
        """Submit the current cart as an order.

        Raises:
            ValidationError: the key is malformed; nothing was sent.
            PlacementFailed: the server rejected the placement.
        """
        key = validate_idempotency_key(placement_key)
        body = PlaceOrderRequest(idempotency_key=key)
        try:
            result = await self.transport.request(
                "/checkout/place-order",
                method="POST",
                body=body.model_dump(),
                credential=session.credential(),
            )
        except UpstreamError as exc:
            logger.warning("order_placement_failed", idempotency_key=key, status=exc.status, error=exc.message)
            raise PlacementFailed(key, exc) from exc

        session.adopt_guest_token(result.guest_token)
        try:
            response = OrderResponse.model_validate(result.payload)
        except SchemaError as exc:
            logger.warning("order_placement_unreadable", idempotency_key=key, error=str(exc))
            raise PlacementFailed(key, exc) from exc

        logger.info(
            "order_placed",
            order_id=response.order.id,
            idempotency_key=key,
            total_cents=response.order.total_cents,
            shipment_count=response.order.shipment_count,
        )
        return response.order

    async def pay(self, attempt: CheckoutAttempt, session: SessionContext) -> PaymentAttempt:
        """Request payment for a placed attempt (after ``begin_payment``).

        Raises:
            AmbiguousOutcome: the payment call failed; the order stands.
        """
        method = attempt.method
        gateway = self.gateways[method]
        result = await gateway.request_payment(attempt.order_id, attempt.payment_key, session.credential())
        session.adopt_guest_token(result.guest_token)

        if not result.success:
            attempt.record_payment_failure(result.failure_reason)
            logger.warning(
                "payment_outcome_ambiguous",
                order_id=attempt.order_id,
                method=method.value,
                flag=attempt.error_flag,
                reason=result.failure_reason,
            )
            raise AmbiguousOutcome(
                attempt.order_id,
                method,
                attempt.payment_status,
                attempt.error_flag,
                reason=result.failure_reason or "",
            )

        payment = result.attempt
        attempt.record_payment(payment.provider_ref, payment.status, payment.client_secret)
        logger.info(
            "payment_requested",
            order_id=attempt.order_id,
            method=method.value,
            payment_status=attempt.payment_status,
        )
        return payment

    async def checkout(self, placement_key: str, method, session: SessionContext) -> CheckoutOutcome:
        """Place the order and request payment with ``method``.

        Raises:
            ValidationError: malformed key or payment method; nothing was sent.
            PlacementFailed: no order exists and no payment was requested.
        """
        method = parse_payment_method(method)
        attempt = CheckoutAttempt.create(placement_key)

        try:
            order = await self.place_order(attempt.placement_key, session)
        except PlacementFailed as exc:
            attempt.record_placement_failure(str(exc.cause or exc))
            raise

        attempt.record_placement(order.id, order.total_cents, order.shipment_count)
        attempt.begin_payment(method)

        try:
            payment = await self.pay(attempt, session)
        except AmbiguousOutcome as exc:
            return CheckoutOutcome(attempt=attempt, order=order, ambiguity=exc)
        return CheckoutOutcome(attempt=attempt, order=order, payment=payment)

    async def get_order(self, order_id: str, session: SessionContext) -> Order | None:
        """Fetch an order for the confirmation page; unavailable reads as None."""
        order_id = (order_id or "").strip()
        if not order_id:
            return None
        try:
            result = await self.transport.request(
                f"/orders/{quote(order_id, safe='')}",
                credential=session.credential(),
            )
        except UpstreamError as exc:
            logger.warning("order_unavailable", order_id=order_id, status=exc.status)
            return None
        session.adopt_guest_token(result.guest_token)
        try:
            return OrderResponse.model_validate(result.payload).order
        except SchemaError as exc:
            logger.warning("order_unreadable", order_id=order_id, errors=exc.error_count())
            return None

    async def download_invoice(self, order_id: str, session: SessionContext) -> ApiDownload:
        """Fetch the invoice PDF for a placed order, scoped by the guest token.

        Raises:
            ValidationError: blank order id.
            UpstreamError: the invoice is missing, not yet issued, or unreachable.
        """
        order_id = (order_id or "").strip()
        if not order_id:
            raise ValidationError({"order_id": ["order id is required"]})
        download = await self.transport.download(
            f"/invoices/{quote(order_id, safe='')}/download",
            credential=session.credential(),
        )
        session.adopt_guest_token(download.guest_token)
        return download
