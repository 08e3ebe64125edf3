"""Checkout Quote Engine — a fresh, non-committing projection of the cart.

Quotes are requested on every render because price, stock and tax can
change between requests. All amounts come from the remote pricing authority.
"""

import structlog
from pydantic import ValidationError as SchemaError

from identity.tokens import SessionContext
from ordering.checkout.schemas import CheckoutQuote
from shared.errors import UpstreamError
from shared.transport import TransportClient

logger = structlog.get_logger(__name__)


class QuoteEngine:
    def __init__(self, transport: TransportClient) -> None:
        self.transport = transport

    async def get_quote(self, session: SessionContext) -> CheckoutQuote:
        """Quote the current cart. An empty cart yields zero shipments."""
        try:
            result = await self.transport.request(
                "/checkout/quote",
                method="POST",
                body={},
                credential=session.credential(),
            )
        except UpstreamError as exc:
            # the pricing service answers 409 for an empty cart
            if exc.is_conflict:
                return CheckoutQuote(guest_token=session.guest_token)
            raise

        session.adopt_guest_token(result.guest_token)
        try:
            quote = CheckoutQuote.model_validate(result.payload or {})
        except SchemaError as exc:
            raise UpstreamError(result.status_code, "quote reply is not a valid quote", code="invalid_quote") from exc
        if not quote.totals_consistent:
            logger.warning("quote_totals_mismatch", total_cents=quote.total_cents, shipments=quote.shipment_count)
        return quote
