"""FastAPI dependencies: per-request session and per-app services."""

from fastapi import Depends, Request

from catalogue.resolver import CatalogResolver
from identity.access import AccountAccess
from identity.tokens import CookieTokenStore, SessionContext
from ordering.cart.aggregator import CartAggregator
from ordering.checkout.orchestrator import OrderPlacementOrchestrator
from ordering.checkout.quote import QuoteEngine
from shared.transport import TransportClient


def get_transport(request: Request) -> TransportClient:
    return request.app.state.transport


def get_session(request: Request) -> SessionContext:
    """Identity slots for this request, backed by its cookies."""
    store = CookieTokenStore(request.cookies, secure=request.app.state.settings.secure_cookies)
    return SessionContext(store)


def get_catalog(transport: TransportClient = Depends(get_transport)) -> CatalogResolver:
    return CatalogResolver(transport)


def get_carts(transport: TransportClient = Depends(get_transport)) -> CartAggregator:
    return CartAggregator(transport)


def get_quotes(transport: TransportClient = Depends(get_transport)) -> QuoteEngine:
    return QuoteEngine(transport)


def get_orchestrator(request: Request, transport: TransportClient = Depends(get_transport)) -> OrderPlacementOrchestrator:
    return OrderPlacementOrchestrator(transport, gateways=request.app.state.gateways)


def get_accounts(transport: TransportClient = Depends(get_transport)) -> AccountAccess:
    return AccountAccess(transport)
