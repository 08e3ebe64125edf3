"""Storefront FastAPI application.

Plays the web tier for shoppers, vendors and admins: it owns cookies and
redirects, and drives the catalog, cart and checkout core over the
marketplace REST API. Checkout requests run inside the ordering domain
context.

Usage:
    uvicorn storefront.app:app --host 0.0.0.0 --port 3000 --reload
"""

from contextlib import asynccontextmanager
from uuid import uuid4

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse

from ordering.domain import ordering
from payments.gateway import build_gateways
from shared.config import Settings
from shared.errors import AuthRequired
from shared.transport import TransportClient
from storefront.api import actions_router, pages_router
from storefront.api.routes import challenge_url
from storefront.api.schemas import HealthResponse
from storefront.utils.logging import add_context, clear_context, configure_logging

logger = structlog.get_logger(__name__)

ordering.init()

# ---------------------------------------------------------------------------
# Route-to-domain mapping
# ---------------------------------------------------------------------------
_ROUTE_DOMAIN_MAP = {
    "/actions/checkout": ordering,
    "/checkout": ordering,
}


def _resolve_domain(path: str):
    """Return the domain for the given request path, or None."""
    for prefix, domain in _ROUTE_DOMAIN_MAP.items():
        if path.startswith(prefix):
            return domain
    return None


def create_app(
    settings: Settings | None = None,
    transport: TransportClient | None = None,
    gateways=None,
    setup_logging: bool = True,
) -> FastAPI:
    """Build the storefront app.

    Tests pass a ``transport`` bound to a mock API and ``FakeGateway``
    instances; production builds both from the environment.
    """
    settings = settings or Settings.from_env()
    if setup_logging:
        configure_logging()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        client = transport or TransportClient(settings)
        app.state.transport = client
        app.state.gateways = gateways if gateways is not None else build_gateways(client)
        logger.info("storefront_started", api_base_url=settings.api_base_url, environment=settings.environment)
        yield
        await client.aclose()

    app = FastAPI(
        title="Marketplace Storefront",
        description="Cart, checkout and catalog actions over the marketplace API",
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def domain_context_middleware(request: Request, call_next):
        """Push the ordering domain context for checkout requests."""
        clear_context()
        add_context(request_id=request.headers.get("X-Request-ID") or uuid4().hex, path=request.url.path)
        domain = _resolve_domain(request.url.path)
        if domain is not None:
            with domain.domain_context():
                return await call_next(request)
        return await call_next(request)

    @app.exception_handler(AuthRequired)
    async def auth_required_handler(request: Request, exc: AuthRequired):
        logger.info("auth_required", role=exc.role.value, path=request.url.path)
        return RedirectResponse(challenge_url(exc.role), status_code=303)

    app.include_router(actions_router)
    app.include_router(pages_router)

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(api_base_url=settings.api_base_url, environment=settings.environment)

    return app


app = create_app()
