"""Storefront endpoints: form actions and page data.

Form actions answer with ``303 See Other`` redirects carrying a
``notice``/``error`` code in the query string, the way the browser pages
expect. Page-data endpoints answer with JSON. Cookie writes collected on the
session during a request are copied onto whichever response is returned.
"""

from urllib.parse import quote, urlencode

from fastapi import APIRouter, Depends, Form, Query, Request
from fastapi.responses import JSONResponse, RedirectResponse, Response
from protean.exceptions import ValidationError

from catalogue.resolver import CatalogResolver
from identity.access import AccountAccess
from identity.schemas import VendorProfile
from identity.tokens import Role, SessionContext
from ordering.cart.aggregator import CartAggregator
from ordering.checkout.idempotency import new_idempotency_key
from ordering.checkout.orchestrator import CheckoutOutcome, OrderPlacementOrchestrator
from ordering.checkout.quote import QuoteEngine
from ordering.checkout.schemas import CheckoutQuote
from payments.methods import DEFAULT_PAYMENT_METHOD, PaymentMethod
from shared.errors import PlacementFailed, UpstreamError
from storefront.api.schemas import (
    CartPage,
    CategoriesPage,
    CheckoutPage,
    ConfirmationPage,
    ProductPage,
    SearchPage,
)
from storefront.dependencies import (
    get_accounts,
    get_carts,
    get_catalog,
    get_orchestrator,
    get_quotes,
    get_session,
)

actions_router = APIRouter(prefix="/actions", tags=["actions"])
pages_router = APIRouter(tags=["pages"])

ROLE_AREAS = {
    Role.GUEST: "/cart",
    Role.VENDOR: "/vendor",
    Role.ADMIN: "/admin",
}


def redirect(url: str, session: SessionContext) -> RedirectResponse:
    response = RedirectResponse(url, status_code=303)
    session.store.apply(response)
    return response


def render(page, session: SessionContext, status_code: int = 200) -> JSONResponse:
    response = JSONResponse(status_code=status_code, content=page.model_dump(mode="json"))
    session.store.apply(response)
    return response


def confirmation_url(
    order_id: str,
    method: PaymentMethod,
    payment_status: str,
    provider_ref: str | None = None,
    error: str | None = None,
) -> str:
    """Build the confirmation page URL; the provider ref is omitted when unknown."""
    params = {"orderId": order_id, "paymentMethod": method.value}
    if provider_ref:
        params["paymentProviderRef"] = provider_ref
    params["paymentStatus"] = payment_status
    if error:
        params["error"] = error
    return f"/checkout/confirmation?{urlencode(params)}"


def outcome_url(outcome: CheckoutOutcome) -> str:
    if outcome.ambiguous:
        return confirmation_url(
            outcome.order_id,
            outcome.method,
            outcome.ambiguity.fallback_status,
            error=outcome.ambiguity.flag,
        )
    return confirmation_url(outcome.order_id, outcome.method, outcome.payment_status, outcome.provider_ref)


def challenge_url(role: Role) -> str:
    return f"{ROLE_AREAS[role]}?error={role.value}-auth-required"


# --- Cart actions ---


@actions_router.post("/cart/add")
async def add_cart_item(
    product_id: str = Form(""),
    qty: str = Form("1"),
    session: SessionContext = Depends(get_session),
    carts: CartAggregator = Depends(get_carts),
):
    product_id = product_id.strip()
    if not product_id:
        return redirect("/search?error=missing-product", session)
    try:
        await carts.add(session, product_id, qty)
    except (UpstreamError, ValidationError):
        return redirect(f"/products/{quote(product_id, safe='')}?error=cart-add-failed", session)
    return redirect("/cart", session)


@actions_router.post("/cart/update")
async def update_cart_item(
    item_id: str = Form(""),
    qty: str = Form("1"),
    session: SessionContext = Depends(get_session),
    carts: CartAggregator = Depends(get_carts),
):
    item_id = item_id.strip()
    if not item_id:
        return redirect("/cart?error=missing-item", session)
    try:
        await carts.set_qty(session, item_id, qty)
    except (UpstreamError, ValidationError):
        return redirect("/cart?error=cart-update-failed", session)
    return redirect("/cart", session)


@actions_router.post("/cart/delete")
async def delete_cart_item(
    item_id: str = Form(""),
    session: SessionContext = Depends(get_session),
    carts: CartAggregator = Depends(get_carts),
):
    item_id = item_id.strip()
    if not item_id:
        return redirect("/cart?error=missing-item", session)
    try:
        await carts.remove(session, item_id)
    except (UpstreamError, ValidationError):
        return redirect("/cart?error=cart-delete-failed", session)
    return redirect("/cart", session)


# --- Checkout action ---


@actions_router.post("/checkout/place-order")
async def place_order(
    idempotency_key: str = Form(""),
    payment_method: str = Form(""),
    session: SessionContext = Depends(get_session),
    orchestrator: OrderPlacementOrchestrator = Depends(get_orchestrator),
):
    idempotency_key = idempotency_key.strip()
    if not idempotency_key:
        return redirect("/checkout?error=missing-idempotency-key", session)

    try:
        outcome = await orchestrator.checkout(idempotency_key, payment_method, session)
    except ValidationError as exc:
        if "payment_method" in exc.messages:
            return redirect("/checkout?error=invalid-payment-method", session)
        return redirect("/checkout?error=invalid-idempotency-key", session)
    except PlacementFailed:
        return redirect("/checkout?error=place-order-failed", session)

    return redirect(outcome_url(outcome), session)


# --- Vendor / admin session actions ---


async def _login(role: Role, email: str, password: str, session: SessionContext, accounts: AccountAccess):
    area = role.value
    try:
        await accounts.login(session, role, email, password)
    except (UpstreamError, ValidationError):
        return redirect(f"/{area}?error={area}-login-failed", session)
    return redirect(f"/{area}?notice={area}-login-success", session)


def _logout(role: Role, session: SessionContext, accounts: AccountAccess):
    accounts.logout(session, role)
    return redirect(f"/{role.value}?notice={role.value}-logged-out", session)


@actions_router.post("/vendor/login")
async def vendor_login(
    email: str = Form(""),
    password: str = Form(""),
    session: SessionContext = Depends(get_session),
    accounts: AccountAccess = Depends(get_accounts),
):
    return await _login(Role.VENDOR, email, password, session, accounts)


@actions_router.post("/vendor/logout")
async def vendor_logout(
    session: SessionContext = Depends(get_session),
    accounts: AccountAccess = Depends(get_accounts),
):
    return _logout(Role.VENDOR, session, accounts)


@actions_router.post("/admin/login")
async def admin_login(
    email: str = Form(""),
    password: str = Form(""),
    session: SessionContext = Depends(get_session),
    accounts: AccountAccess = Depends(get_accounts),
):
    return await _login(Role.ADMIN, email, password, session, accounts)


@actions_router.post("/admin/logout")
async def admin_logout(
    session: SessionContext = Depends(get_session),
    accounts: AccountAccess = Depends(get_accounts),
):
    return _logout(Role.ADMIN, session, accounts)


# --- Buyer downloads ---


@pages_router.get("/api/invoices/{order_id}")
async def download_invoice(
    order_id: str,
    session: SessionContext = Depends(get_session),
    orchestrator: OrderPlacementOrchestrator = Depends(get_orchestrator),
):
    try:
        invoice = await orchestrator.download_invoice(order_id, session)
    except ValidationError:
        return JSONResponse(status_code=400, content={"error": "order id is required"})
    except UpstreamError as exc:
        return JSONResponse(status_code=exc.status or 502, content={"error": "invoice download failed"})

    disposition = invoice.content_disposition or f"attachment; filename=invoice-{order_id.strip()}.pdf"
    response = Response(
        content=invoice.content,
        media_type="application/pdf",
        headers={"Content-Disposition": disposition, "Cache-Control": "no-store"},
    )
    session.store.apply(response)
    return response


# --- Page data ---


@pages_router.get("/cart")
async def cart_page(
    error: str | None = None,
    session: SessionContext = Depends(get_session),
    carts: CartAggregator = Depends(get_carts),
):
    cart = await carts.get_cart(session)
    return render(CartPage(cart=cart, error=error), session)


@pages_router.get("/checkout")
async def checkout_page(
    error: str | None = None,
    session: SessionContext = Depends(get_session),
    quotes: QuoteEngine = Depends(get_quotes),
):
    try:
        quote_ = await quotes.get_quote(session)
    except UpstreamError:
        page = CheckoutPage(
            ready=False,
            quote=CheckoutQuote(guest_token=session.guest_token),
            error=error or "quote-unavailable",
        )
        return render(page, session)

    # A fresh key per render; retries of the same form submission reuse it
    ready = not quote_.is_empty
    page = CheckoutPage(
        ready=ready,
        quote=quote_,
        idempotency_key=new_idempotency_key() if ready else None,
        payment_methods=[m.value for m in PaymentMethod] if ready else [],
        default_payment_method=DEFAULT_PAYMENT_METHOD.value if ready else None,
        error=error,
    )
    return render(page, session)


@pages_router.get("/checkout/confirmation")
async def confirmation_page(
    order_id: str = Query("", alias="orderId"),
    payment_method: str | None = Query(None, alias="paymentMethod"),
    provider_ref: str | None = Query(None, alias="paymentProviderRef"),
    payment_status: str | None = Query(None, alias="paymentStatus"),
    error: str | None = None,
    session: SessionContext = Depends(get_session),
    orchestrator: OrderPlacementOrchestrator = Depends(get_orchestrator),
):
    order = await orchestrator.get_order(order_id, session)
    page = ConfirmationPage(
        found=order is not None,
        order=order,
        payment_method=payment_method,
        payment_provider_ref=provider_ref,
        payment_status=payment_status,
        error=error,
    )
    return render(page, session)


@pages_router.get("/search")
async def search_page(request: Request, catalog: CatalogResolver = Depends(get_catalog)):
    params = {key: value for key, value in request.query_params.items() if value.strip()}
    result = await catalog.resolve_products(params)
    return SearchPage(results=result.value, degraded=result.degraded)


@pages_router.get("/categories")
async def categories_page(catalog: CatalogResolver = Depends(get_catalog)):
    result = await catalog.resolve_categories()
    return CategoriesPage(items=result.value, degraded=result.degraded)


@pages_router.get("/products/{product_id}")
async def product_page(
    product_id: str,
    error: str | None = None,
    catalog: CatalogResolver = Depends(get_catalog),
):
    result = await catalog.resolve_product(product_id)
    page = ProductPage(found=result.value is not None, detail=result.value, degraded=result.degraded, error=error)
    return JSONResponse(status_code=200 if page.found else 404, content=page.model_dump(mode="json", by_alias=True))


@pages_router.get("/vendor/verification-status", response_model=VendorProfile)
async def vendor_verification_status(
    session: SessionContext = Depends(get_session),
    accounts: AccountAccess = Depends(get_accounts),
):
    try:
        profile = await accounts.vendor_verification_status(session)
    except UpstreamError as exc:
        if exc.status in (401, 403):
            return redirect(challenge_url(Role.VENDOR), session)
        return JSONResponse(status_code=502, content={"error": "vendor-status-unavailable"})
    return profile
