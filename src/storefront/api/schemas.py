"""Pydantic response models for the storefront page-data endpoints."""

from pydantic import BaseModel

from catalogue.schemas import CatalogCategory, CatalogListResponse, CatalogProductDetail
from ordering.cart.schemas import Cart
from ordering.checkout.schemas import CheckoutQuote, Order


class CartPage(BaseModel):
    cart: Cart
    error: str | None = None


class CheckoutPage(BaseModel):
    ready: bool
    quote: CheckoutQuote
    idempotency_key: str | None = None
    payment_methods: list[str] = []
    default_payment_method: str | None = None
    error: str | None = None


class ConfirmationPage(BaseModel):
    found: bool
    order: Order | None = None
    payment_method: str | None = None
    payment_provider_ref: str | None = None
    payment_status: str | None = None
    error: str | None = None


class SearchPage(BaseModel):
    results: CatalogListResponse
    degraded: bool = False


class CategoriesPage(BaseModel):
    items: list[CatalogCategory]
    degraded: bool = False


class ProductPage(BaseModel):
    found: bool
    detail: CatalogProductDetail | None = None
    degraded: bool = False
    error: str | None = None


class HealthResponse(BaseModel):
    status: str = "ok"
    api_base_url: str
    environment: str
