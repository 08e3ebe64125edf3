"""Catalog Resolver — remote listings with a local fallback branch.

Every lookup returns a ``CatalogResult`` that names which path served it.
The fallback engine runs only after the remote call failed, never
speculatively. Browsing never hard-fails.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Generic, Mapping, TypeVar
from urllib.parse import quote

import structlog
from pydantic import ValidationError as SchemaError

from catalogue.fallback import FALLBACK_CATEGORIES, fallback_products, fallback_vendor
from catalogue.schemas import (
    CatalogCategoriesResponse,
    CatalogCategory,
    CatalogListResponse,
    CatalogProduct,
    CatalogProductDetail,
    CatalogSearchParams,
    normalize_search_params,
)
from catalogue.search import fallback_search
from shared.errors import UpstreamError
from shared.transport import TransportClient

logger = structlog.get_logger(__name__)

T = TypeVar("T")


class CatalogSource(Enum):
    REMOTE = "remote"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class CatalogResult(Generic[T]):
    """A catalog value plus the path that produced it."""

    value: T
    source: CatalogSource
    error: Exception | None = None

    @property
    def degraded(self) -> bool:
        return self.source is CatalogSource.FALLBACK


class CatalogResolver:
    def __init__(
        self,
        transport: TransportClient,
        products_factory: Callable[[datetime | None], list[CatalogProduct]] = fallback_products,
    ) -> None:
        self.transport = transport
        self.products_factory = products_factory

    def _degrade(self, operation: str, exc: Exception) -> None:
        logger.warning("catalog_degraded", operation=operation, error=str(exc))

    async def resolve_products(
        self, params: CatalogSearchParams | Mapping[str, Any] | None = None
    ) -> CatalogResult[CatalogListResponse]:
        normalized = normalize_search_params(params)
        try:
            result = await self.transport.request("/catalog/products", params=normalized.to_query())
            listing = CatalogListResponse.model_validate(result.payload)
        except (UpstreamError, SchemaError) as exc:
            self._degrade("search", exc)
            return CatalogResult(
                value=fallback_search(normalized, self.products_factory(None)),
                source=CatalogSource.FALLBACK,
                error=exc,
            )
        return CatalogResult(value=listing, source=CatalogSource.REMOTE)

    async def resolve_categories(self) -> CatalogResult[list[CatalogCategory]]:
        try:
            result = await self.transport.request("/catalog/categories")
            categories = CatalogCategoriesResponse.model_validate(result.payload).items
        except (UpstreamError, SchemaError) as exc:
            self._degrade("categories", exc)
            return CatalogResult(value=list(FALLBACK_CATEGORIES), source=CatalogSource.FALLBACK, error=exc)
        return CatalogResult(value=categories, source=CatalogSource.REMOTE)

    async def resolve_product(self, product_id: str) -> CatalogResult[CatalogProductDetail | None]:
        try:
            result = await self.transport.request(f"/catalog/products/{quote(product_id, safe='')}")
            detail = CatalogProductDetail.model_validate(result.payload)
        except (UpstreamError, SchemaError) as exc:
            self._degrade("product", exc)
            product = next((p for p in self.products_factory(None) if p.id == product_id), None)
            if product is None:
                return CatalogResult(value=None, source=CatalogSource.FALLBACK, error=exc)
            return CatalogResult(
                value=CatalogProductDetail(item=product, vendor=fallback_vendor(product.vendor_id)),
                source=CatalogSource.FALLBACK,
                error=exc,
            )
        return CatalogResult(value=detail, source=CatalogSource.REMOTE)

    async def search_products(self, params: CatalogSearchParams | Mapping[str, Any] | None = None) -> CatalogListResponse:
        return (await self.resolve_products(params)).value

    async def list_categories(self) -> list[CatalogCategory]:
        return (await self.resolve_categories()).value

    async def get_product(self, product_id: str) -> CatalogProductDetail | None:
        return (await self.resolve_product(product_id)).value
