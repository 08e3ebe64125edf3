"""Pydantic contracts for catalog listings.

Both the remote catalog and the local fallback engine answer with these
models, so callers cannot tell which path served them.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal, Mapping

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as SchemaError

DEFAULT_LIMIT = 20

SortOrder = Literal["relevance", "newest", "price_low_high", "price_high_low", "rating"]


class CatalogCategory(BaseModel):
    slug: str
    name: str


class CatalogProduct(BaseModel):
    id: str
    vendor_id: str
    title: str
    description: str = ""
    category_slug: str = ""
    tags: list[str] = Field(default_factory=list)
    price_incl_tax_cents: int = Field(ge=0)
    currency: str = Field("USD", max_length=3)
    stock_qty: int = 0
    rating_average: float = 0.0
    created_at: datetime


class CatalogListResponse(BaseModel):
    items: list[CatalogProduct] = Field(default_factory=list)
    total: int = 0
    limit: int = DEFAULT_LIMIT
    offset: int = 0


class CatalogCategoriesResponse(BaseModel):
    items: list[CatalogCategory] = Field(default_factory=list)


class VendorSummary(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    slug: str
    display_name: str = Field(alias="displayName")


class CatalogProductDetail(BaseModel):
    item: CatalogProduct
    vendor: VendorSummary


class CatalogSearchParams(BaseModel):
    model_config = {
        "extra": "ignore",
        "json_schema_extra": {
            "examples": [
                {
                    "q": "notebook",
                    "category": "stationery",
                    "sort": "price_low_high",
                    "limit": 20,
                    "offset": 0,
                }
            ]
        },
    }

    q: str | None = Field(None, max_length=200)
    category: str | None = Field(None, max_length=100)
    vendor: str | None = Field(None, max_length=100)
    price_min: int | None = Field(None, ge=0)
    price_max: int | None = Field(None, ge=0)
    min_rating: float | None = Field(None, ge=0, le=5)
    sort: SortOrder | None = None
    limit: int | None = Field(None, ge=1, le=100)
    offset: int | None = Field(None, ge=0)

    def to_query(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)


def normalize_search_params(raw: CatalogSearchParams | Mapping[str, Any] | None) -> CatalogSearchParams:
    """Validate raw search parameters; anything invalid collapses to no filters."""
    if raw is None:
        return CatalogSearchParams()
    if isinstance(raw, CatalogSearchParams):
        return raw
    try:
        return CatalogSearchParams.model_validate(dict(raw))
    except SchemaError:
        return CatalogSearchParams()
