"""Degraded-mode search, filter and sort over an in-memory product set.

The engine has no relevance ranking: ``relevance`` sorts exactly like
``newest`` (creation time, most recent first).
"""

from typing import Iterable

from catalogue.schemas import DEFAULT_LIMIT, CatalogListResponse, CatalogProduct, CatalogSearchParams


def _matches(product: CatalogProduct, params: CatalogSearchParams, query: str, category: str, vendor: str) -> bool:
    if category and product.category_slug != category:
        return False
    if vendor and product.vendor_id != vendor:
        return False
    if params.price_min is not None and product.price_incl_tax_cents < params.price_min:
        return False
    if params.price_max is not None and product.price_incl_tax_cents > params.price_max:
        return False
    if params.min_rating is not None and product.rating_average < params.min_rating:
        return False

    if not query:
        return True

    haystack = " ".join([product.title, product.description, *product.tags]).lower()
    return query in haystack


def _sort(products: list[CatalogProduct], sort: str | None) -> list[CatalogProduct]:
    if sort == "price_low_high":
        return sorted(products, key=lambda p: p.price_incl_tax_cents)
    if sort == "price_high_low":
        return sorted(products, key=lambda p: p.price_incl_tax_cents, reverse=True)
    if sort == "rating":
        return sorted(products, key=lambda p: p.rating_average, reverse=True)
    # newest, relevance and anything else
    return sorted(products, key=lambda p: p.created_at, reverse=True)


def fallback_search(params: CatalogSearchParams, products: Iterable[CatalogProduct]) -> CatalogListResponse:
    """Filter, sort and page ``products`` the way the remote catalog would."""
    query = (params.q or "").lower().strip()
    category = (params.category or "").lower().strip()
    vendor = (params.vendor or "").strip()

    filtered = [p for p in products if _matches(p, params, query, category, vendor)]
    ordered = _sort(filtered, params.sort)

    limit = params.limit if params.limit is not None else DEFAULT_LIMIT
    offset = params.offset if params.offset is not None else 0

    return CatalogListResponse(
        items=ordered[offset : offset + limit],
        total=len(ordered),
        limit=limit,
        offset=offset,
    )
