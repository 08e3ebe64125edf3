"""Static catalog served when the remote catalog service is unreachable."""

from datetime import UTC, datetime, timedelta

from catalogue.schemas import CatalogCategory, CatalogProduct, VendorSummary

FALLBACK_CATEGORIES = (
    CatalogCategory(slug="stationery", name="Stationery"),
    CatalogCategory(slug="prints", name="Prints"),
    CatalogCategory(slug="home", name="Home"),
)

FALLBACK_VENDORS = {
    "ven_seed_north": VendorSummary(id="ven_seed_north", slug="north-studio", display_name="North Studio"),
    "ven_seed_linepress": VendorSummary(id="ven_seed_linepress", slug="line-press", display_name="Line Press"),
}

# (minutes before "now", product fields)
_SEED_PRODUCTS = (
    (
        0,
        {
            "id": "prd_seed_grid_notebook",
            "vendor_id": "ven_seed_north",
            "title": "Grid Notebook",
            "description": "A minimal notebook with soft cover and grid pages.",
            "category_slug": "stationery",
            "tags": ["notebook", "paper", "grid"],
            "price_incl_tax_cents": 2200,
            "stock_qty": 75,
            "rating_average": 4.8,
        },
    ),
    (
        30,
        {
            "id": "prd_seed_weekly_planner",
            "vendor_id": "ven_seed_north",
            "title": "Desk Weekly Planner",
            "description": "Weekly planner with clean blocks and bold date markers.",
            "category_slug": "stationery",
            "tags": ["planner", "desk"],
            "price_incl_tax_cents": 1800,
            "stock_qty": 41,
            "rating_average": 4.5,
        },
    ),
    (
        60,
        {
            "id": "prd_seed_monochrome_poster",
            "vendor_id": "ven_seed_linepress",
            "title": "Monochrome Poster Print",
            "description": "Museum-grade paper print for modern workspaces.",
            "category_slug": "prints",
            "tags": ["poster", "print", "art"],
            "price_incl_tax_cents": 4800,
            "stock_qty": 19,
            "rating_average": 4.9,
        },
    ),
    (
        90,
        {
            "id": "prd_seed_ceramic_cup",
            "vendor_id": "ven_seed_linepress",
            "title": "Ceramic Coffee Cup",
            "description": "Hand-glazed cup built for everyday use.",
            "category_slug": "home",
            "tags": ["home", "ceramic", "cup"],
            "price_incl_tax_cents": 3200,
            "stock_qty": 33,
            "rating_average": 4.4,
        },
    ),
)


def fallback_products(now: datetime | None = None) -> list[CatalogProduct]:
    """Build the fallback dataset with creation times relative to ``now``."""
    now = now or datetime.now(UTC)
    return [
        CatalogProduct(currency="USD", created_at=now - timedelta(minutes=age), **fields)
        for age, fields in _SEED_PRODUCTS
    ]


def fallback_vendor(vendor_id: str) -> VendorSummary:
    return FALLBACK_VENDORS.get(
        vendor_id,
        VendorSummary(id=vendor_id, slug=vendor_id, display_name="Independent Vendor"),
    )
