"""BDD tests for degraded catalog search."""

import asyncio

from pytest_bdd import given, parsers, scenarios, then, when

from catalogue.resolver import CatalogResolver, CatalogSource

scenarios("features/catalog_search.feature")


@given("the catalog service is unavailable", target_fixture="resolver")
def _(marketplace, transport):
    marketplace.catalog_down = True
    return CatalogResolver(transport)


@when(
    parsers.cfparse('the shopper searches for "{query}" sorted by "{sort}" with limit {limit:d}'),
    target_fixture="result",
)
def _(resolver, query, sort, limit):
    return asyncio.run(resolver.resolve_products({"q": query, "sort": sort, "limit": limit, "offset": 0}))


@when(parsers.cfparse('the shopper browses the "{category}" category'), target_fixture="result")
def _(resolver, category):
    return asyncio.run(resolver.resolve_products({"category": category}))


@when("the shopper lists categories", target_fixture="result")
def _(resolver):
    return asyncio.run(resolver.resolve_categories())


@then("the results are served from the fallback catalog")
def _(result):
    assert result.source is CatalogSource.FALLBACK


@then(parsers.cfparse("{count:d} product is returned out of {total:d}"))
def _(result, count, total):
    assert len(result.value.items) == count
    assert result.value.total == total


@then(parsers.cfparse('the first product is "{title}" priced {price:d} cents'))
def _(result, title, price):
    first = result.value.items[0]
    assert first.title == title
    assert first.price_incl_tax_cents == price


@then(parsers.cfparse('the categories are "{slugs}"'))
def _(result, slugs):
    assert [c.slug for c in result.value] == slugs.split(",")
