"""Shared BDD fixtures and step definitions for the Ordering domain."""

import asyncio

import pytest
from pytest_bdd import given, parsers, then

from ordering.cart.aggregator import CartAggregator
from ordering.checkout.orchestrator import OrderPlacementOrchestrator
from ordering.checkout.quote import QuoteEngine


@pytest.fixture()
def context():
    """Mutable scratch space shared between steps of one scenario."""
    return {}


@given("an empty marketplace")
def _(marketplace):
    assert marketplace.orders == {}
    marketplace.products.clear()


@given(parsers.cfparse('vendor "{vendor_id}" sells "{product_id}" at {price:d} cents'))
def _(marketplace, vendor_id, product_id, price):
    marketplace.products[product_id] = {
        "vendor_id": vendor_id,
        "title": product_id,
        "unit_price_cents": price,
        "stock": 100,
    }


@given(parsers.cfparse('the shopper has {qty:d} of "{product_id}" in the cart'))
def _(transport, session, qty, product_id):
    asyncio.run(CartAggregator(transport).add(session, product_id, qty))


@given("the guest token rotates on every write")
def _(marketplace):
    marketplace.rotate_tokens = True


@given(parsers.cfparse('the "{path}" endpoint fails with status {status:d}'))
def _(marketplace, path, status):
    marketplace.fail("POST", path, status)


@pytest.fixture()
def quotes(transport):
    return QuoteEngine(transport)


@pytest.fixture()
def orchestrator(transport):
    return OrderPlacementOrchestrator(transport)


@then(parsers.cfparse('"{path}" was called {count:d} time'))
def _(marketplace, path, count):
    assert len(marketplace.calls("POST", path)) == count


@then(parsers.cfparse('"{path}" was called {count:d} times'))
def _(marketplace, path, count):
    assert len(marketplace.calls("POST", path)) == count
