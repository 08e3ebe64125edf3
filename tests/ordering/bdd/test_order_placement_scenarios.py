"""BDD tests for order placement and payment."""

import asyncio
import json

from protean.exceptions import ValidationError
from pytest_bdd import parsers, scenarios, then, when

scenarios("features/order_placement.feature")


@when(parsers.cfparse('the shopper places the order with key "{key}" paying "{method}"'))
def _(orchestrator, session, context, key, method):
    try:
        context["outcome"] = asyncio.run(orchestrator.checkout(key, method, session))
    except ValidationError as exc:
        context["rejected"] = exc


@then(parsers.cfparse('order "{order_id}" is confirmed with payment status "{status}"'))
def _(context, order_id, status):
    outcome = context["outcome"]
    assert not outcome.ambiguous
    assert outcome.order_id == order_id
    assert outcome.payment_status == status


@then(parsers.cfparse('order "{order_id}" is shown as "{status}" with flag "{flag}"'))
def _(context, order_id, status, flag):
    outcome = context["outcome"]
    assert outcome.ambiguous
    assert outcome.order_id == order_id
    assert outcome.ambiguity.fallback_status == status
    assert outcome.ambiguity.flag == flag


@then(parsers.cfparse('the payment was requested with key "{key}"'))
def _(marketplace, key):
    payment_calls = marketplace.calls("POST", "/payments/stripe/intent") + marketplace.calls(
        "POST", "/payments/cod/confirm"
    )
    assert [json.loads(r.content)["idempotency_key"] for r in payment_calls] == [key]


@then("only one order exists")
def _(marketplace):
    assert list(marketplace.orders) == ["ord_1"]


@then("the payment was requested with the rotated guest token")
def _(marketplace, session):
    (intent,) = marketplace.calls("POST", "/payments/stripe/intent")
    (placement,) = marketplace.calls("POST", "/checkout/place-order")
    assert intent.headers["X-Guest-Token"] == session.guest_token
    assert placement.headers["X-Guest-Token"] != session.guest_token


@then("the order is rejected as invalid")
def _(context):
    assert "rejected" in context
    assert "outcome" not in context
