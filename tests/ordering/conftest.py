"""Ordering fixtures.

Checkout attempts are protean aggregates, so every ordering test runs
inside the ordering domain context.
"""

import pytest
from protean.integrations.pytest import DomainFixture

PLACEMENT_KEY = "chk_1767225600000_a1b2c3d4e5f6"


@pytest.fixture(scope="session")
def ordering_bed():
    from ordering.domain import ordering

    bed = DomainFixture(ordering)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(ordering_bed):
    with ordering_bed.domain_context():
        yield


@pytest.fixture
def placement_key():
    return PLACEMENT_KEY


@pytest.fixture
def placed_attempt(placement_key):
    """An attempt whose order exists and whose payment has not started."""
    from ordering.checkout.attempt import CheckoutAttempt

    attempt = CheckoutAttempt.create(placement_key)
    attempt.record_placement("ord_1", total_cents=5500, shipment_count=2)
    return attempt
