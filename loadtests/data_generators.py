"""Faker-based data generators for Locust load test scenarios.

Generated values pass the storefront's own validation rules (idempotency
key shape, quantity bounds) so failures point at the system under load,
not at the generator.
"""

import os
import random
import time
import uuid

from faker import Faker

fake = Faker()

SEARCH_TERMS = ["notebook", "mug", "print", "pen", "lamp", "tote"]
CATEGORIES = ["stationery", "prints", "home"]
SORT_ORDERS = ["relevance", "newest", "price_low_high", "price_high_low", "rating"]


def search_params() -> dict:
    """Query parameters for GET /search; roughly a third carry a category."""
    params = {"q": random.choice(SEARCH_TERMS), "sort": random.choice(SORT_ORDERS)}
    if random.random() < 0.33:
        params["category"] = random.choice(CATEGORIES)
    return params


def cart_quantity(low: int = 1, high: int = 4) -> str:
    """Quantities are posted as form strings, like a browser would."""
    return str(random.randint(low, high))


def idempotency_key() -> str:
    """A key in the same shape the checkout page issues."""
    return f"chk_{int(time.time() * 1000)}_lt{uuid.uuid4().hex[:10]}"


def payment_method() -> str:
    """Online payment dominates; pay-on-delivery is the minority path."""
    return random.choices(["stripe", "cod"], weights=[4, 1])[0]


def vendor_credentials() -> dict:
    """Seeded vendor account from the environment, else a throwaway one.

    Throwaway accounts exercise the rejected-login path.
    """
    if os.environ.get("LOADTEST_VENDOR_EMAIL"):
        return {
            "email": os.environ["LOADTEST_VENDOR_EMAIL"],
            "password": os.environ.get("LOADTEST_VENDOR_PASSWORD", ""),
        }
    return {
        "email": f"{fake.user_name()[:20]}.{uuid.uuid4().hex[:4]}@{fake.free_email_domain()}",
        "password": fake.password(length=14),
    }
