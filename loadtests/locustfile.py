"""Marketplace storefront load testing — Locust entry point.

Run specific journeys with Locust's class selection.

Usage:
    # All journeys (web UI):
    locust -f loadtests/locustfile.py --host http://localhost:8000

    # Headless (CI mode):
    locust -f loadtests/locustfile.py StorefrontUser --headless \
           -u 50 -r 5 -t 300s --csv=results/loadtest
"""

import logging
import time

from locust import events

from loadtests.helpers.response import extract_error_detail
from loadtests.scenarios.storefront import StorefrontUser  # noqa: F401

logger = logging.getLogger("loadtest")


@events.request.add_listener
def on_request(request_type, name, response, exception, **_kw):
    """Log error details for every failed request.

    Fires globally for all journeys. Redirect flags such as
    ``place-order-failed`` are logged alongside plain 4xx/5xx bodies.
    """
    if exception:
        logger.error("[EXCEPTION] %s %s: %s", request_type, name, exception)
    elif response is not None and response.status_code >= 400:
        detail = extract_error_detail(response)
        logger.error("[%s] %s %s: %s", response.status_code, request_type, name, detail)


@events.test_start.add_listener
def on_test_start(environment, **_kwargs):
    print(f"\n[LOADTEST] Started at {time.strftime('%H:%M:%S')}")
    print(f"[LOADTEST] Target host: {environment.host}")
    print()


@events.test_stop.add_listener
def on_test_stop(environment, **_kwargs):
    """Print the failure ratio so CI logs show it without the CSV."""
    print(f"\n[LOADTEST] Stopped at {time.strftime('%H:%M:%S')}")
    total = environment.stats.total
    if total.num_requests:
        print(f"[LOADTEST] {total.num_failures}/{total.num_requests} requests failed ({total.fail_ratio:.1%})")
    print()
