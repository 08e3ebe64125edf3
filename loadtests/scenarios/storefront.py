"""Storefront load test scenarios.

Stateful SequentialTaskSet journeys against the storefront's page-data
endpoints and form actions. Actions answer with 303 redirects, so every
action request disables redirect following and inspects the Location
header for an error flag.
"""

import random

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import (
    cart_quantity,
    idempotency_key,
    payment_method,
    search_params,
    vendor_credentials,
)
from loadtests.helpers.response import extract_error_detail, redirect_error
from loadtests.helpers.state import ShopperState, VendorState


class BrowseToConfirmationJourney(SequentialTaskSet):
    """Search -> Product -> Add x2 -> Update -> Checkout -> Place Order -> Confirmation.

    Models a guest shopper converting. The guest token cookie issued on the
    first cart mutation carries the cart through the rest of the journey.
    """

    def on_start(self):
        self.state = ShopperState()

    @task
    def search(self):
        with self.client.get("/search", params=search_params(), catch_response=True, name="GET /search") as resp:
            if resp.status_code != 200:
                resp.failure(f"Search failed: {resp.status_code} — {extract_error_detail(resp)}")
                self.interrupt()
                return
            items = resp.json()["results"]["items"]
            self.state.product_ids = [item["id"] for item in items]
            if not self.state.product_ids:
                # Nothing matched; a real shopper would search again
                self.interrupt()

    @task
    def view_product(self):
        product_id = random.choice(self.state.product_ids)
        with self.client.get(f"/products/{product_id}", catch_response=True, name="GET /products/{id}") as resp:
            if resp.status_code != 200:
                resp.failure(f"Product page failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def add_first_item(self):
        self._add(self.state.product_ids[0])

    @task
    def add_second_item(self):
        self._add(random.choice(self.state.product_ids))

    @task
    def view_cart(self):
        with self.client.get("/cart", catch_response=True, name="GET /cart") as resp:
            if resp.status_code != 200:
                resp.failure(f"Cart page failed: {resp.status_code} — {extract_error_detail(resp)}")
                self.interrupt()
                return
            self.state.cart_item_ids = [item["id"] for item in resp.json()["cart"]["items"]]
            if not self.state.cart_item_ids:
                resp.failure("Cart is empty after two adds")
                self.interrupt()

    @task
    def update_quantity(self):
        with self.client.post(
            "/actions/cart/update",
            data={"item_id": self.state.cart_item_ids[0], "qty": cart_quantity(2, 5)},
            allow_redirects=False,
            catch_response=True,
            name="POST /actions/cart/update",
        ) as resp:
            if resp.status_code != 303 or redirect_error(resp):
                resp.failure(f"Update quantity failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def view_checkout(self):
        with self.client.get("/checkout", catch_response=True, name="GET /checkout") as resp:
            if resp.status_code != 200:
                resp.failure(f"Checkout page failed: {resp.status_code} — {extract_error_detail(resp)}")
                self.interrupt()
                return
            page = resp.json()
            if not page["ready"]:
                resp.failure(f"Checkout not ready: {page.get('error')}")
                self.interrupt()
                return
            self.state.idempotency_key = page["idempotency_key"] or idempotency_key()
            self.state.payment_method = payment_method()

    @task
    def place_order(self):
        with self.client.post(
            "/actions/checkout/place-order",
            data={
                "idempotency_key": self.state.idempotency_key,
                "payment_method": self.state.payment_method,
            },
            allow_redirects=False,
            catch_response=True,
            name="POST /actions/checkout/place-order",
        ) as resp:
            location = resp.headers.get("location", "")
            if resp.status_code != 303 or not location.startswith("/checkout/confirmation"):
                resp.failure(f"Place order failed: {resp.status_code} — {extract_error_detail(resp)}")
                self.interrupt()
                return
            if redirect_error(resp):
                # Order exists but payment is unresolved; still reaches confirmation
                resp.failure(f"Payment unresolved: {redirect_error(resp)}")
            self.state.confirmation_url = location

    @task
    def double_submit(self):
        """Resubmit with the same key; the storefront must land on the same order."""
        if random.random() > 0.2:
            return
        with self.client.post(
            "/actions/checkout/place-order",
            data={
                "idempotency_key": self.state.idempotency_key,
                "payment_method": self.state.payment_method,
            },
            allow_redirects=False,
            catch_response=True,
            name="POST /actions/checkout/place-order [retry]",
        ) as resp:
            first = self.state.confirmation_url.split("&", 1)[0] + "&"
            if not resp.headers.get("location", "").startswith(first):
                resp.failure(f"Retry produced a different order: {extract_error_detail(resp)}")

    @task
    def view_confirmation(self):
        with self.client.get(
            self.state.confirmation_url,
            catch_response=True,
            name="GET /checkout/confirmation",
        ) as resp:
            if resp.status_code != 200 or not resp.json()["found"]:
                resp.failure(f"Confirmation failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def done(self):
        self.interrupt()

    def _add(self, product_id: str):
        with self.client.post(
            "/actions/cart/add",
            data={"product_id": product_id, "qty": cart_quantity()},
            allow_redirects=False,
            catch_response=True,
            name="POST /actions/cart/add",
        ) as resp:
            if resp.status_code != 303 or redirect_error(resp):
                resp.failure(f"Add to cart failed: {resp.status_code} — {extract_error_detail(resp)}")


class CartAbandonmentJourney(SequentialTaskSet):
    """Search -> Add -> Remove -> Leave. Browsing traffic with no order."""

    def on_start(self):
        self.state = ShopperState()

    @task
    def search(self):
        with self.client.get("/search", params=search_params(), catch_response=True, name="GET /search") as resp:
            if resp.status_code != 200:
                resp.failure(f"Search failed: {resp.status_code} — {extract_error_detail(resp)}")
                self.interrupt()
                return
            self.state.product_ids = [item["id"] for item in resp.json()["results"]["items"]]
            if not self.state.product_ids:
                self.interrupt()

    @task
    def add_item(self):
        with self.client.post(
            "/actions/cart/add",
            data={"product_id": random.choice(self.state.product_ids), "qty": cart_quantity()},
            allow_redirects=False,
            catch_response=True,
            name="POST /actions/cart/add",
        ) as resp:
            if resp.status_code != 303 or redirect_error(resp):
                resp.failure(f"Add to cart failed: {resp.status_code} — {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def remove_item(self):
        resp = self.client.get("/cart", name="GET /cart")
        items = resp.json()["cart"]["items"] if resp.status_code == 200 else []
        if not items:
            self.interrupt()
            return
        with self.client.post(
            "/actions/cart/delete",
            data={"item_id": items[0]["id"]},
            allow_redirects=False,
            catch_response=True,
            name="POST /actions/cart/delete",
        ) as resp:
            if resp.status_code != 303 or redirect_error(resp):
                resp.failure(f"Remove item failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def leave(self):
        self.client.cookies.clear()
        self.interrupt()


class VendorStatusJourney(SequentialTaskSet):
    """Login -> Verification Status -> Logout."""

    def on_start(self):
        self.state = VendorState()

    @task
    def login(self):
        with self.client.post(
            "/actions/vendor/login",
            data=vendor_credentials(),
            allow_redirects=False,
            catch_response=True,
            name="POST /actions/vendor/login",
        ) as resp:
            if resp.status_code != 303:
                resp.failure(f"Vendor login failed: {resp.status_code} — {extract_error_detail(resp)}")
                self.interrupt()
                return
            # A rejected login is a valid outcome for throwaway accounts
            self.state.signed_in = redirect_error(resp) is None
            if not self.state.signed_in:
                self.interrupt()

    @task
    def verification_status(self):
        with self.client.get(
            "/vendor/verification-status",
            allow_redirects=False,
            catch_response=True,
            name="GET /vendor/verification-status",
        ) as resp:
            if resp.status_code == 200:
                self.state.verification_state = resp.json().get("verification_state")
            else:
                resp.failure(f"Vendor status failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def logout(self):
        with self.client.post(
            "/actions/vendor/logout",
            allow_redirects=False,
            catch_response=True,
            name="POST /actions/vendor/logout",
        ) as resp:
            if resp.status_code != 303:
                resp.failure(f"Vendor logout failed: {resp.status_code} — {extract_error_detail(resp)}")
        self.interrupt()


class StorefrontUser(HttpUser):
    """Mixed storefront traffic.

    Weights model a marketplace where most visits browse, a share convert,
    and vendors occasionally check their verification status.
    """

    wait_time = between(0.5, 2)
    tasks = {
        BrowseToConfirmationJourney: 5,
        CartAbandonmentJourney: 4,
        VendorStatusJourney: 1,
    }
