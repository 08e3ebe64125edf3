"""Integration tests for the storefront form actions."""

from urllib.parse import parse_qs, urlparse

from ordering.checkout.idempotency import new_idempotency_key


def _query(response):
    return {k: v[0] for k, v in parse_qs(urlparse(response.headers["location"]).query).items()}


def _fill_cart(client):
    client.post("/actions/cart/add", data={"product_id": "prd_a1", "qty": "2"})
    client.post("/actions/cart/add", data={"product_id": "prd_b1", "qty": "1"})


class TestCartActions:
    def test_add_redirects_to_cart_and_sets_guest_cookie(self, client):
        response = client.post("/actions/cart/add", data={"product_id": "prd_a1", "qty": "2"})
        assert response.status_code == 303
        assert response.headers["location"] == "/cart"
        cookie = response.headers["set-cookie"]
        assert cookie.startswith("mkt_guest_token=gt_")
        assert "HttpOnly" in cookie
        assert "samesite=lax" in cookie.lower()

    def test_add_without_product(self, client, marketplace):
        response = client.post("/actions/cart/add", data={"product_id": "  "})
        assert response.headers["location"] == "/search?error=missing-product"
        assert marketplace.requests == []

    def test_add_failure_returns_to_product(self, client):
        response = client.post("/actions/cart/add", data={"product_id": "prd_missing", "qty": "1"})
        assert response.headers["location"] == "/products/prd_missing?error=cart-add-failed"

    def test_cookie_is_sent_back_on_next_action(self, client, marketplace):
        client.post("/actions/cart/add", data={"product_id": "prd_a1"})
        token = client.cookies.get("mkt_guest_token")
        client.post("/actions/cart/add", data={"product_id": "prd_b1"})
        assert marketplace.calls("POST", "/cart/items")[-1].headers["X-Guest-Token"] == token

    def test_update_quantity(self, client):
        client.post("/actions/cart/add", data={"product_id": "prd_a1"})
        item_id = client.get("/cart").json()["cart"]["items"][0]["id"]
        response = client.post("/actions/cart/update", data={"item_id": item_id, "qty": "3"})
        assert response.headers["location"] == "/cart"
        assert client.get("/cart").json()["cart"]["items"][0]["qty"] == 3

    def test_update_without_item(self, client):
        response = client.post("/actions/cart/update", data={"qty": "3"})
        assert response.headers["location"] == "/cart?error=missing-item"

    def test_update_failure(self, client):
        client.post("/actions/cart/add", data={"product_id": "prd_a1"})
        response = client.post("/actions/cart/update", data={"item_id": "ci_missing", "qty": "3"})
        assert response.headers["location"] == "/cart?error=cart-update-failed"

    def test_delete(self, client):
        client.post("/actions/cart/add", data={"product_id": "prd_a1"})
        item_id = client.get("/cart").json()["cart"]["items"][0]["id"]
        response = client.post("/actions/cart/delete", data={"item_id": item_id})
        assert response.headers["location"] == "/cart"
        assert client.get("/cart").json()["cart"]["items"] == []

    def test_delete_without_item(self, client):
        response = client.post("/actions/cart/delete", data={})
        assert response.headers["location"] == "/cart?error=missing-item"

    def test_delete_failure(self, client):
        client.post("/actions/cart/add", data={"product_id": "prd_a1"})
        response = client.post("/actions/cart/delete", data={"item_id": "ci_missing"})
        assert response.headers["location"] == "/cart?error=cart-delete-failed"


class TestPlaceOrderAction:
    def test_online_checkout_redirects_to_confirmation(self, client):
        _fill_cart(client)
        key = new_idempotency_key()
        response = client.post(
            "/actions/checkout/place-order", data={"idempotency_key": key, "payment_method": "stripe"}
        )
        assert response.status_code == 303
        assert urlparse(response.headers["location"]).path == "/checkout/confirmation"
        assert _query(response) == {
            "orderId": "ord_1",
            "paymentMethod": "stripe",
            "paymentProviderRef": "pi_ref_1",
            "paymentStatus": "pending",
        }

    def test_cod_checkout(self, client):
        _fill_cart(client)
        response = client.post(
            "/actions/checkout/place-order",
            data={"idempotency_key": new_idempotency_key(), "payment_method": "cod"},
        )
        query = _query(response)
        assert query["paymentMethod"] == "cod"
        assert query["paymentStatus"] == "pending_collection"
        assert query["paymentProviderRef"] == "cod_ref_1"

    def test_missing_key(self, client, marketplace):
        response = client.post("/actions/checkout/place-order", data={"payment_method": "stripe"})
        assert response.headers["location"] == "/checkout?error=missing-idempotency-key"
        assert marketplace.requests == []

    def test_invalid_key(self, client, marketplace):
        response = client.post("/actions/checkout/place-order", data={"idempotency_key": "x"})
        assert response.headers["location"] == "/checkout?error=invalid-idempotency-key"
        assert marketplace.requests == []

    def test_invalid_payment_method(self, client):
        response = client.post(
            "/actions/checkout/place-order",
            data={"idempotency_key": new_idempotency_key(), "payment_method": "barter"},
        )
        assert response.headers["location"] == "/checkout?error=invalid-payment-method"

    def test_empty_cart(self, client):
        response = client.post("/actions/checkout/place-order", data={"idempotency_key": new_idempotency_key()})
        assert response.headers["location"] == "/checkout?error=place-order-failed"

    def test_intent_failure_shows_pending_order(self, client, marketplace):
        _fill_cart(client)
        marketplace.fail("POST", "/payments/stripe/intent", 500)
        response = client.post(
            "/actions/checkout/place-order",
            data={"idempotency_key": new_idempotency_key(), "payment_method": "stripe"},
        )
        assert _query(response) == {
            "orderId": "ord_1",
            "paymentMethod": "stripe",
            "paymentStatus": "pending",
            "error": "stripe-intent-failed",
        }
        assert len(marketplace.calls("POST", "/checkout/place-order")) == 1

    def test_cod_failure_shows_pending_collection(self, client, marketplace):
        _fill_cart(client)
        marketplace.fail("POST", "/payments/cod/confirm", 503)
        response = client.post(
            "/actions/checkout/place-order",
            data={"idempotency_key": new_idempotency_key(), "payment_method": "cod"},
        )
        query = _query(response)
        assert query["paymentStatus"] == "pending_collection"
        assert query["error"] == "cod-confirmation-failed"

    def test_resubmitting_same_key_keeps_one_order(self, client, marketplace):
        _fill_cart(client)
        key = new_idempotency_key()
        first = client.post("/actions/checkout/place-order", data={"idempotency_key": key})
        second = client.post("/actions/checkout/place-order", data={"idempotency_key": key})
        assert _query(first)["orderId"] == _query(second)["orderId"] == "ord_1"
        assert len(marketplace.orders) == 1

    def test_rotated_token_reaches_the_browser(self, client, marketplace):
        _fill_cart(client)
        marketplace.rotate_tokens = True
        before = client.cookies.get("mkt_guest_token")
        response = client.post("/actions/checkout/place-order", data={"idempotency_key": new_idempotency_key()})
        assert "mkt_guest_token=" in response.headers["set-cookie"]
        assert client.cookies.get("mkt_guest_token") != before


class TestVendorAndAdminSessions:
    def test_vendor_login_and_logout(self, client, marketplace):
        token = marketplace.register_user("maker@example.com", "s3cret-pass")
        response = client.post("/actions/vendor/login", data={"email": "maker@example.com", "password": "s3cret-pass"})
        assert response.headers["location"] == "/vendor?notice=vendor-login-success"
        assert client.cookies.get("mkt_vendor_access_token") == token

        response = client.post("/actions/vendor/logout")
        assert response.headers["location"] == "/vendor?notice=vendor-logged-out"
        assert "mkt_vendor_access_token=" in response.headers["set-cookie"]

    def test_vendor_login_failure(self, client, marketplace):
        marketplace.register_user("maker@example.com", "s3cret-pass")
        response = client.post("/actions/vendor/login", data={"email": "maker@example.com", "password": "nope-nope"})
        assert response.headers["location"] == "/vendor?error=vendor-login-failed"

    def test_admin_login(self, client, marketplace):
        token = marketplace.register_user("ops@example.com", "s3cret-pass", role="admin")
        response = client.post("/actions/admin/login", data={"email": "ops@example.com", "password": "s3cret-pass"})
        assert response.headers["location"] == "/admin?notice=admin-login-success"
        assert client.cookies.get("mkt_admin_access_token") == token

    def test_admin_login_with_bad_email(self, client, marketplace):
        response = client.post("/actions/admin/login", data={"email": "ops", "password": "s3cret-pass"})
        assert response.headers["location"] == "/admin?error=admin-login-failed"
        assert marketplace.requests == []


class TestUnreadableUpstreamReplies:
    def test_malformed_intent_reply_still_reaches_confirmation(self, client, marketplace):
        _fill_cart(client)
        marketplace.reply("POST", "/payments/stripe/intent", 201, {"status": "pending"})
        response = client.post(
            "/actions/checkout/place-order",
            data={"idempotency_key": new_idempotency_key(), "payment_method": "stripe"},
        )
        assert response.status_code == 303
        assert response.headers["location"].startswith("/checkout/confirmation")
        query = _query(response)
        assert query["orderId"] == "ord_1"
        assert query["paymentStatus"] == "pending"
        assert query["error"] == "stripe-intent-failed"

    def test_unreadable_cart_reply_is_an_update_failure(self, client, marketplace):
        client.post("/actions/cart/add", data={"product_id": "prd_a1"})
        item_id = client.get("/cart").json()["cart"]["items"][0]["id"]
        marketplace.reply("PATCH", f"/cart/items/{item_id}", 200, {"items": [{"id": item_id}]})
        response = client.post("/actions/cart/update", data={"item_id": item_id, "qty": "3"})
        assert response.headers["location"] == "/cart?error=cart-update-failed"
