"""Tests for payment method parsing."""

import pytest

from payments.methods import DEFAULT_PAYMENT_METHOD, PaymentMethod


class TestPaymentMethodParse:
    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("stripe", PaymentMethod.ONLINE),
            ("ONLINE", PaymentMethod.ONLINE),
            (" cod ", PaymentMethod.PAY_ON_DELIVERY),
            ("pay_on_delivery", PaymentMethod.PAY_ON_DELIVERY),
        ],
    )
    def test_aliases(self, raw, expected):
        assert PaymentMethod.parse(raw) is expected

    def test_enum_passes_through(self):
        assert PaymentMethod.parse(PaymentMethod.PAY_ON_DELIVERY) is PaymentMethod.PAY_ON_DELIVERY

    def test_blank_uses_default(self):
        assert PaymentMethod.parse("", default=DEFAULT_PAYMENT_METHOD) is PaymentMethod.ONLINE

    def test_blank_without_default_is_an_error(self):
        with pytest.raises(ValueError):
            PaymentMethod.parse("")

    def test_unknown(self):
        with pytest.raises(ValueError):
            PaymentMethod.parse("paypal")

    def test_wire_values(self):
        assert PaymentMethod.ONLINE.value == "stripe"
        assert PaymentMethod.PAY_ON_DELIVERY.value == "cod"

    def test_online_is_default(self):
        assert DEFAULT_PAYMENT_METHOD is PaymentMethod.ONLINE
