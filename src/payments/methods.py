"""Payment methods offered at checkout.

Online (Stripe) payment is the primary flow; pay-on-delivery is the
secondary option.
"""

from enum import Enum


class PaymentMethod(Enum):
    ONLINE = "stripe"
    PAY_ON_DELIVERY = "cod"

    @classmethod
    def parse(cls, raw: "str | PaymentMethod | None", default: "PaymentMethod | None" = None) -> "PaymentMethod":
        """Accept wire names (``stripe``/``cod``) and long names (``online``/``pay_on_delivery``)."""
        if isinstance(raw, cls):
            return raw
        value = (raw or "").strip().lower()
        if not value and default is not None:
            return default
        if value in _ALIASES:
            return _ALIASES[value]
        raise ValueError(f"Unknown payment method: {raw!r}")


_ALIASES = {
    "stripe": PaymentMethod.ONLINE,
    "online": PaymentMethod.ONLINE,
    "cod": PaymentMethod.PAY_ON_DELIVERY,
    "pay_on_delivery": PaymentMethod.PAY_ON_DELIVERY,
}

DEFAULT_PAYMENT_METHOD = PaymentMethod.ONLINE
