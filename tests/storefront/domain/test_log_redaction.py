"""Credential values must not reach log sinks in clear text."""

from storefront.utils.logging import get_log_level, redact_secrets


def test_tokens_keep_only_a_prefix():
    event = redact_secrets(None, "info", {"event": "cart_mutated", "guest_token": "gt_123456789"})
    assert event["guest_token"] == "gt_1***"
    assert event["event"] == "cart_mutated"


def test_non_secret_fields_untouched():
    event = redact_secrets(None, "info", {"order_id": "ord_1", "client_secret": "pi_ref_1_secret"})
    assert event["order_id"] == "ord_1"
    assert event["client_secret"] == "pi_r***"


def test_empty_and_missing_values_pass_through():
    event = redact_secrets(None, "info", {"access_token": None, "password": ""})
    assert event == {"access_token": None, "password": ""}


def test_log_level_follows_environment(monkeypatch):
    for name in ("LOG_LEVEL", "ENV", "ENVIRONMENT"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("PROTEAN_ENV", "production")
    assert get_log_level() == "INFO"
    monkeypatch.setenv("LOG_LEVEL", "debug")
    assert get_log_level() == "DEBUG"
