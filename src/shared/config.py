"""Runtime configuration read from the environment.

All knobs live in environment variables so the same build runs against a
local API, staging, or production without code changes.
"""

import os
from dataclasses import dataclass

DEFAULT_API_BASE_URL = "http://localhost:8080/api/v1"
DEFAULT_TIMEOUT_SECONDS = 10.0

_PRODUCTION_LIKE = frozenset({"production", "staging"})


def current_environment() -> str:
    """Return the normalized environment name (defaults to development)."""
    return (os.getenv("ENV") or os.getenv("ENVIRONMENT") or os.getenv("PROTEAN_ENV") or "development").lower()


def is_production_like() -> bool:
    return current_environment() in _PRODUCTION_LIKE


@dataclass(frozen=True)
class Settings:
    """Resolved settings for outbound calls and cookie policy."""

    api_base_url: str = DEFAULT_API_BASE_URL
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    environment: str = "development"

    @property
    def secure_cookies(self) -> bool:
        return self.environment in _PRODUCTION_LIKE

    @classmethod
    def from_env(cls) -> "Settings":
        raw_timeout = os.getenv("MARKETPLACE_API_TIMEOUT")
        try:
            timeout = float(raw_timeout) if raw_timeout else DEFAULT_TIMEOUT_SECONDS
        except ValueError:
            timeout = DEFAULT_TIMEOUT_SECONDS

        return cls(
            api_base_url=(os.getenv("MARKETPLACE_API_BASE_URL") or DEFAULT_API_BASE_URL).rstrip("/"),
            timeout_seconds=timeout if timeout > 0 else DEFAULT_TIMEOUT_SECONDS,
            environment=current_environment(),
        )
