"""Session Token Manager — identity slots that survive stateless requests.

Three independent slots (guest, vendor, admin) each hold an opaque bearer
token. A ``TokenStore`` owns the storage (HTTP cookies in the storefront, a
dict elsewhere) and a ``SessionContext`` carries the three named slots through
one request/response cycle so no call ever reaches for ambient state.

Absence of a token is not an error: callers treat it as anonymous. Only
operations that need an identity call ``SessionContext.require()``, which
raises ``AuthRequired``.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import timedelta
from enum import Enum
from typing import Mapping

import structlog

from shared.errors import AuthRequired
from shared.transport import GUEST_TOKEN_HEADER

logger = structlog.get_logger(__name__)

MIN_TOKEN_TTL = timedelta(days=30)


class Role(Enum):
    GUEST = "guest"
    VENDOR = "vendor"
    ADMIN = "admin"


COOKIE_NAMES = {
    Role.GUEST: "mkt_guest_token",
    Role.VENDOR: "mkt_vendor_access_token",
    Role.ADMIN: "mkt_admin_access_token",
}


def effective_ttl(ttl: timedelta | None) -> timedelta:
    """Never let a persisted token expire sooner than ``MIN_TOKEN_TTL``."""
    if ttl is None or ttl < MIN_TOKEN_TTL:
        return MIN_TOKEN_TTL
    return ttl


@dataclass(frozen=True)
class Credential:
    """A token bound to the role that owns it."""

    role: Role
    token: str

    def header(self) -> tuple[str, str]:
        """The single identity header this credential contributes to a request."""
        if self.role is Role.GUEST:
            return GUEST_TOKEN_HEADER, self.token
        return "Authorization", f"Bearer {self.token}"


class TokenStore(ABC):
    """Abstract storage for the three identity slots."""

    @abstractmethod
    def read(self, role: Role) -> str | None:
        """Return the token in the slot, or None when anonymous."""
        ...

    @abstractmethod
    def persist(self, role: Role, token: str | None, ttl: timedelta | None = None) -> None:
        """Write the slot. Empty tokens are ignored; repeated writes are harmless."""
        ...

    @abstractmethod
    def clear(self, role: Role) -> None:
        """Remove the slot (logout)."""
        ...


class MemoryTokenStore(TokenStore):
    """Dict-backed store for scripts, workers and tests."""

    def __init__(self, initial: Mapping[Role, str] | None = None) -> None:
        self._tokens: dict[Role, str] = dict(initial or {})
        self.expiries: dict[Role, timedelta] = {}
        self.writes: list[tuple[Role, str]] = []

    def read(self, role: Role) -> str | None:
        return self._tokens.get(role)

    def persist(self, role: Role, token: str | None, ttl: timedelta | None = None) -> None:
        if not token:
            return
        self.expiries[role] = effective_ttl(ttl)
        if self._tokens.get(role) == token:
            return
        self._tokens[role] = token
        self.writes.append((role, token))

    def clear(self, role: Role) -> None:
        self._tokens.pop(role, None)
        self.expiries.pop(role, None)


class CookieTokenStore(TokenStore):
    """Cookie-backed store for one HTTP request/response cycle.

    Reads come from the incoming request cookies, overlaid with any writes
    made during this cycle so a rotated token is visible to the next call
    right away. ``apply()`` copies the pending writes onto the outgoing
    response.
    """

    def __init__(self, cookies: Mapping[str, str], secure: bool = False) -> None:
        self._cookies = dict(cookies)
        self._pending: dict[Role, tuple[str | None, timedelta]] = {}
        self.secure = secure

    def read(self, role: Role) -> str | None:
        if role in self._pending:
            return self._pending[role][0]
        return self._cookies.get(COOKIE_NAMES[role]) or None

    def persist(self, role: Role, token: str | None, ttl: timedelta | None = None) -> None:
        if not token:
            return
        self._pending[role] = (token, effective_ttl(ttl))

    def clear(self, role: Role) -> None:
        self._pending[role] = (None, MIN_TOKEN_TTL)

    @property
    def has_pending_writes(self) -> bool:
        return bool(self._pending)

    def apply(self, response) -> None:
        """Write pending slots onto a Starlette/FastAPI response."""
        for role, (token, ttl) in self._pending.items():
            name = COOKIE_NAMES[role]
            if token is None:
                response.delete_cookie(name, path="/", secure=self.secure, httponly=True, samesite="lax")
                continue
            response.set_cookie(
                name,
                token,
                max_age=int(ttl.total_seconds()),
                path="/",
                secure=self.secure,
                httponly=True,
                samesite="lax",
            )


class SessionContext:
    """Explicit identity for one logical flow, passed down the call chain."""

    def __init__(self, store: TokenStore) -> None:
        self.store = store

    @property
    def guest_token(self) -> str | None:
        return self.store.read(Role.GUEST)

    @property
    def vendor_token(self) -> str | None:
        return self.store.read(Role.VENDOR)

    @property
    def admin_token(self) -> str | None:
        return self.store.read(Role.ADMIN)

    def credential(self, role: Role = Role.GUEST) -> Credential | None:
        token = self.store.read(role)
        return Credential(role, token) if token else None

    def require(self, role: Role) -> Credential:
        credential = self.credential(role)
        if credential is None:
            raise AuthRequired(role)
        return credential

    def adopt_guest_token(self, token: str | None) -> None:
        """Persist a rotated guest token before any dependent call is issued."""
        if not token:
            return
        if token != self.guest_token:
            logger.debug("guest_token_rotated")
        self.store.persist(Role.GUEST, token)

    def sign_in(self, role: Role, token: str, ttl: timedelta | None = None) -> None:
        self.store.persist(role, token, ttl)

    def sign_out(self, role: Role) -> None:
        self.store.clear(role)
