"""Tests for vendor/admin sign-in and the vendor status read."""

import pytest
from protean.exceptions import ValidationError

from identity.access import AccountAccess
from identity.tokens import Role
from shared.errors import AuthRequired, UpstreamError


@pytest.fixture()
def accounts(transport):
    return AccountAccess(transport)


class TestLogin:
    @pytest.mark.asyncio
    async def test_vendor_login_fills_vendor_slot(self, marketplace, accounts, session):
        token = marketplace.register_user("maker@example.com", "s3cret-pass")
        auth = await accounts.login(session, Role.VENDOR, "maker@example.com", "s3cret-pass")
        assert auth.access_token == token
        assert session.vendor_token == token
        assert session.admin_token is None

    @pytest.mark.asyncio
    async def test_admin_login_fills_admin_slot(self, marketplace, accounts, session):
        token = marketplace.register_user("ops@example.com", "s3cret-pass", role="admin")
        await accounts.login(session, Role.ADMIN, "ops@example.com", "s3cret-pass")
        assert session.admin_token == token

    @pytest.mark.asyncio
    async def test_wrong_password_raises_upstream_error(self, marketplace, accounts, session):
        marketplace.register_user("maker@example.com", "s3cret-pass")
        with pytest.raises(UpstreamError) as exc_info:
            await accounts.login(session, Role.VENDOR, "maker@example.com", "wrong-pass")
        assert exc_info.value.status == 401
        assert session.vendor_token is None

    @pytest.mark.asyncio
    async def test_malformed_email_is_rejected_locally(self, marketplace, accounts, session):
        with pytest.raises(ValidationError):
            await accounts.login(session, Role.VENDOR, "not-an-email", "s3cret-pass")
        assert marketplace.requests == []

    @pytest.mark.asyncio
    async def test_guest_role_cannot_sign_in(self, marketplace, accounts, session):
        with pytest.raises(ValidationError):
            await accounts.login(session, Role.GUEST, "maker@example.com", "s3cret-pass")
        assert marketplace.requests == []

    def test_logout_clears_slot(self, accounts, session):
        session.sign_in(Role.VENDOR, "at_1")
        accounts.logout(session, Role.VENDOR)
        assert session.vendor_token is None


class TestVendorVerificationStatus:
    @pytest.mark.asyncio
    async def test_requires_vendor_token(self, marketplace, accounts, session):
        with pytest.raises(AuthRequired):
            await accounts.vendor_verification_status(session)
        assert marketplace.requests == []

    @pytest.mark.asyncio
    async def test_returns_profile(self, marketplace, accounts, session):
        token = marketplace.register_user("maker@example.com", "s3cret-pass")
        session.sign_in(Role.VENDOR, token)
        profile = await accounts.vendor_verification_status(session)
        assert profile.slug == "north-studio"
        assert profile.verification_state == "pending"
