"""Vendor/admin sign-in and role-gated reads.

Token issuance itself belongs to the remote auth service; this module only
exchanges credentials for an access token and keeps it in the right slot.
"""

import structlog
from protean.exceptions import ValidationError
from pydantic import ValidationError as SchemaError

from identity.schemas import AuthCredentials, AuthResponse, VendorProfile
from identity.tokens import Role, SessionContext
from shared.transport import TransportClient

logger = structlog.get_logger(__name__)

_SIGN_IN_ROLES = {Role.VENDOR, Role.ADMIN}


class AccountAccess:
    def __init__(self, transport: TransportClient) -> None:
        self.transport = transport

    async def login(self, session: SessionContext, role: Role, email: str, password: str) -> AuthResponse:
        """Exchange credentials for an access token and persist it in the role's slot."""
        if role not in _SIGN_IN_ROLES:
            raise ValidationError({"role": [f"Sign-in is not available for the {role.value} role"]})
        try:
            credentials = AuthCredentials(email=email.strip(), password=password)
        except SchemaError as exc:
            raise ValidationError({"credentials": [err["msg"] for err in exc.errors()]}) from exc

        result = await self.transport.request("/auth/login", method="POST", body=credentials.model_dump())
        auth = AuthResponse.model_validate(result.payload)
        session.sign_in(role, auth.access_token)
        logger.info("signed_in", role=role.value)
        return auth

    def logout(self, session: SessionContext, role: Role) -> None:
        session.sign_out(role)
        logger.info("signed_out", role=role.value)

    async def vendor_verification_status(self, session: SessionContext) -> VendorProfile:
        credential = session.require(Role.VENDOR)
        result = await self.transport.request("/vendor/verification-status", credential=credential)
        return VendorProfile.model_validate(result.payload)
