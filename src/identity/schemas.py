"""Pydantic contracts for the remote auth and vendor endpoints."""

from pydantic import BaseModel, Field


class AuthCredentials(BaseModel):
    email: str = Field(..., min_length=3, max_length=254, pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    password: str = Field(..., min_length=8, max_length=256)


class AuthUser(BaseModel):
    id: str
    email: str
    role: str
    vendor_id: str | None = None


class AuthResponse(BaseModel):
    access_token: str
    refresh_token: str | None = None
    user: AuthUser | None = None


class VendorProfile(BaseModel):
    id: str
    owner_user_id: str | None = None
    slug: str
    display_name: str
    verification_state: str
    commission_override_bps: int | None = None
    created_at: str | None = None
    updated_at: str | None = None
