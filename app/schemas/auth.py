"""Request/response schemas for auth endpoints and the decoded token user."""

import uuid
from typing import Any

from pydantic import EmailStr, Field

from app.core.security import (
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    USERNAME_MAX_LEN,
    USERNAME_MIN_LEN,
    USERNAME_PATTERN,
)
from app.schemas.base import APIRequest, APIResponse


class RegisterRequest(APIRequest):
    """Password registration."""

    email: EmailStr
    password: str = Field(..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN)
    name: str | None = Field(default=None, max_length=255)
    username: str = Field(
        ...,
        min_length=USERNAME_MIN_LEN,
        max_length=USERNAME_MAX_LEN,
        pattern=USERNAME_PATTERN,
        description="3-20 letters, digits or underscores",
    )


class LoginRequest(APIRequest):
    """Credentials for password login."""

    email: EmailStr
    password: str = Field(..., min_length=1, max_length=PASSWORD_MAX_LEN)


class RefreshRequest(APIRequest):
    """Body for refresh and logout."""

    refresh_token: str = Field(..., min_length=1, max_length=255)


class OAuthProfile(APIRequest):
    """Identity returned by an OAuth provider, normalised across providers."""

    provider: str
    provider_id: str
    email: EmailStr
    name: str | None = None
    profile_data: dict[str, Any] | None = None


class AuthUser(APIResponse):
    """User summary embedded in auth responses."""

    id: uuid.UUID
    email: str
    name: str | None = None
    auth_provider: str | None = None


class AuthResponse(APIResponse):
    """Token pair plus user summary."""

    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    user: AuthUser


class ProfileResponse(APIResponse):
    """Authenticated user's own profile."""

    id: uuid.UUID
    email: str
    name: str | None = None
    username: str | None = None
    avatar_url: str | None = None
    bio: str | None = None
    auth_provider: str | None = None
    email_verified: bool
    is_admin: bool
    roles: list[str]


class PermissionClaim(APIResponse):
    resource: str
    action: str


class RoleClaim(APIResponse):
    id: str
    name: str
    permissions: list[PermissionClaim] = Field(default_factory=list)


class CurrentUser(APIResponse):
    """
    User as described by a verified access token.

    Built from the token payload only; roles and permissions are the snapshot taken
    when the token was issued.
    """

    id: uuid.UUID
    email: str
    roles: list[RoleClaim] = Field(default_factory=list)
    is_admin: bool = False

    @property
    def role_names(self) -> set[str]:
        return {role.name for role in self.roles}

    @property
    def permission_names(self) -> set[str]:
        return {
            f"{perm.resource}:{perm.action}"
            for role in self.roles
            for perm in role.permissions
        }
