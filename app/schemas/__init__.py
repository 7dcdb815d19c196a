"""Pydantic request/response schemas."""

from app.schemas.auth import (
    AuthResponse,
    AuthUser,
    CurrentUser,
    LoginRequest,
    OAuthProfile,
    ProfileResponse,
    RefreshRequest,
    RegisterRequest,
)
from app.schemas.health import HealthResponse
from app.schemas.server import ServerCreate, ServerResponse, ServerUpdate
from app.schemas.theme import ServerThemeResponse, Theme, ThemeColors

__all__ = [
    "AuthResponse",
    "AuthUser",
    "CurrentUser",
    "HealthResponse",
    "LoginRequest",
    "OAuthProfile",
    "ProfileResponse",
    "RefreshRequest",
    "RegisterRequest",
    "ServerCreate",
    "ServerResponse",
    "ServerThemeResponse",
    "ServerUpdate",
    "Theme",
    "ThemeColors",
]
