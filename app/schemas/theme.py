"""Schemas for per-server UI themes."""

import uuid
from datetime import datetime

from pydantic import Field

from app.schemas.base import APIRequest, APIResponse


class ThemeColors(APIRequest):
    """CSS colour tokens for one colour mode."""

    background: str
    foreground: str
    card: str
    card_foreground: str
    popover: str
    popover_foreground: str
    primary: str
    primary_foreground: str
    secondary: str
    secondary_foreground: str
    muted: str
    muted_foreground: str
    accent: str
    accent_foreground: str
    destructive: str
    destructive_foreground: str
    border: str
    input: str
    ring: str


class Theme(APIRequest):
    id: str = Field(..., min_length=1, max_length=100)
    name: str = Field(..., min_length=1, max_length=100)
    light: ThemeColors
    dark: ThemeColors | None = None
    radius: str | None = None


class ServerThemeResponse(APIResponse):
    """Theme payload for GET /themes/server/{slug}."""

    server_id: uuid.UUID
    server_slug: str
    server_name: str
    theme: Theme
    created_at: datetime
    updated_at: datetime
