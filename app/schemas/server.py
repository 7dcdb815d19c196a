"""Request/response schemas for server listings."""

import uuid
from datetime import datetime

from pydantic import Field, HttpUrl

from app.models.server import ServerCategory, ServerRegion, ServerStatus
from app.schemas.base import APIRequest, APIResponse
from app.schemas.theme import Theme


class ServerCreate(APIRequest):
    """New listing. A status sent by the client is ignored; listings start pending."""

    name: str = Field(..., min_length=3, max_length=100, examples=["Epic Survival Server"])
    ip_address: str = Field(..., min_length=1, max_length=255, examples=["play.epicserver.com"])
    port: int | None = Field(default=None, ge=1, le=65535, description="Defaults to 3000")
    description: str = Field(..., min_length=50, max_length=5000)
    website_url: HttpUrl | None = None
    discord_url: HttpUrl | None = None
    banner_url: HttpUrl | None = None
    logo_url: HttpUrl | None = None
    category: ServerCategory
    region: ServerRegion
    language: str | None = Field(default=None, min_length=2, max_length=10, description="ISO 639-1")
    max_players: int = Field(..., ge=1, le=10000)
    current_players: int | None = Field(default=None, ge=0)
    theme: Theme | None = None


class ServerUpdate(APIRequest):
    """Partial update; only fields present in the body are applied."""

    name: str | None = Field(default=None, min_length=3, max_length=100)
    ip_address: str | None = Field(default=None, min_length=1, max_length=255)
    port: int | None = Field(default=None, ge=1, le=65535)
    description: str | None = Field(default=None, min_length=50, max_length=5000)
    website_url: HttpUrl | None = None
    discord_url: HttpUrl | None = None
    banner_url: HttpUrl | None = None
    logo_url: HttpUrl | None = None
    category: ServerCategory | None = None
    region: ServerRegion | None = None
    language: str | None = Field(default=None, min_length=2, max_length=10)
    max_players: int | None = Field(default=None, ge=1, le=10000)
    current_players: int | None = Field(default=None, ge=0)
    is_online: bool | None = None
    verified: bool | None = None
    theme: Theme | None = None


class ServerResponse(APIResponse):
    """Listing as returned to clients (and stored in the cache)."""

    id: uuid.UUID
    owner_id: uuid.UUID
    slug: str
    name: str
    ip_address: str
    port: int
    description: str
    website_url: str | None = None
    discord_url: str | None = None
    banner_url: str | None = None
    logo_url: str | None = None
    category: ServerCategory
    region: ServerRegion
    language: str
    max_players: int
    current_players: int
    status: ServerStatus
    is_online: bool
    last_ping: datetime | None = None
    verified: bool
    featured: bool
    theme: Theme | None = None
    created_at: datetime
    updated_at: datetime
