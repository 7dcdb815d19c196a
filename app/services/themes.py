"""Public per-server theme lookups, cached by slug."""

import logging
from typing import TYPE_CHECKING

from sqlalchemy.orm import Session

from app.core.cache import Cache
from app.core.config import get_settings
from app.core.exceptions import NotFoundError
from app.schemas.theme import ServerThemeResponse
from app.services.servers import get_server_by_slug, theme_cache_key

if TYPE_CHECKING:
    from app.core.config import Settings

logger = logging.getLogger(__name__)


def get_server_theme(
    db: Session,
    cache: Cache,
    slug: str,
    settings: "Settings | None" = None,
) -> ServerThemeResponse:
    """Theme of the server with this slug; NotFoundError if the server has none."""
    settings = settings or get_settings()
    key = theme_cache_key(slug)
    cached = cache.get(key)
    if cached is not None:
        return ServerThemeResponse.model_validate(cached)

    server = get_server_by_slug(db, slug)
    if server.theme is None:
        raise NotFoundError(f"Server '{slug}' does not have a custom theme configured")

    response = ServerThemeResponse(
        server_id=server.id,
        server_slug=server.slug,
        server_name=server.name,
        theme=server.theme,
        created_at=server.created_at,
        updated_at=server.updated_at,
    )
    cache.set(key, response.model_dump(mode="json"), ttl=settings.THEME_CACHE_TTL_SECONDS)
    return response
