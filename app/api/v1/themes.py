"""Public theme lookup for server pages."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.cache import Cache, get_cache
from app.core.config import Settings, get_settings
from app.core.database import get_db
from app.schemas.theme import ServerThemeResponse
from app.services.themes import get_server_theme

router = APIRouter()


@router.get("/server/{slug}", response_model=ServerThemeResponse)
def server_theme(
    slug: str,
    db: Annotated[Session, Depends(get_db)],
    cache: Annotated[Cache, Depends(get_cache)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> ServerThemeResponse:
    """Return the server's custom theme; 404 if it has none. No authentication required."""
    return get_server_theme(db, cache, slug, settings)
