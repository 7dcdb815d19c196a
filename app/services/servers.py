"""Server listings: CRUD, moderation and cache-aside reads.

Reads by id and the full list go through the cache; every write deletes the affected
keys after the database commit. A reader racing a writer can still see the old cached
value until the delete lands.

Ownership is not checked here: update and delete are gated only by the route's role and
permission guards, so any holder of servers:update can edit any listing.
"""

import logging
import re
import uuid

from sqlalchemy.orm import Session

from app.core.cache import Cache
from app.core.exceptions import ConflictError, NotFoundError
from app.models import Server, ServerStatus
from app.models.server import DEFAULT_SERVER_LANGUAGE, DEFAULT_SERVER_PORT
from app.schemas.server import ServerCreate, ServerResponse, ServerUpdate

logger = logging.getLogger(__name__)

CACHE_KEY_ALL = "servers:all"
CACHE_KEY_PREFIX = "server:"
THEME_CACHE_KEY_PREFIX = "theme:server:"

_NON_SLUG_CHARS = re.compile(r"[^a-z0-9]+")

# Fields an update may explicitly clear with null; for the rest null means "leave as is".
CLEARABLE_FIELDS = frozenset({"website_url", "discord_url", "banner_url", "logo_url", "theme"})


def server_cache_key(server_id: uuid.UUID | str) -> str:
    return f"{CACHE_KEY_PREFIX}{server_id}"


def theme_cache_key(slug: str) -> str:
    return f"{THEME_CACHE_KEY_PREFIX}{slug}"


def generate_slug(name: str) -> str:
    """URL-friendly slug: lowercase, runs of other characters become '-', no edge hyphens."""
    return _NON_SLUG_CHARS.sub("-", name.lower()).strip("-")


def to_response(server: Server) -> ServerResponse:
    return ServerResponse.model_validate(server)


def _ensure_slug_available(db: Session, slug: str, exclude_id: uuid.UUID | None = None) -> None:
    query = db.query(Server.id).filter(Server.slug == slug)
    if exclude_id is not None:
        query = query.filter(Server.id != exclude_id)
    if query.first() is not None:
        raise ConflictError(f"A server with slug {slug} already exists")


def _theme_json(data: ServerCreate | ServerUpdate) -> dict | None:
    # Stored in the same camelCase shape the API serves.
    if data.theme is None:
        return None
    return data.theme.model_dump(mode="json", by_alias=True, exclude_none=True)


def _get_or_404(db: Session, server_id: uuid.UUID) -> Server:
    server = db.query(Server).filter(Server.id == server_id).first()
    if server is None:
        raise NotFoundError(f"Server with ID {server_id} not found")
    return server


def _invalidate(cache: Cache, server_id: uuid.UUID, *slugs: str) -> None:
    cache.delete(
        CACHE_KEY_ALL,
        server_cache_key(server_id),
        *(theme_cache_key(slug) for slug in slugs if slug),
    )


def list_servers(db: Session, cache: Cache) -> list[ServerResponse]:
    """All listings, newest first."""
    cached = cache.get(CACHE_KEY_ALL)
    if cached is not None:
        return [ServerResponse.model_validate(item) for item in cached]

    servers = db.query(Server).order_by(Server.created_at.desc()).all()
    result = [to_response(s) for s in servers]
    cache.set(CACHE_KEY_ALL, [r.model_dump(mode="json") for r in result])
    return result


def create_server(
    db: Session, cache: Cache, data: ServerCreate, owner_id: uuid.UUID
) -> ServerResponse:
    """Create a listing owned by owner_id. Always starts pending."""
    slug = generate_slug(data.name)
    _ensure_slug_available(db, slug)

    fields = data.model_dump(mode="json", exclude_none=True)
    fields.setdefault("port", DEFAULT_SERVER_PORT)
    fields.setdefault("language", DEFAULT_SERVER_LANGUAGE)
    fields.setdefault("current_players", 0)
    if data.theme is not None:
        fields["theme"] = _theme_json(data)
    server = Server(
        **fields,
        slug=slug,
        owner_id=owner_id,
        status=ServerStatus.PENDING.value,
    )
    db.add(server)
    db.commit()
    db.refresh(server)

    cache.delete(CACHE_KEY_ALL)
    logger.info("Created server id=%s slug=%s owner_id=%s", server.id, slug, owner_id)
    return to_response(server)


def get_server(db: Session, cache: Cache, server_id: uuid.UUID) -> ServerResponse:
    key = server_cache_key(server_id)
    cached = cache.get(key)
    if cached is not None:
        return ServerResponse.model_validate(cached)

    result = to_response(_get_or_404(db, server_id))
    cache.set(key, result.model_dump(mode="json"))
    return result


def get_server_by_slug(db: Session, slug: str) -> ServerResponse:
    # Not cached, unlike get_server. Slug lookups back the public theme endpoint,
    # which caches its own payload.
    server = db.query(Server).filter(Server.slug == slug).first()
    if server is None:
        raise NotFoundError(f"Server with slug {slug} not found")
    return to_response(server)


def update_server(
    db: Session, cache: Cache, server_id: uuid.UUID, data: ServerUpdate
) -> ServerResponse:
    """Apply the fields present in data; a new name regenerates the slug."""
    server = _get_or_404(db, server_id)
    old_slug = server.slug

    changes = {
        field: value
        for field, value in data.model_dump(mode="json", exclude_unset=True).items()
        if value is not None or field in CLEARABLE_FIELDS
    }
    if "theme" in changes:
        changes["theme"] = _theme_json(data)
    if changes.get("name") and changes["name"] != server.name:
        new_slug = generate_slug(changes["name"])
        if new_slug != old_slug:
            _ensure_slug_available(db, new_slug, exclude_id=server.id)
        server.slug = new_slug
    for field, value in changes.items():
        setattr(server, field, value)

    db.commit()
    db.refresh(server)

    _invalidate(cache, server.id, old_slug, server.slug)
    logger.info("Updated server id=%s fields=%s", server.id, sorted(changes))
    return to_response(server)


def delete_server(db: Session, cache: Cache, server_id: uuid.UUID) -> None:
    server = _get_or_404(db, server_id)
    slug = server.slug
    db.delete(server)
    db.commit()

    _invalidate(cache, server_id, slug)
    logger.info("Deleted server id=%s slug=%s", server_id, slug)


def _set_status(
    db: Session, cache: Cache, server_id: uuid.UUID, status: ServerStatus
) -> ServerResponse:
    # Unconditional: the current status is not checked, so a rejected listing can be
    # approved and vice versa.
    server = _get_or_404(db, server_id)
    previous = server.status
    server.status = status.value
    db.commit()
    db.refresh(server)

    _invalidate(cache, server.id, server.slug)
    logger.info(
        "Server id=%s status %s -> %s", server.id, previous, status.value
    )
    return to_response(server)


def approve_server(db: Session, cache: Cache, server_id: uuid.UUID) -> ServerResponse:
    return _set_status(db, cache, server_id, ServerStatus.APPROVED)


def reject_server(db: Session, cache: Cache, server_id: uuid.UUID) -> ServerResponse:
    return _set_status(db, cache, server_id, ServerStatus.REJECTED)
