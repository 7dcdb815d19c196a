"""Server directory routes: listing, CRUD and admin moderation."""

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from app.api.v1.auth import get_current_user, guarded
from app.core.cache import Cache, get_cache
from app.core.database import get_db
from app.core.guards import platform_admin, require_permissions, require_roles
from app.schemas.auth import CurrentUser
from app.schemas.server import ServerCreate, ServerResponse, ServerUpdate
from app.services import servers as server_service
from app.services.rbac import ADMIN_ROLE

router = APIRouter()


@router.get("", response_model=list[ServerResponse])
def list_servers(
    _user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    cache: Annotated[Cache, Depends(get_cache)],
) -> list[ServerResponse]:
    """Get all servers, newest first."""
    return server_service.list_servers(db, cache)


@router.get("/slug/{slug}", response_model=ServerResponse)
def get_server_by_slug(
    slug: str,
    _user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> ServerResponse:
    return server_service.get_server_by_slug(db, slug)


@router.get("/{server_id}", response_model=ServerResponse)
def get_server(
    server_id: uuid.UUID,
    _user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    cache: Annotated[Cache, Depends(get_cache)],
) -> ServerResponse:
    return server_service.get_server(db, cache, server_id)


@router.post("", response_model=ServerResponse, status_code=status.HTTP_201_CREATED)
def create_server(
    body: ServerCreate,
    user: Annotated[CurrentUser, Depends(guarded(require_permissions("servers:create")))],
    db: Annotated[Session, Depends(get_db)],
    cache: Annotated[Cache, Depends(get_cache)],
) -> ServerResponse:
    """Create a listing owned by the caller. It starts pending until an admin approves it."""
    return server_service.create_server(db, cache, body, owner_id=user.id)


@router.put("/{server_id}", response_model=ServerResponse)
def update_server(
    server_id: uuid.UUID,
    body: ServerUpdate,
    _user: Annotated[CurrentUser, Depends(guarded(require_permissions("servers:update")))],
    db: Annotated[Session, Depends(get_db)],
    cache: Annotated[Cache, Depends(get_cache)],
) -> ServerResponse:
    return server_service.update_server(db, cache, server_id, body)


@router.delete("/{server_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_server(
    server_id: uuid.UUID,
    _user: Annotated[
        CurrentUser,
        Depends(guarded(require_roles(ADMIN_ROLE), require_permissions("servers:delete"))),
    ],
    db: Annotated[Session, Depends(get_db)],
    cache: Annotated[Cache, Depends(get_cache)],
) -> Response:
    server_service.delete_server(db, cache, server_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.patch("/{server_id}/approve", response_model=ServerResponse)
def approve_server(
    server_id: uuid.UUID,
    _admin: Annotated[CurrentUser, Depends(guarded(platform_admin))],
    db: Annotated[Session, Depends(get_db)],
    cache: Annotated[Cache, Depends(get_cache)],
) -> ServerResponse:
    """Approve a listing (platform admin only)."""
    return server_service.approve_server(db, cache, server_id)


@router.patch("/{server_id}/reject", response_model=ServerResponse)
def reject_server(
    server_id: uuid.UUID,
    _admin: Annotated[CurrentUser, Depends(guarded(platform_admin))],
    db: Annotated[Session, Depends(get_db)],
    cache: Annotated[Cache, Depends(get_cache)],
) -> ServerResponse:
    """Reject a listing (platform admin only)."""
    return server_service.reject_server(db, cache, server_id)
