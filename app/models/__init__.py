"""SQLAlchemy ORM models."""

from app.models.base import Base
from app.models.rbac import Permission, Role, role_permissions, user_roles
from app.models.refresh_token import RefreshToken
from app.models.server import Server, ServerCategory, ServerRegion, ServerStatus
from app.models.user import User

__all__ = [
    "Base",
    "Permission",
    "RefreshToken",
    "Role",
    "Server",
    "ServerCategory",
    "ServerRegion",
    "ServerStatus",
    "User",
    "role_permissions",
    "user_roles",
]
