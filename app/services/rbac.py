"""Role and permission lookups plus the default role/permission catalogue."""

import logging

from sqlalchemy.orm import Session

from app.models import Permission, Role

logger = logging.getLogger(__name__)

DEFAULT_ROLE = "user"
ADMIN_ROLE = "admin"
MODERATOR_ROLE = "moderator"

# (resource, action, description)
DEFAULT_PERMISSIONS: tuple[tuple[str, str, str], ...] = (
    ("servers", "read", "Read servers"),
    ("servers", "create", "Create servers"),
    ("servers", "update", "Update servers"),
    ("servers", "delete", "Delete servers"),
    ("servers", "approve", "Approve/reject servers"),
    ("users", "read", "Read users"),
    ("users", "create", "Create users"),
    ("users", "update", "Update users"),
    ("users", "delete", "Delete users"),
)

# role name -> (description, actions granted on every resource; None means all)
DEFAULT_ROLES: dict[str, tuple[str, frozenset[str] | None]] = {
    ADMIN_ROLE: ("Administrator with full access", None),
    DEFAULT_ROLE: ("Regular user with read access", frozenset({"read"})),
    MODERATOR_ROLE: ("Moderator with read and update access", frozenset({"read", "update"})),
}


def find_role_by_name(db: Session, name: str) -> Role | None:
    return db.query(Role).filter(Role.name == name).first()


def find_permission(db: Session, resource: str, action: str) -> Permission | None:
    return (
        db.query(Permission)
        .filter(Permission.resource == resource, Permission.action == action)
        .first()
    )


def ensure_default_roles(db: Session) -> dict[str, Role]:
    """
    Create any missing default permissions and roles. Existing rows are left as they are.

    Returns the default roles by name.
    """
    permissions: list[Permission] = []
    for resource, action, description in DEFAULT_PERMISSIONS:
        perm = find_permission(db, resource, action)
        if perm is None:
            perm = Permission(resource=resource, action=action, description=description)
            db.add(perm)
        permissions.append(perm)

    roles: dict[str, Role] = {}
    for name, (description, actions) in DEFAULT_ROLES.items():
        role = find_role_by_name(db, name)
        if role is None:
            granted = [p for p in permissions if actions is None or p.action in actions]
            role = Role(name=name, description=description, permissions=granted)
            db.add(role)
            logger.info("Created role %s with %s permissions", name, len(granted))
        roles[name] = role

    db.commit()
    return roles
