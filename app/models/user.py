"""ORM model for user accounts (password and OAuth identities)."""

import uuid

from sqlalchemy import Boolean, Column, DateTime, String, Text, Uuid, func
from sqlalchemy.orm import relationship

from app.models.base import Base, JSONType
from app.models.rbac import user_roles


class User(Base):
    """
    User account for authentication and role-based access control.

    password is NULL for OAuth-only accounts; those cannot use password login.
    is_admin marks the platform administrator and is independent of roles.
    """

    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password = Column(String(255), nullable=True)
    name = Column(String(255), nullable=True)
    username = Column(String(20), nullable=True, unique=True, index=True)
    avatar_url = Column(String(500), nullable=True)
    bio = Column(Text, nullable=True)
    discord_id = Column(String(100), nullable=True)

    auth_provider = Column(String(50), nullable=True)
    auth_provider_id = Column(String(255), nullable=True)
    auth_provider_data = Column(JSONType, nullable=True)

    is_active = Column(Boolean, nullable=False, default=True)
    email_verified = Column(Boolean, nullable=False, default=False, index=True)
    is_banned = Column(Boolean, nullable=False, default=False, index=True)
    is_admin = Column(Boolean, nullable=False, default=False, index=True)
    last_login = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    roles = relationship("Role", secondary=user_roles, back_populates="users")
    refresh_tokens = relationship(
        "RefreshToken",
        back_populates="user",
        cascade="all, delete-orphan",
    )
    servers = relationship(
        "Server",
        back_populates="owner",
        cascade="all, delete-orphan",
    )
