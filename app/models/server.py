"""ORM model for game-server directory entries."""

import enum
import uuid

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    Uuid,
    func,
)
from sqlalchemy.orm import relationship

from app.models.base import Base, JSONType


class ServerCategory(str, enum.Enum):
    SURVIVAL = "Survival"
    PVP = "PvP"
    CREATIVE = "Creative"
    MINIGAMES = "Minigames"
    RPG = "RPG"
    ROLEPLAY = "Roleplay"
    ANARCHY = "Anarchy"


class ServerRegion(str, enum.Enum):
    NA = "NA"
    EU = "EU"
    ASIA = "Asia"
    OCEANIA = "Oceania"
    SA = "SA"


class ServerStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    SUSPENDED = "suspended"


DEFAULT_SERVER_PORT = 3000
DEFAULT_SERVER_LANGUAGE = "en"


class Server(Base):
    """
    Directory listing owned by a user.

    slug is derived from name and regenerated whenever name changes.
    New listings always start in status 'pending'.
    """

    __tablename__ = "servers"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    owner_id = Column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    slug = Column(String(100), nullable=False, unique=True, index=True)
    name = Column(String(100), nullable=False)
    ip_address = Column(String(255), nullable=False)
    port = Column(Integer, nullable=False, default=DEFAULT_SERVER_PORT)
    description = Column(Text, nullable=False)
    website_url = Column(String(500), nullable=True)
    discord_url = Column(String(500), nullable=True)
    banner_url = Column(String(500), nullable=True)
    logo_url = Column(String(500), nullable=True)
    category = Column(String(50), nullable=False, index=True)
    region = Column(String(10), nullable=False, index=True)
    language = Column(String(10), nullable=False, default=DEFAULT_SERVER_LANGUAGE)
    max_players = Column(Integer, nullable=False)
    current_players = Column(Integer, nullable=False, default=0)
    status = Column(
        String(20),
        nullable=False,
        default=ServerStatus.PENDING.value,
        index=True,
    )
    is_online = Column(Boolean, nullable=False, default=False)
    last_ping = Column(DateTime(timezone=True), nullable=True)
    verified = Column(Boolean, nullable=False, default=False)
    featured = Column(Boolean, nullable=False, default=False)
    theme = Column(JSONType, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    owner = relationship("User", back_populates="servers")
