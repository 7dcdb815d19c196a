"""Shared test fixtures: in-memory SQLite sessions, a dict-backed Redis client, factories."""

from datetime import UTC, datetime
from typing import Any

import redis
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.cache import Cache
from app.core.security import hash_password
from app.models import Base, User
from app.schemas.server import ServerCreate
from app.services.rbac import ensure_default_roles

DESCRIPTION = "A friendly survival server with custom plugins and active community!"
PASSWORD = "correct-horse-battery"


def make_session() -> Session:
    """Fresh in-memory database with all tables created."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)()


class FakeRedis:
    """Just enough of redis.Redis for Cache: get/set/delete/ping on a dict."""

    def __init__(self, fail: bool = False) -> None:
        self.store: dict[str, str] = {}
        self.fail = fail
        self.deleted: list[str] = []

    def _check(self) -> None:
        if self.fail:
            raise redis.ConnectionError("connection refused")

    def get(self, key: str) -> str | None:
        self._check()
        return self.store.get(key)

    def set(self, key: str, value: str, ex: int | None = None) -> bool:
        self._check()
        self.store[key] = value
        return True

    def delete(self, *keys: str) -> int:
        self._check()
        self.deleted.extend(keys)
        return sum(1 for k in keys if self.store.pop(k, None) is not None)

    def ping(self) -> bool:
        self._check()
        return True


def make_cache(fail: bool = False) -> tuple[Cache, FakeRedis]:
    client = FakeRedis(fail=fail)
    return Cache(client, default_ttl=60), client


def make_user(
    db: Session,
    email: str = "player@example.com",
    username: str | None = "player",
    password: str | None = PASSWORD,
    roles: tuple[str, ...] = ("user",),
    auth_provider: str | None = None,
    **kwargs: Any,
) -> User:
    """Persist a user with the given default roles (creating the role catalogue if needed)."""
    catalogue = ensure_default_roles(db)
    user = User(
        email=email,
        username=username,
        password=hash_password(password) if password else None,
        auth_provider=auth_provider or ("password" if password else "google"),
        roles=[catalogue[r] for r in roles],
        last_login=datetime.now(UTC),
        **kwargs,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def server_payload(**overrides: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "name": "Epic Survival Server",
        "ipAddress": "play.epicserver.com",
        "description": DESCRIPTION,
        "category": "Survival",
        "region": "NA",
        "maxPlayers": 100,
    }
    payload.update(overrides)
    return payload


def server_create(**overrides: Any) -> ServerCreate:
    return ServerCreate.model_validate(server_payload(**overrides))


THEME = {
    "id": "emerald",
    "name": "Emerald",
    "light": {
        "background": "#ffffff",
        "foreground": "#0a0a0a",
        "card": "#ffffff",
        "cardForeground": "#0a0a0a",
        "popover": "#ffffff",
        "popoverForeground": "#0a0a0a",
        "primary": "#10b981",
        "primaryForeground": "#ffffff",
        "secondary": "#f4f4f5",
        "secondaryForeground": "#18181b",
        "muted": "#f4f4f5",
        "mutedForeground": "#71717a",
        "accent": "#f4f4f5",
        "accentForeground": "#18181b",
        "destructive": "#ef4444",
        "destructiveForeground": "#fafafa",
        "border": "#e4e4e7",
        "input": "#e4e4e7",
        "ring": "#10b981",
    },
    "radius": "0.5rem",
}
