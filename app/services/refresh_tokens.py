"""Refresh token store: issue, validate, revoke and purge persisted refresh tokens."""

import logging
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.core.exceptions import UnauthorizedError
from app.core.security import generate_refresh_token_value, refresh_token_expiry
from app.models import RefreshToken, User

if TYPE_CHECKING:
    from app.core.config import Settings

logger = logging.getLogger(__name__)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything is stored in UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def create_refresh_token(
    db: Session,
    user: User,
    user_agent: str | None = None,
    ip_address: str | None = None,
) -> str:
    """Persist a new refresh token for the user and return its value."""
    record = RefreshToken(
        token=generate_refresh_token_value(),
        user_id=user.id,
        expires_at=refresh_token_expiry(),
        is_revoked=False,
        user_agent=user_agent[:512] if user_agent else None,
        ip_address=ip_address,
    )
    db.add(record)
    db.commit()
    return record.token


def validate_refresh_token(db: Session, token: str) -> User:
    """
    Return the user owning a usable refresh token.

    Raises UnauthorizedError if the token is unknown, revoked or expired, or if the
    account is no longer active or has been banned.
    """
    record = db.query(RefreshToken).filter(RefreshToken.token == token).first()
    if record is None:
        raise UnauthorizedError("Invalid refresh token")
    if record.is_revoked:
        raise UnauthorizedError("Refresh token has been revoked")
    if _as_utc(record.expires_at) <= datetime.now(UTC):
        raise UnauthorizedError("Refresh token has expired")

    user = record.user
    if user is None or not user.is_active:
        raise UnauthorizedError("Account is not active")
    if user.is_banned:
        raise UnauthorizedError("Account has been banned")
    return user


def revoke_refresh_token(db: Session, token: str) -> bool:
    """
    Mark a refresh token revoked. Returns True if this call revoked it.

    Unknown and already-revoked tokens are a no-op so logout can be repeated safely.
    """
    record = db.query(RefreshToken).filter(RefreshToken.token == token).first()
    if record is None or record.is_revoked:
        return False
    record.is_revoked = True
    record.revoked_at = datetime.now(UTC)
    db.commit()
    logger.info("Revoked refresh token id=%s user_id=%s", record.id, record.user_id)
    return True


def purge_refresh_tokens(db: Session, settings: "Settings") -> int:
    """
    Delete refresh tokens that expired, or were revoked, more than
    REFRESH_TOKEN_RETENTION_DAYS ago. Idempotent: safe to run repeatedly.
    """
    cutoff = datetime.now(UTC) - timedelta(days=settings.REFRESH_TOKEN_RETENTION_DAYS)
    deleted_count = (
        db.query(RefreshToken)
        .filter(
            or_(
                RefreshToken.expires_at < cutoff,
                RefreshToken.revoked_at < cutoff,
            )
        )
        .delete(synchronize_session=False)
    )
    db.commit()

    if deleted_count > 0:
        logger.info(
            "Refresh token cleanup: cutoff=%s, tokens_deleted=%s",
            cutoff.isoformat(),
            deleted_count,
        )
    return deleted_count
