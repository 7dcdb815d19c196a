"""Tests for the refresh token store and the token cleanup job."""

import unittest
from datetime import UTC, datetime, timedelta
from unittest.mock import MagicMock, patch

from app import token_cleanup
from app.core.exceptions import UnauthorizedError
from app.models import RefreshToken
from app.services.refresh_tokens import (
    create_refresh_token,
    purge_refresh_tokens,
    revoke_refresh_token,
    validate_refresh_token,
)

from support import make_session, make_user


def _settings(retention_days: int = 30) -> MagicMock:
    settings = MagicMock()
    settings.REFRESH_TOKEN_RETENTION_DAYS = retention_days
    return settings


class RefreshTokenTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.db = make_session()
        self.user = make_user(self.db)

    def tearDown(self) -> None:
        self.db.close()

    def _record(self, token: str) -> RefreshToken:
        return self.db.query(RefreshToken).filter(RefreshToken.token == token).one()


class TestValidate(RefreshTokenTestCase):
    def test_fresh_token_resolves_user(self) -> None:
        token = create_refresh_token(self.db, self.user, "agent/1.0", "127.0.0.1")
        self.assertEqual(validate_refresh_token(self.db, token).id, self.user.id)

    def test_expired_token_rejected(self) -> None:
        token = create_refresh_token(self.db, self.user)
        self._record(token).expires_at = datetime.now(UTC) - timedelta(seconds=1)
        self.db.commit()
        with self.assertRaises(UnauthorizedError):
            validate_refresh_token(self.db, token)

    def test_banned_user_rejected(self) -> None:
        token = create_refresh_token(self.db, self.user)
        self.user.is_banned = True
        self.db.commit()
        with self.assertRaises(UnauthorizedError):
            validate_refresh_token(self.db, token)

    def test_long_user_agent_truncated(self) -> None:
        token = create_refresh_token(self.db, self.user, user_agent="x" * 2000)
        self.assertEqual(len(self._record(token).user_agent), 512)


class TestRevoke(RefreshTokenTestCase):
    def test_revoke_once(self) -> None:
        token = create_refresh_token(self.db, self.user)
        self.assertTrue(revoke_refresh_token(self.db, token))
        self.assertFalse(revoke_refresh_token(self.db, token))
        self.assertFalse(revoke_refresh_token(self.db, "unknown"))
        record = self._record(token)
        self.assertTrue(record.is_revoked)
        self.assertIsNotNone(record.revoked_at)
        with self.assertRaises(UnauthorizedError):
            validate_refresh_token(self.db, token)


class TestPurge(RefreshTokenTestCase):
    def test_deletes_only_tokens_past_retention(self) -> None:
        now = datetime.now(UTC)
        active = create_refresh_token(self.db, self.user)
        recently_expired = create_refresh_token(self.db, self.user)
        long_expired = create_refresh_token(self.db, self.user)
        long_revoked = create_refresh_token(self.db, self.user)
        self._record(recently_expired).expires_at = now - timedelta(days=1)
        self._record(long_expired).expires_at = now - timedelta(days=31)
        record = self._record(long_revoked)
        record.is_revoked = True
        record.revoked_at = now - timedelta(days=40)
        self.db.commit()

        self.assertEqual(purge_refresh_tokens(self.db, _settings()), 2)
        remaining = {t.token for t in self.db.query(RefreshToken).all()}
        self.assertEqual(remaining, {active, recently_expired})

        self.assertEqual(purge_refresh_tokens(self.db, _settings()), 0)


class TestPurgeMocked(unittest.TestCase):
    """purge_refresh_tokens commits exactly once and reports the delete count."""

    def test_returns_delete_count(self) -> None:
        session = MagicMock()
        session.query.return_value.filter.return_value.delete.return_value = 3
        self.assertEqual(purge_refresh_tokens(session, _settings()), 3)
        session.commit.assert_called_once()


class TestTokenCleanupJob(unittest.TestCase):
    def test_main_success(self) -> None:
        session = MagicMock()
        with patch.object(token_cleanup, "SessionLocal", return_value=session), patch.object(
            token_cleanup, "purge_refresh_tokens", return_value=4
        ) as purge:
            self.assertEqual(token_cleanup.main(), 0)
        purge.assert_called_once()
        session.close.assert_called_once()

    def test_main_failure_returns_nonzero(self) -> None:
        session = MagicMock()
        with patch.object(token_cleanup, "SessionLocal", return_value=session), patch.object(
            token_cleanup, "purge_refresh_tokens", side_effect=RuntimeError("db down")
        ):
            self.assertEqual(token_cleanup.main(), 1)
        session.close.assert_called_once()


if __name__ == "__main__":
    unittest.main()
