"""
CLI entrypoint for the refresh token cleanup job. Run from cron, e.g.:

  python -m app.token_cleanup

Or daily: 0 3 * * * cd /path/to/hynexus && .venv/bin/python -m app.token_cleanup
"""

import logging
import sys

from app.core.config import get_settings
from app.core.database import SessionLocal
from app.services.refresh_tokens import purge_refresh_tokens

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


def main() -> int:
    """Delete refresh tokens expired or revoked longer than REFRESH_TOKEN_RETENTION_DAYS ago."""
    settings = get_settings()
    db = SessionLocal()
    try:
        tokens_deleted = purge_refresh_tokens(db, settings)
        logger.info("Token cleanup completed: tokens_deleted=%s", tokens_deleted)
        return 0
    except Exception as e:
        logger.exception("Token cleanup job failed: %s", e)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
