"""Service for cleanup operations."""
import logging
import threading
import time
from datetime import datetime, timedelta, timezone

from sqlalchemy import delete, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session as DbSession

from recruit_api.config import AUTH_TOKEN_RETENTION_DAYS
from recruit_api.database import SessionLocal
from recruit_api.models.db.candidate import CandidateAuthToken

logger = logging.getLogger(__name__)


def cleanup_stale_auth_tokens(db: DbSession, now: datetime, retention_days: int) -> int:
    """Delete login codes that expired before the retention window.

    Rows still carrying a future lockout are kept so the lockout holds.
    """
    if retention_days <= 0:
        return 0

    cutoff = now - timedelta(days=retention_days)
    result = db.execute(
        delete(CandidateAuthToken)
        .where(
            CandidateAuthToken.expires_at < cutoff,
            or_(
                CandidateAuthToken.locked_until.is_(None),
                CandidateAuthToken.locked_until <= now,
            ),
        )
        .execution_options(synchronize_session=False)
    )
    db.commit()
    deleted = result.rowcount or 0
    if deleted > 0:
        logger.info("Cleaned up %d stale auth tokens", deleted)
    return deleted


def run_token_cleanup() -> int:
    """One cleanup pass on a fresh session."""
    db = SessionLocal()
    try:
        return cleanup_stale_auth_tokens(
            db, datetime.now(timezone.utc), AUTH_TOKEN_RETENTION_DAYS
        )
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to cleanup stale auth tokens")
        return 0
    finally:
        db.close()


def schedule_token_cleanup() -> None:
    """Schedule periodic cleanup of old login codes."""
    # Run cleanup once per day
    cleanup_interval = 24 * 60 * 60

    def _worker() -> None:
        # Initial delay before first cleanup
        time.sleep(60)
        while True:
            run_token_cleanup()
            time.sleep(cleanup_interval)

    thread = threading.Thread(target=_worker, daemon=True, name="token-cleanup")
    thread.start()
