"""Queries over candidate login codes.

Functions here only stage changes; callers own the commit.
"""
from datetime import datetime

from sqlalchemy import select, update
from sqlalchemy.orm import Session as DbSession

from recruit_api.models.db.candidate import CandidateAuthToken


def get_active_token(db: DbSession, cpf: str) -> CandidateAuthToken | None:
    """Latest not-used, not-invalidated code of a CPF (expired or not)."""
    return db.execute(
        select(CandidateAuthToken)
        .where(
            CandidateAuthToken.cpf == cpf,
            CandidateAuthToken.is_used == False,  # noqa: E712
            CandidateAuthToken.is_invalidated == False,  # noqa: E712
        )
        .order_by(CandidateAuthToken.created_at.desc())
        .limit(1)
    ).scalar_one_or_none()


def get_lockout_until(db: DbSession, cpf: str) -> datetime | None:
    """Latest lockout timestamp recorded for a CPF, past or future."""
    return db.execute(
        select(CandidateAuthToken.locked_until)
        .where(
            CandidateAuthToken.cpf == cpf,
            CandidateAuthToken.locked_until.is_not(None),
        )
        .order_by(CandidateAuthToken.locked_until.desc())
        .limit(1)
    ).scalar_one_or_none()


def invalidate_active_tokens(db: DbSession, cpf: str) -> int:
    """Mark every usable code of a CPF as invalidated."""
    result = db.execute(
        update(CandidateAuthToken)
        .where(
            CandidateAuthToken.cpf == cpf,
            CandidateAuthToken.is_used == False,  # noqa: E712
            CandidateAuthToken.is_invalidated == False,  # noqa: E712
        )
        .values(is_invalidated=True)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount or 0


def add_token(
    db: DbSession,
    cpf: str,
    email: str,
    code_hash: str,
    created_at: datetime,
    expires_at: datetime,
    ip_address: str | None = None,
    user_agent: str | None = None,
) -> CandidateAuthToken:
    token = CandidateAuthToken(
        cpf=cpf,
        email=email,
        token_hash=code_hash,
        created_at=created_at,
        expires_at=expires_at,
        ip_address=ip_address,
        user_agent=user_agent,
    )
    db.add(token)
    return token


def increment_failed_attempts(db: DbSession, token_id: str) -> int:
    """Atomically add one failed attempt and return the new counter."""
    db.execute(
        update(CandidateAuthToken)
        .where(CandidateAuthToken.id == token_id)
        .values(failed_attempts=CandidateAuthToken.failed_attempts + 1)
        .execution_options(synchronize_session=False)
    )
    return db.execute(
        select(CandidateAuthToken.failed_attempts).where(CandidateAuthToken.id == token_id)
    ).scalar_one()


def consume_token(db: DbSession, token_id: str, used_at: datetime) -> bool:
    """Mark a code used; False when another request consumed it first."""
    result = db.execute(
        update(CandidateAuthToken)
        .where(
            CandidateAuthToken.id == token_id,
            CandidateAuthToken.is_used == False,  # noqa: E712
            CandidateAuthToken.is_invalidated == False,  # noqa: E712
        )
        .values(is_used=True, used_at=used_at)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1


def set_lockout(db: DbSession, token_id: str, locked_until: datetime) -> None:
    db.execute(
        update(CandidateAuthToken)
        .where(CandidateAuthToken.id == token_id)
        .values(locked_until=locked_until)
        .execution_options(synchronize_session=False)
    )


def clear_lockout(db: DbSession, cpf: str) -> int:
    """Reset failed attempts and lockout on every code of a CPF."""
    result = db.execute(
        update(CandidateAuthToken)
        .where(
            CandidateAuthToken.cpf == cpf,
            (CandidateAuthToken.locked_until.is_not(None))
            | (CandidateAuthToken.failed_attempts > 0),
        )
        .values(failed_attempts=0, locked_until=None)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount or 0
