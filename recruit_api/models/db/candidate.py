"""Candidate and login-code database models."""
from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from sqlalchemy import Index, String, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from recruit_api.database import Base, UTCDateTime

if TYPE_CHECKING:
    from recruit_api.models.db.test_instance import TestInstance


def _uuid() -> str:
    return str(uuid.uuid4())


class Candidate(Base):
    """Candidate registered for a job application."""

    __tablename__ = "candidates"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    email: Mapped[str] = mapped_column(String(255), index=True, nullable=False)
    cpf: Mapped[str] = mapped_column(String(11), unique=True, index=True, nullable=False)
    has_accepted_lgpd: Mapped[bool] = mapped_column(default=False, nullable=False)
    lgpd_accepted_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime,
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    tests: Mapped[list["TestInstance"]] = relationship(
        "TestInstance", back_populates="candidate", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<Candidate(id={self.id}, cpf='{self.cpf}')>"


class CandidateAuthToken(Base):
    """
    One-time login code sent by e-mail.

    Rows are keyed by normalized CPF. The failed-attempt counter and the
    lockout timestamp live on the token rows; a CPF is locked while any of its
    rows has ``locked_until`` in the future.
    """

    __tablename__ = "candidate_auth_tokens"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    cpf: Mapped[str] = mapped_column(String(11), index=True, nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    # bcrypt hash of the numeric code
    token_hash: Mapped[str] = mapped_column(String(128), nullable=False)

    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)
    expires_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)

    is_used: Mapped[bool] = mapped_column(default=False, nullable=False)
    used_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
    is_invalidated: Mapped[bool] = mapped_column(default=False, nullable=False)

    failed_attempts: Mapped[int] = mapped_column(default=0, nullable=False)
    locked_until: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)

    # Request metadata
    ip_address: Mapped[str | None] = mapped_column(String(64), nullable=True)
    user_agent: Mapped[str | None] = mapped_column(String(512), nullable=True)

    # At most one usable code per CPF
    __table_args__ = (
        Index(
            "uq_auth_token_active_cpf",
            "cpf",
            unique=True,
            sqlite_where=text("is_used = 0 AND is_invalidated = 0"),
            postgresql_where=text("NOT is_used AND NOT is_invalidated"),
        ),
    )

    @property
    def is_active(self) -> bool:
        return not self.is_used and not self.is_invalidated

    def __repr__(self) -> str:
        return (
            f"<CandidateAuthToken(id={self.id}, cpf='{self.cpf}', "
            f"used={self.is_used}, failed={self.failed_attempts})>"
        )
