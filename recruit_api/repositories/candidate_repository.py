"""Candidate lookups."""
from sqlalchemy import select
from sqlalchemy.orm import Session as DbSession

from recruit_api.models.db.candidate import Candidate


def get_candidate_by_cpf(db: DbSession, cpf: str) -> Candidate | None:
    """Get candidate by normalized CPF."""
    return db.execute(select(Candidate).where(Candidate.cpf == cpf)).scalar_one_or_none()


def get_candidate_by_id(db: DbSession, candidate_id: str) -> Candidate | None:
    return db.get(Candidate, candidate_id)
