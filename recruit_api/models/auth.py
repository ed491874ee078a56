"""Pydantic models for candidate authentication."""
from datetime import datetime

from pydantic import BaseModel, EmailStr, Field


class TokenRequest(BaseModel):
    """Login code request."""

    cpf: str = Field(..., min_length=11, max_length=14)
    email: EmailStr


class TokenRequestResponse(BaseModel):
    """Login code request response."""

    message: str
    expiration_minutes: int


class TokenValidationRequest(BaseModel):
    """Login code validation request."""

    cpf: str = Field(..., min_length=11, max_length=14)
    code: str = Field(..., min_length=1, max_length=12)


class TokenValidationResponse(BaseModel):
    """Issued tokens after a successful validation."""

    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    candidate_id: str
    requires_lgpd_consent: bool
    message: str


class LockoutStatusResponse(BaseModel):
    """Lockout state of a CPF."""

    is_locked_out: bool
    locked_until: datetime | None = None
    remaining_minutes: int = 0


class MessageResponse(BaseModel):
    """Simple message response."""

    message: str
