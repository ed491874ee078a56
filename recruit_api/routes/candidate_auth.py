"""Candidate login endpoints."""
from typing import Annotated

from fastapi import APIRouter, Depends, Request

from recruit_api.dependencies.services import get_candidate_auth_service
from recruit_api.models.auth import (
    LockoutStatusResponse,
    TokenRequest,
    TokenRequestResponse,
    TokenValidationRequest,
    TokenValidationResponse,
)
from recruit_api.services.candidate_auth_service import CandidateAuthenticationService
from recruit_api.utils.errors import unwrap

router = APIRouter(prefix="/api/candidate-auth", tags=["candidate-auth"])


@router.post("/request-token", response_model=TokenRequestResponse)
def request_token(
    payload: TokenRequest,
    request: Request,
    service: Annotated[CandidateAuthenticationService, Depends(get_candidate_auth_service)],
) -> TokenRequestResponse:
    """Send a one-time login code to the candidate's e-mail."""
    outcome = unwrap(
        service.request_token(
            payload.cpf,
            payload.email,
            ip_address=request.client.host if request.client else None,
            user_agent=request.headers.get("user-agent"),
        )
    )
    return TokenRequestResponse(
        message=outcome.message, expiration_minutes=outcome.expiration_minutes
    )


@router.post("/validate-token", response_model=TokenValidationResponse)
def validate_token(
    payload: TokenValidationRequest,
    service: Annotated[CandidateAuthenticationService, Depends(get_candidate_auth_service)],
) -> TokenValidationResponse:
    """Exchange a valid login code for access and refresh tokens."""
    outcome = unwrap(service.validate_token(payload.cpf, payload.code))
    return TokenValidationResponse(
        access_token=outcome.access_token,
        refresh_token=outcome.refresh_token,
        candidate_id=outcome.candidate_id,
        requires_lgpd_consent=outcome.requires_lgpd_consent,
        message=outcome.message,
    )


@router.get("/lockout-status/{cpf}", response_model=LockoutStatusResponse)
def lockout_status(
    cpf: str,
    service: Annotated[CandidateAuthenticationService, Depends(get_candidate_auth_service)],
) -> LockoutStatusResponse:
    status = service.check_lockout_status(cpf)
    return LockoutStatusResponse(
        is_locked_out=status.is_locked_out,
        locked_until=status.locked_until,
        remaining_minutes=status.remaining_minutes,
    )
