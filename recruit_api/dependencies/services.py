"""Service providers for FastAPI routes.

Tests override ``get_db``, ``get_clock``, ``get_email_sender`` and the media
providers through ``app.dependency_overrides``.
"""
from functools import lru_cache
from typing import Annotated

from fastapi import Depends
from sqlalchemy.orm import Session as DbSession

from recruit_api.config import AuthSettings, TestSettings, get_auth_settings, get_test_settings
from recruit_api.database import get_db
from recruit_api.services.candidate_auth_service import CandidateAuthenticationService
from recruit_api.services.email_service import EmailSender, SendGridEmailSender
from recruit_api.services.jwt_service import JwtService
from recruit_api.services.media_service import (
    AIAgentClient,
    ExternalAIAgentClient,
    LocalVideoStorage,
    VideoStorage,
)
from recruit_api.services.portuguese_content_service import PortugueseContentAdminService
from recruit_api.services.question_group_service import QuestionGroupAdminService
from recruit_api.services.question_template_service import QuestionTemplateAdminService
from recruit_api.services.test_service import TestService
from recruit_api.services.video_response_service import VideoResponseService
from recruit_api.utils.time_utils import Clock, SystemClock


def get_clock() -> Clock:
    return SystemClock()


@lru_cache
def get_auth_config() -> AuthSettings:
    return get_auth_settings()


@lru_cache
def get_test_config() -> TestSettings:
    return get_test_settings()


def get_email_sender() -> EmailSender:
    return SendGridEmailSender()


def get_jwt_service() -> JwtService:
    return JwtService()


def get_video_storage() -> VideoStorage:
    return LocalVideoStorage()


def get_ai_agent() -> AIAgentClient:
    return ExternalAIAgentClient()


def get_candidate_auth_service(
    db: Annotated[DbSession, Depends(get_db)],
    email_sender: Annotated[EmailSender, Depends(get_email_sender)],
    jwt_service: Annotated[JwtService, Depends(get_jwt_service)],
    clock: Annotated[Clock, Depends(get_clock)],
    settings: Annotated[AuthSettings, Depends(get_auth_config)],
) -> CandidateAuthenticationService:
    return CandidateAuthenticationService(db, email_sender, jwt_service, clock, settings)


def get_test_service(
    db: Annotated[DbSession, Depends(get_db)],
    clock: Annotated[Clock, Depends(get_clock)],
    settings: Annotated[TestSettings, Depends(get_test_config)],
) -> TestService:
    return TestService(db, clock, settings)


def get_video_response_service(
    db: Annotated[DbSession, Depends(get_db)],
    clock: Annotated[Clock, Depends(get_clock)],
    storage: Annotated[VideoStorage, Depends(get_video_storage)],
    ai_agent: Annotated[AIAgentClient, Depends(get_ai_agent)],
) -> VideoResponseService:
    return VideoResponseService(db, clock, storage, ai_agent)


def get_question_group_service(
    db: Annotated[DbSession, Depends(get_db)],
    clock: Annotated[Clock, Depends(get_clock)],
    settings: Annotated[TestSettings, Depends(get_test_config)],
) -> QuestionGroupAdminService:
    return QuestionGroupAdminService(db, clock, settings.required_question_counts)


def get_question_template_service(
    db: Annotated[DbSession, Depends(get_db)],
    clock: Annotated[Clock, Depends(get_clock)],
    settings: Annotated[TestSettings, Depends(get_test_config)],
) -> QuestionTemplateAdminService:
    return QuestionTemplateAdminService(db, clock, settings.bank_question_counts.keys())


def get_portuguese_content_service(
    db: Annotated[DbSession, Depends(get_db)],
    clock: Annotated[Clock, Depends(get_clock)],
) -> PortugueseContentAdminService:
    return PortugueseContentAdminService(db, clock)
