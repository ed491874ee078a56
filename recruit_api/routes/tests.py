"""Candidate test endpoints.

Every endpoint requires a candidate access token whose subject is the
candidate the request acts for.
"""
from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status

from recruit_api.dependencies.auth import ensure_candidate, get_current_candidate_claims
from recruit_api.dependencies.services import get_test_service, get_video_response_service
from recruit_api.enums import TestType, VideoResponseType
from recruit_api.models.auth import MessageResponse
from recruit_api.models.db.question import PortugueseReadingText
from recruit_api.models.db.test_instance import QuestionSnapshot, TestInstance
from recruit_api.models.tests import (
    CanStartResponse,
    CreateTestRequest,
    QuestionResponseOut,
    QuestionSnapshotResponse,
    ReadingTextResponse,
    SaveAnswersRequest,
    StartTestRequest,
    SubmissionResultResponse,
    SubmitTestRequest,
    TestInstanceDetailResponse,
    TestInstanceResponse,
    TestQuestionsResponse,
    TestStatusResponse,
    VideoResponseOut,
)
from recruit_api.services.test_service import TestService
from recruit_api.services.video_response_service import VideoResponseService
from recruit_api.utils.errors import unwrap
from recruit_api.utils.json_utils import load_list

router = APIRouter(prefix="/api/tests", tags=["tests"])

Claims = Annotated[dict, Depends(get_current_candidate_claims)]
Tests = Annotated[TestService, Depends(get_test_service)]
Videos = Annotated[VideoResponseService, Depends(get_video_response_service)]


def _question_out(snapshot: QuestionSnapshot) -> QuestionSnapshotResponse:
    # No answer key fields
    return QuestionSnapshotResponse(
        id=snapshot.id,
        question_text=snapshot.question_text,
        options=load_list(snapshot.options_json) or None,
        allow_multiple_answers=snapshot.allow_multiple_answers,
        max_answers_allowed=snapshot.max_answers_allowed,
        question_order=snapshot.question_order,
        point_value=snapshot.point_value,
        estimated_time_seconds=snapshot.estimated_time_seconds,
    )


def _reading_text_out(text: PortugueseReadingText | None) -> ReadingTextResponse | None:
    if text is None:
        return None
    return ReadingTextResponse(
        id=text.id,
        title=text.title,
        content=text.content,
        author_name=text.author_name,
        estimated_reading_time_minutes=text.estimated_reading_time_minutes,
    )


def _detail_out(test: TestInstance, service: TestService) -> TestInstanceDetailResponse:
    summary = TestInstanceResponse.model_validate(test)
    return TestInstanceDetailResponse(
        **summary.model_dump(),
        questions=[_question_out(snapshot) for snapshot in test.question_snapshots],
        reading_text=_reading_text_out(service.get_reading_text(test)),
    )


@router.post(
    "", response_model=TestInstanceDetailResponse, status_code=status.HTTP_201_CREATED
)
def create_test(
    payload: CreateTestRequest, claims: Claims, service: Tests
) -> TestInstanceDetailResponse:
    """Create a test and snapshot its questions."""
    ensure_candidate(claims, payload.candidate_id)
    test = unwrap(
        service.create_test(
            payload.candidate_id, payload.test_type, payload.difficulty_level.value
        )
    )
    return _detail_out(test, service)


@router.post("/submit", response_model=SubmissionResultResponse)
def submit_test(
    payload: SubmitTestRequest, claims: Claims, service: Tests
) -> SubmissionResultResponse:
    """Submit final answers and grade the test."""
    ensure_candidate(claims, payload.candidate_id)
    result = unwrap(service.submit_test(payload.test_id, payload.candidate_id, payload.answers))
    return SubmissionResultResponse(
        test_id=result.test.id,
        status=result.test.status,
        correct_answers=result.correct_answers,
        total_questions=result.total_questions,
        raw_score=result.raw_score,
        max_possible_score=result.max_possible_score,
        score=result.score,
        duration_seconds=result.test.duration_seconds,
        completed_at=result.test.completed_at,
    )


@router.get("/candidate/{candidate_id}", response_model=list[TestInstanceResponse])
def list_candidate_tests(
    candidate_id: str,
    claims: Claims,
    service: Tests,
    test_type: TestType | None = None,
) -> list[TestInstanceResponse]:
    ensure_candidate(claims, candidate_id)
    return [
        TestInstanceResponse.model_validate(test)
        for test in service.get_candidate_tests(candidate_id, test_type)
    ]


@router.get("/candidate/{candidate_id}/can-start/{test_type}", response_model=CanStartResponse)
def can_start_test(
    candidate_id: str, test_type: TestType, claims: Claims, service: Tests
) -> CanStartResponse:
    ensure_candidate(claims, candidate_id)
    return CanStartResponse(
        candidate_id=candidate_id,
        test_type=test_type,
        can_start=service.can_start_test(candidate_id, test_type),
    )


@router.get("/{test_id}", response_model=TestInstanceDetailResponse)
def get_test(
    test_id: str,
    candidate_id: Annotated[str, Query(min_length=1)],
    claims: Claims,
    service: Tests,
) -> TestInstanceDetailResponse:
    ensure_candidate(claims, candidate_id)
    return _detail_out(unwrap(service.get_test(test_id, candidate_id)), service)


@router.post("/{test_id}/start", response_model=TestInstanceDetailResponse)
def start_test(
    test_id: str, payload: StartTestRequest, claims: Claims, service: Tests
) -> TestInstanceDetailResponse:
    """Start the clock and hand out the questions without answer keys."""
    ensure_candidate(claims, payload.candidate_id)
    return _detail_out(unwrap(service.start_test(test_id, payload.candidate_id)), service)


@router.get("/{test_id}/questions", response_model=TestQuestionsResponse)
def get_test_questions(
    test_id: str,
    candidate_id: Annotated[str, Query(min_length=1)],
    claims: Claims,
    service: Tests,
) -> TestQuestionsResponse:
    """Questions of the test, without answer keys."""
    ensure_candidate(claims, candidate_id)
    result = unwrap(service.get_test_questions(test_id, candidate_id))
    return TestQuestionsResponse(
        test_id=result.test.id,
        questions=[_question_out(snapshot) for snapshot in result.snapshots],
        reading_text=_reading_text_out(result.reading_text),
    )


@router.post("/{test_id}/answers", response_model=list[QuestionResponseOut])
def save_answers(
    test_id: str, payload: SaveAnswersRequest, claims: Claims, service: Tests
) -> list[QuestionResponseOut]:
    """Record answers while the test is in progress."""
    ensure_candidate(claims, payload.candidate_id)
    responses = unwrap(service.save_answers(test_id, payload.candidate_id, payload.answers))
    return [QuestionResponseOut.model_validate(response) for response in responses]


@router.get("/{test_id}/answers", response_model=list[QuestionResponseOut])
def get_answers(
    test_id: str,
    candidate_id: Annotated[str, Query(min_length=1)],
    claims: Claims,
    service: Tests,
) -> list[QuestionResponseOut]:
    ensure_candidate(claims, candidate_id)
    responses = unwrap(service.get_answers(test_id, candidate_id))
    return [QuestionResponseOut.model_validate(response) for response in responses]


@router.get("/{test_id}/status", response_model=TestStatusResponse)
def get_test_status(
    test_id: str,
    candidate_id: Annotated[str, Query(min_length=1)],
    claims: Claims,
    service: Tests,
) -> TestStatusResponse:
    ensure_candidate(claims, candidate_id)
    summary = unwrap(service.get_test_status(test_id, candidate_id))
    return TestStatusResponse(
        test_id=summary.test.id,
        status=summary.test.status,
        total_questions=summary.total_questions,
        answered_questions=summary.answered_questions,
        videos_uploaded=summary.videos_uploaded,
        videos_required=summary.videos_required,
        can_start=summary.can_start,
        can_submit=summary.can_submit,
        started_at=summary.test.started_at,
        remaining_time_seconds=summary.remaining_time_seconds,
    )


@router.post(
    "/{test_id}/videos", response_model=VideoResponseOut, status_code=status.HTTP_201_CREATED
)
def upload_video(
    test_id: str,
    claims: Claims,
    service: Videos,
    candidate_id: Annotated[str, Form(min_length=1)],
    question_number: Annotated[int, Form(ge=1)],
    file: UploadFile = File(...),
    question_snapshot_id: Annotated[str | None, Form()] = None,
    response_type: Annotated[VideoResponseType | None, Form()] = None,
) -> VideoResponseOut:
    """Upload a recorded answer and queue it for AI analysis."""
    ensure_candidate(claims, candidate_id)
    video = unwrap(
        service.upload_video(
            test_id,
            candidate_id,
            question_number,
            file.filename,
            file.file,
            question_snapshot_id=question_snapshot_id,
            response_type=response_type,
        )
    )
    return VideoResponseOut.model_validate(video)


@router.get("/{test_id}/videos", response_model=list[VideoResponseOut])
def list_videos(
    test_id: str,
    candidate_id: Annotated[str, Query(min_length=1)],
    claims: Claims,
    service: Videos,
) -> list[VideoResponseOut]:
    ensure_candidate(claims, candidate_id)
    return [
        VideoResponseOut.model_validate(video)
        for video in unwrap(service.list_videos(test_id, candidate_id))
    ]


@router.get("/{test_id}/videos/{video_id}", response_model=VideoResponseOut)
def get_video(
    test_id: str,
    video_id: str,
    candidate_id: Annotated[str, Query(min_length=1)],
    claims: Claims,
    service: Videos,
) -> VideoResponseOut:
    ensure_candidate(claims, candidate_id)
    return VideoResponseOut.model_validate(
        unwrap(service.get_video(test_id, video_id, candidate_id))
    )


@router.delete("/{test_id}/videos/{video_id}", response_model=MessageResponse)
def delete_video(
    test_id: str,
    video_id: str,
    candidate_id: Annotated[str, Query(min_length=1)],
    claims: Claims,
    service: Videos,
) -> MessageResponse:
    """Discard a recorded answer so it can be uploaded again."""
    ensure_candidate(claims, candidate_id)
    unwrap(service.delete_video(test_id, video_id, candidate_id))
    return MessageResponse(message="Video deleted successfully")
