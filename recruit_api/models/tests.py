"""Test instance Pydantic models.

Candidate-facing question models carry no answer key fields.
"""
from datetime import datetime

from pydantic import BaseModel, Field

from recruit_api.enums import Difficulty, TestStatus, TestType, VideoResponseType


class CreateTestRequest(BaseModel):
    """Request to create a test for a candidate."""

    candidate_id: str = Field(..., min_length=1)
    test_type: TestType
    difficulty_level: Difficulty = Difficulty.MEDIUM


class StartTestRequest(BaseModel):
    candidate_id: str = Field(..., min_length=1)


class AnswerSubmission(BaseModel):
    """One multiple-choice answer."""

    question_snapshot_id: str = Field(..., min_length=1)
    selected_answers: list[str] = Field(default_factory=list)
    response_time_ms: int | None = Field(None, ge=0)


class SubmitTestRequest(BaseModel):
    """Final submission of a test."""

    test_id: str = Field(..., min_length=1)
    candidate_id: str = Field(..., min_length=1)
    answers: list[AnswerSubmission] = Field(default_factory=list)


class SaveAnswersRequest(BaseModel):
    """Answers recorded before the final submission."""

    candidate_id: str = Field(..., min_length=1)
    answers: list[AnswerSubmission] = Field(default_factory=list)


class QuestionResponseOut(BaseModel):
    """Stored answer, without grading."""

    id: str
    question_snapshot_id: str
    selected_answers: list[str]
    response_time_ms: int | None = None
    answered_at: datetime

    class Config:
        from_attributes = True


class TestInstanceResponse(BaseModel):
    """Test instance summary."""

    id: str
    test_type: TestType
    candidate_id: str
    status: TestStatus
    difficulty_level: str
    question_group_id: str | None = None
    score: float | None = None
    raw_score: float | None = None
    max_possible_score: float | None = None
    created_at: datetime
    started_at: datetime | None = None
    completed_at: datetime | None = None
    duration_seconds: int | None = None
    time_limit_seconds: int | None = None
    portuguese_reading_text_id: str | None = None
    portuguese_reading_text_version: int | None = None

    class Config:
        from_attributes = True


class QuestionSnapshotResponse(BaseModel):
    """Question as shown to the candidate."""

    id: str
    question_text: str
    options: list[dict[str, object] | str] | None = None
    allow_multiple_answers: bool
    max_answers_allowed: int | None = None
    question_order: int
    point_value: float
    estimated_time_seconds: int | None = None


class ReadingTextResponse(BaseModel):
    id: str
    title: str
    content: str
    author_name: str | None = None
    estimated_reading_time_minutes: int | None = None


class TestInstanceDetailResponse(TestInstanceResponse):
    """Test instance with its questions, as returned by create, get and start."""

    questions: list[QuestionSnapshotResponse] = Field(default_factory=list)
    reading_text: ReadingTextResponse | None = None


class TestQuestionsResponse(BaseModel):
    """Questions of a test plus the Portuguese reading text, if any."""

    test_id: str
    questions: list[QuestionSnapshotResponse]
    reading_text: ReadingTextResponse | None = None


class SubmissionResultResponse(BaseModel):
    """Grading outcome."""

    test_id: str
    status: TestStatus
    correct_answers: int
    total_questions: int
    raw_score: float
    max_possible_score: float
    score: float
    duration_seconds: int | None = None
    completed_at: datetime


class TestStatusResponse(BaseModel):
    """Progress of a test."""

    test_id: str
    status: TestStatus
    total_questions: int
    answered_questions: int
    videos_uploaded: int
    videos_required: int
    can_start: bool
    can_submit: bool
    started_at: datetime | None = None
    remaining_time_seconds: int | None = None


class CanStartResponse(BaseModel):
    candidate_id: str
    test_type: TestType
    can_start: bool


class VideoResponseOut(BaseModel):
    """Uploaded video metadata."""

    id: str
    test_instance_id: str
    question_snapshot_id: str | None = None
    question_number: int
    response_type: VideoResponseType | None = None
    blob_url: str
    file_size_bytes: int
    uploaded_at: datetime
    ai_score: str | None = None
    ai_verdict: str | None = None
    analyzed_at: datetime | None = None

    class Config:
        from_attributes = True
