"""Pydantic models for admin question-group management."""
from datetime import datetime

from pydantic import BaseModel, Field

from recruit_api.enums import TestType


class QuestionCreate(BaseModel):
    """Question supplied with a new group."""

    group_order: int
    question_text: str = Field(..., min_length=1, max_length=5000)
    point_value: float = Field(1.0, ge=0)
    estimated_time_seconds: int | None = Field(None, ge=0)
    expected_answer_guide: dict[str, object] | None = None


class QuestionGroupCreate(BaseModel):
    """Request to create a group with its questions."""

    test_type: TestType
    group_name: str = Field(..., min_length=1, max_length=200)
    description: str | None = Field(None, max_length=1000)
    difficulty_level: str | None = Field(None, max_length=20)
    is_active: bool = False
    questions: list[QuestionCreate] = Field(default_factory=list)


class QuestionGroupUpdate(BaseModel):
    """Group metadata update."""

    group_name: str = Field(..., min_length=1, max_length=200)
    description: str | None = Field(None, max_length=1000)
    difficulty_level: str | None = Field(None, max_length=20)


class QuestionUpdate(BaseModel):
    question_text: str = Field(..., min_length=1, max_length=5000)
    point_value: float = Field(..., ge=0)
    estimated_time_seconds: int | None = Field(None, ge=0)


class QuestionOrder(BaseModel):
    question_id: str = Field(..., min_length=1)
    new_order: int


class ReorderQuestionsRequest(BaseModel):
    question_order: list[QuestionOrder] = Field(default_factory=list)


class QuestionGroupSummary(BaseModel):
    """Group row in the admin list."""

    id: str
    test_type: TestType
    group_name: str
    description: str | None = None
    difficulty_level: str | None = None
    is_active: bool
    question_count: int
    created_at: datetime
    updated_at: datetime | None = None


class QuestionDetail(BaseModel):
    id: str
    group_order: int
    question_text: str
    point_value: float
    estimated_time_seconds: int | None = None
    version: int
    is_active: bool

    class Config:
        from_attributes = True


class QuestionGroupDetail(BaseModel):
    """Group with its ordered questions."""

    id: str
    test_type: TestType
    group_name: str
    description: str | None = None
    difficulty_level: str | None = None
    is_active: bool
    created_at: datetime
    updated_at: datetime | None = None
    questions: list[QuestionDetail] = Field(default_factory=list)


class QuestionGroupListResponse(BaseModel):
    groups: list[QuestionGroupSummary]


class AdminOperationResponse(BaseModel):
    """Outcome of an admin write."""

    message: str
    group_id: str | None = None
