"""Pydantic models for admin management of the question bank and reading texts.

Answer keys appear only in ``QuestionTemplateWithAnswer``.
"""
from datetime import datetime

from pydantic import BaseModel, Field

from recruit_api.enums import Difficulty, TestType


class AnswerOption(BaseModel):
    id: str = Field(..., min_length=1, max_length=50)
    text: str = Field(..., min_length=1, max_length=2000)


class QuestionTemplateCreate(BaseModel):
    """New bank question with its answer key."""

    test_type: TestType
    question_text: str = Field(..., min_length=1, max_length=2000)
    options: list[AnswerOption] = Field(..., min_length=2, max_length=20)
    allow_multiple_answers: bool = False
    max_answers_allowed: int | None = Field(None, ge=1, le=10)
    difficulty_level: Difficulty = Difficulty.MEDIUM
    point_value: float = Field(1.0, ge=0.25, le=100)
    estimated_time_seconds: int | None = Field(None, ge=10, le=3600)
    display_order: int | None = Field(None, ge=1)
    correct_answers: list[str] | None = None
    expected_answer_guide: dict[str, object] | None = None


class QuestionTemplateUpdate(BaseModel):
    """Partial update; omitted fields keep their value."""

    question_text: str | None = Field(None, min_length=1, max_length=2000)
    options: list[AnswerOption] | None = Field(None, min_length=2, max_length=20)
    allow_multiple_answers: bool | None = None
    max_answers_allowed: int | None = Field(None, ge=1, le=10)
    difficulty_level: Difficulty | None = None
    point_value: float | None = Field(None, ge=0.25, le=100)
    estimated_time_seconds: int | None = Field(None, ge=10, le=3600)
    display_order: int | None = Field(None, ge=1)
    correct_answers: list[str] | None = None
    expected_answer_guide: dict[str, object] | None = None


class QuestionTemplateOut(BaseModel):
    """Bank question as listed to admins; only says whether a key exists."""

    id: str
    test_type: TestType
    question_text: str
    options: list[dict[str, object] | str] = Field(default_factory=list)
    allow_multiple_answers: bool
    max_answers_allowed: int | None = None
    difficulty_level: str | None = None
    point_value: float
    estimated_time_seconds: int | None = None
    display_order: int | None = None
    is_active: bool
    version: int
    created_at: datetime
    updated_at: datetime | None = None
    has_answer: bool


class QuestionTemplateWithAnswer(QuestionTemplateOut):
    correct_answers: list[str] = Field(default_factory=list)
    expected_answer_guide: dict[str, object] | None = None


class QuestionTemplatePage(BaseModel):
    items: list[QuestionTemplateOut]
    total: int
    page: int
    page_size: int


class ReadingTextCreate(BaseModel):
    """New Portuguese reading passage."""

    title: str = Field(..., min_length=5, max_length=200)
    content: str = Field(..., min_length=50, max_length=10000)
    author_name: str | None = Field(None, max_length=200)
    source_attribution: str | None = Field(None, max_length=500)
    difficulty_level: Difficulty = Difficulty.MEDIUM
    estimated_reading_time_minutes: int = Field(3, ge=1, le=30)
    word_count: int | None = Field(None, ge=0, le=10000)


class ReadingTextOut(BaseModel):
    id: str
    title: str
    content: str
    author_name: str | None = None
    source_attribution: str | None = None
    difficulty_level: str
    estimated_reading_time_minutes: int | None = None
    word_count: int | None = None
    version: int
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True
