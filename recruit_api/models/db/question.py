"""
Question bank database models: groups, templates, answer keys and reading texts.

Templates are editable by admins; tests never read them after creation, they
read their own snapshots instead.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import ForeignKey, Index, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from recruit_api.database import Base, UTCDateTime
from recruit_api.utils.json_utils import json_dump, load_str_list


def _uuid() -> str:
    return str(uuid.uuid4())


def _now() -> datetime:
    return datetime.now(timezone.utc)


class TestQuestionGroup(Base):
    """Named bundle of questions for one test type."""

    __tablename__ = "test_question_groups"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    test_type: Mapped[str] = mapped_column(String(32), index=True, nullable=False)
    group_name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    difficulty_level: Mapped[str | None] = mapped_column(String(20), nullable=True)
    is_active: Mapped[bool] = mapped_column(default=False, nullable=False)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=_now, nullable=False)
    updated_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)

    questions: Mapped[list["QuestionTemplate"]] = relationship(
        "QuestionTemplate",
        back_populates="group",
        cascade="all, delete-orphan",
        order_by="QuestionTemplate.group_order",
    )

    # Only one group per test type feeds new tests
    __table_args__ = (
        Index(
            "uq_active_group_per_test_type",
            "test_type",
            unique=True,
            sqlite_where=text("is_active = 1"),
            postgresql_where=text("is_active"),
        ),
    )

    def __repr__(self) -> str:
        return f"<TestQuestionGroup(id={self.id}, type='{self.test_type}', active={self.is_active})>"


class QuestionTemplate(Base):
    """Live, editable question. Belongs to a group or to the template bank."""

    __tablename__ = "question_templates"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    group_id: Mapped[str | None] = mapped_column(
        ForeignKey("test_question_groups.id", ondelete="CASCADE"), nullable=True, index=True
    )
    test_type: Mapped[str] = mapped_column(String(32), index=True, nullable=False)
    group_order: Mapped[int | None] = mapped_column(nullable=True)

    question_text: Mapped[str] = mapped_column(Text, nullable=False)
    options_json: Mapped[str | None] = mapped_column(Text, nullable=True)
    allow_multiple_answers: Mapped[bool] = mapped_column(default=False, nullable=False)
    max_answers_allowed: Mapped[int | None] = mapped_column(nullable=True)
    point_value: Mapped[float] = mapped_column(default=1.0, nullable=False)
    estimated_time_seconds: Mapped[int | None] = mapped_column(nullable=True)
    difficulty_level: Mapped[str | None] = mapped_column(String(20), nullable=True)

    version: Mapped[int] = mapped_column(default=1, nullable=False)
    is_active: Mapped[bool] = mapped_column(default=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=_now, nullable=False)
    updated_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)

    group: Mapped["TestQuestionGroup | None"] = relationship(
        "TestQuestionGroup", back_populates="questions"
    )
    answer: Mapped["QuestionAnswer | None"] = relationship(
        "QuestionAnswer",
        back_populates="template",
        uselist=False,
        cascade="all, delete-orphan",
    )


class QuestionAnswer(Base):
    """Answer key of a template. Admin and grading use only."""

    __tablename__ = "question_answers"

    id: Mapped[int] = mapped_column(primary_key=True)
    template_id: Mapped[str] = mapped_column(
        ForeignKey("question_templates.id", ondelete="CASCADE"), unique=True, nullable=False
    )
    # JSON list of correct option ids
    correct_answer_json: Mapped[str | None] = mapped_column(Text, nullable=True)
    expected_answer_guide_json: Mapped[str | None] = mapped_column(Text, nullable=True)
    updated_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)

    template: Mapped["QuestionTemplate"] = relationship("QuestionTemplate", back_populates="answer")

    @property
    def correct_answers(self) -> list[str]:
        return load_str_list(self.correct_answer_json)

    @correct_answers.setter
    def correct_answers(self, value: list[str] | None) -> None:
        self.correct_answer_json = json_dump(value) if value else None


class PortugueseReadingText(Base):
    """Reading passage shown with Portuguese tests."""

    __tablename__ = "portuguese_reading_texts"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    title: Mapped[str] = mapped_column(String(300), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    author_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    source_attribution: Mapped[str | None] = mapped_column(String(500), nullable=True)
    difficulty_level: Mapped[str] = mapped_column(String(20), default="medium", nullable=False)
    estimated_reading_time_minutes: Mapped[int | None] = mapped_column(nullable=True)
    word_count: Mapped[int | None] = mapped_column(nullable=True)
    version: Mapped[int] = mapped_column(default=1, nullable=False)
    is_active: Mapped[bool] = mapped_column(default=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=_now, nullable=False)
