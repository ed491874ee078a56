"""Question groups, templates and reading texts."""
from sqlalchemy import func, select, update
from sqlalchemy.orm import Session as DbSession, selectinload

from recruit_api.models.db.question import (
    PortugueseReadingText,
    QuestionTemplate,
    TestQuestionGroup,
)
from recruit_api.models.db.test_instance import TestInstance


def get_group(db: DbSession, group_id: str) -> TestQuestionGroup | None:
    """Get group by ID with its questions loaded."""
    return db.execute(
        select(TestQuestionGroup)
        .options(selectinload(TestQuestionGroup.questions))
        .where(TestQuestionGroup.id == group_id)
    ).scalar_one_or_none()


def get_active_group(db: DbSession, test_type: str) -> TestQuestionGroup | None:
    """The single active group of a test type, questions loaded."""
    return db.execute(
        select(TestQuestionGroup)
        .options(selectinload(TestQuestionGroup.questions))
        .where(
            TestQuestionGroup.test_type == test_type,
            TestQuestionGroup.is_active == True,  # noqa: E712
        )
    ).scalar_one_or_none()


def list_groups(
    db: DbSession, test_type: str | None = None, active_only: bool = True
) -> list[TestQuestionGroup]:
    query = select(TestQuestionGroup).options(selectinload(TestQuestionGroup.questions))
    if test_type is not None:
        query = query.where(TestQuestionGroup.test_type == test_type)
    if active_only:
        query = query.where(TestQuestionGroup.is_active == True)  # noqa: E712
    query = query.order_by(TestQuestionGroup.test_type, TestQuestionGroup.created_at.desc())
    return list(db.execute(query).scalars().all())


def count_active_groups(db: DbSession, test_type: str) -> int:
    return db.execute(
        select(func.count())
        .select_from(TestQuestionGroup)
        .where(
            TestQuestionGroup.test_type == test_type,
            TestQuestionGroup.is_active == True,  # noqa: E712
        )
    ).scalar() or 0


def deactivate_groups(db: DbSession, test_type: str, except_id: str | None = None) -> int:
    """Stage deactivation of every active group of a test type but ``except_id``."""
    query = update(TestQuestionGroup).where(
        TestQuestionGroup.test_type == test_type,
        TestQuestionGroup.is_active == True,  # noqa: E712
    )
    if except_id is not None:
        query = query.where(TestQuestionGroup.id != except_id)
    result = db.execute(
        query
        .values(is_active=False)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount or 0


def is_group_in_use(db: DbSession, group_id: str) -> bool:
    """Whether any test instance was built from the group."""
    return db.execute(
        select(TestInstance.id).where(TestInstance.question_group_id == group_id).limit(1)
    ).first() is not None


def get_bank_templates_ordered(db: DbSession, test_type: str) -> list[QuestionTemplate]:
    """Every active bank template of a type, in display order."""
    return list(
        db.execute(
            select(QuestionTemplate)
            .options(selectinload(QuestionTemplate.answer))
            .where(
                QuestionTemplate.test_type == test_type,
                QuestionTemplate.group_id.is_(None),
                QuestionTemplate.is_active == True,  # noqa: E712
            )
            .order_by(QuestionTemplate.group_order, QuestionTemplate.created_at)
        ).scalars().all()
    )


def get_random_bank_templates(
    db: DbSession, test_type: str, count: int, difficulty: str | None = None
) -> list[QuestionTemplate]:
    """Up to ``count`` random active bank templates, optionally by difficulty."""
    query = (
        select(QuestionTemplate)
        .options(selectinload(QuestionTemplate.answer))
        .where(
            QuestionTemplate.test_type == test_type,
            QuestionTemplate.group_id.is_(None),
            QuestionTemplate.is_active == True,  # noqa: E712
        )
    )
    if difficulty:
        query = query.where(QuestionTemplate.difficulty_level == difficulty)
    query = query.order_by(func.random()).limit(count)
    return list(db.execute(query).scalars().all())


def get_random_reading_text(db: DbSession, difficulty: str) -> PortugueseReadingText | None:
    return db.execute(
        select(PortugueseReadingText)
        .where(
            PortugueseReadingText.difficulty_level == difficulty,
            PortugueseReadingText.is_active == True,  # noqa: E712
        )
        .order_by(func.random())
        .limit(1)
    ).scalar_one_or_none()


def get_reading_text(db: DbSession, text_id: str) -> PortugueseReadingText | None:
    return db.get(PortugueseReadingText, text_id)


def get_bank_template(db: DbSession, template_id: str) -> QuestionTemplate | None:
    """Bank template (not part of a group) with its answer key loaded."""
    return db.execute(
        select(QuestionTemplate)
        .options(selectinload(QuestionTemplate.answer))
        .where(QuestionTemplate.id == template_id, QuestionTemplate.group_id.is_(None))
    ).scalar_one_or_none()


def list_bank_templates(
    db: DbSession,
    test_type: str,
    include_inactive: bool = False,
    difficulty: str | None = None,
    offset: int = 0,
    limit: int | None = None,
) -> tuple[list[QuestionTemplate], int]:
    """One page of bank templates in display order, plus the total count."""
    filters = [QuestionTemplate.test_type == test_type, QuestionTemplate.group_id.is_(None)]
    if not include_inactive:
        filters.append(QuestionTemplate.is_active == True)  # noqa: E712
    if difficulty:
        filters.append(QuestionTemplate.difficulty_level == difficulty)

    total = db.execute(
        select(func.count()).select_from(QuestionTemplate).where(*filters)
    ).scalar() or 0
    query = (
        select(QuestionTemplate)
        .options(selectinload(QuestionTemplate.answer))
        .where(*filters)
        .order_by(QuestionTemplate.group_order, QuestionTemplate.created_at)
        .offset(offset)
    )
    if limit is not None:
        query = query.limit(limit)
    return list(db.execute(query).scalars().all()), total


def list_reading_texts(
    db: DbSession, include_inactive: bool = False, offset: int = 0, limit: int | None = None
) -> list[PortugueseReadingText]:
    query = select(PortugueseReadingText)
    if not include_inactive:
        query = query.where(PortugueseReadingText.is_active == True)  # noqa: E712
    query = query.order_by(PortugueseReadingText.created_at.desc()).offset(offset)
    if limit is not None:
        query = query.limit(limit)
    return list(db.execute(query).scalars().all())
