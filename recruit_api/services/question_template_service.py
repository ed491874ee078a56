"""
Admin management of the question bank.

Bank templates feed the test types that do not use question groups. Each
template keeps its answer key in a separate QuestionAnswer row; edits bump
the template version and never touch snapshots of tests already created.
"""
import logging
from dataclasses import dataclass
from typing import Collection

from sqlalchemy.orm import Session as DbSession

from recruit_api.enums import Difficulty, TestType
from recruit_api.models.db.question import QuestionAnswer, QuestionTemplate
from recruit_api.models.question_templates import (
    AnswerOption,
    QuestionTemplateCreate,
    QuestionTemplateUpdate,
)
from recruit_api.repositories import question_repository as questions
from recruit_api.utils.errors import ErrorKind, Result
from recruit_api.utils.json_utils import json_dump, load_list
from recruit_api.utils.time_utils import Clock

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TemplatePage:
    items: list[QuestionTemplate]
    total: int
    page: int
    page_size: int


def _template_not_found() -> Result:
    return Result.fail(
        "TEMPLATE_NOT_FOUND", "Question template not found", ErrorKind.NOT_FOUND
    )


def _invalid_key(message: str, details: dict | None = None) -> Result:
    return Result.fail("INVALID_ANSWER_KEY", message, ErrorKind.VALIDATION, details)


def validate_answer_key(
    option_ids: list[str],
    allow_multiple: bool,
    max_answers: int | None,
    correct: list[str] | None,
) -> Result[list[str] | None]:
    """Check options and key together; returns the cleaned key (None when absent)."""
    if len(set(option_ids)) != len(option_ids):
        return Result.fail(
            "INVALID_OPTIONS", "Option ids must be unique", ErrorKind.VALIDATION
        )
    if correct is None:
        return Result.ok(None)

    key = list(dict.fromkeys(c.strip() for c in correct if c.strip()))
    if not key:
        return _invalid_key("Answer key must name at least one option")
    unknown = [option for option in key if option not in option_ids]
    if unknown:
        return _invalid_key(
            "Answer key references unknown options", {"unknown_options": unknown}
        )
    if not allow_multiple and len(key) > 1:
        return _invalid_key("Single-answer question takes exactly one correct option")
    if max_answers is not None and len(key) > max_answers:
        return _invalid_key(
            f"Answer key has more than {max_answers} options",
            {"max_answers_allowed": max_answers},
        )
    return Result.ok(key)


def _option_ids(options: list[AnswerOption] | list) -> list[str]:
    ids = []
    for option in options:
        if isinstance(option, AnswerOption):
            ids.append(option.id)
        elif isinstance(option, dict):
            ids.append(str(option.get("id")))
        else:
            ids.append(str(option))
    return ids


class QuestionTemplateAdminService:
    def __init__(
        self, db: DbSession, clock: Clock, bank_test_types: Collection[TestType]
    ) -> None:
        self.db = db
        self.clock = clock
        self.bank_test_types = frozenset(bank_test_types)

    def _set_answer(
        self,
        template: QuestionTemplate,
        key: list[str] | None,
        guide: dict[str, object] | None,
    ) -> None:
        if key is None and guide is None:
            return
        if template.answer is None:
            template.answer = QuestionAnswer()
        if key is not None:
            template.answer.correct_answers = key
        if guide is not None:
            template.answer.expected_answer_guide_json = json_dump(guide)
        template.answer.updated_at = self.clock.now()

    def create_template(self, request: QuestionTemplateCreate) -> Result[QuestionTemplate]:
        test_type = TestType(request.test_type)
        if test_type not in self.bank_test_types:
            return Result.fail(
                "UNSUPPORTED_TEST_TYPE",
                f"{test_type.value} questions are managed through question groups",
                ErrorKind.VALIDATION,
            )
        checked = validate_answer_key(
            _option_ids(request.options),
            request.allow_multiple_answers,
            request.max_answers_allowed,
            request.correct_answers,
        )
        if not checked.success:
            return checked

        now = self.clock.now()
        template = QuestionTemplate(
            test_type=test_type.value,
            group_order=request.display_order,
            question_text=request.question_text,
            options_json=json_dump([option.model_dump() for option in request.options]),
            allow_multiple_answers=request.allow_multiple_answers,
            max_answers_allowed=request.max_answers_allowed,
            point_value=request.point_value,
            estimated_time_seconds=request.estimated_time_seconds,
            difficulty_level=Difficulty(request.difficulty_level).value,
            version=1,
            is_active=True,
            created_at=now,
        )
        self._set_answer(template, checked.value, request.expected_answer_guide)
        self.db.add(template)
        self.db.commit()

        logger.info(
            "Created %s question template %s (answer key: %s)",
            test_type.value,
            template.id,
            "yes" if template.answer is not None else "no",
        )
        return Result.ok(template, "Question template created")

    def update_template(
        self, template_id: str, request: QuestionTemplateUpdate
    ) -> Result[QuestionTemplate]:
        template = questions.get_bank_template(self.db, template_id)
        if template is None:
            return _template_not_found()

        provided = request.model_fields_set
        options = request.options if request.options is not None else load_list(template.options_json)
        allow_multiple = (
            request.allow_multiple_answers
            if request.allow_multiple_answers is not None
            else template.allow_multiple_answers
        )
        max_answers = (
            request.max_answers_allowed
            if "max_answers_allowed" in provided
            else template.max_answers_allowed
        )
        existing_key = template.answer.correct_answers if template.answer else []
        key = request.correct_answers if request.correct_answers is not None else existing_key
        # Revalidate the stored key too, since options or limits may have changed
        checked = validate_answer_key(_option_ids(options), allow_multiple, max_answers, key or None)
        if not checked.success:
            return checked

        now = self.clock.now()
        if request.question_text is not None:
            template.question_text = request.question_text
        if request.options is not None:
            template.options_json = json_dump([option.model_dump() for option in request.options])
        template.allow_multiple_answers = allow_multiple
        template.max_answers_allowed = max_answers
        if request.difficulty_level is not None:
            template.difficulty_level = Difficulty(request.difficulty_level).value
        if request.point_value is not None:
            template.point_value = request.point_value
        if "estimated_time_seconds" in provided:
            template.estimated_time_seconds = request.estimated_time_seconds
        if "display_order" in provided:
            template.group_order = request.display_order
        self._set_answer(
            template,
            checked.value if request.correct_answers is not None else None,
            request.expected_answer_guide,
        )
        template.version += 1
        template.updated_at = now
        self.db.commit()

        logger.info("Updated question template %s to version %d", template.id, template.version)
        return Result.ok(template, "Question template updated")

    def get_template(self, template_id: str) -> Result[QuestionTemplate]:
        template = questions.get_bank_template(self.db, template_id)
        if template is None:
            return _template_not_found()
        return Result.ok(template)

    def list_templates(
        self,
        test_type: TestType | str,
        include_inactive: bool = False,
        page: int = 1,
        page_size: int = 50,
    ) -> TemplatePage:
        page = max(page, 1)
        page_size = min(max(page_size, 1), 100)
        items, total = questions.list_bank_templates(
            self.db,
            TestType(test_type).value,
            include_inactive=include_inactive,
            offset=(page - 1) * page_size,
            limit=page_size,
        )
        return TemplatePage(items, total, page, page_size)

    def list_by_difficulty(
        self, test_type: TestType | str, difficulty: Difficulty | str
    ) -> list[QuestionTemplate]:
        items, _ = questions.list_bank_templates(
            self.db, TestType(test_type).value, difficulty=Difficulty(difficulty).value
        )
        return items

    def _set_active(self, template_id: str, active: bool) -> Result[QuestionTemplate]:
        template = questions.get_bank_template(self.db, template_id)
        if template is None:
            return _template_not_found()
        template.is_active = active
        template.updated_at = self.clock.now()
        self.db.commit()
        logger.info(
            "%s question template %s", "Reactivated" if active else "Deactivated", template_id
        )
        return Result.ok(template)

    def deactivate_template(self, template_id: str) -> Result[QuestionTemplate]:
        """Soft delete: the template stops feeding new tests."""
        return self._set_active(template_id, False)

    def reactivate_template(self, template_id: str) -> Result[QuestionTemplate]:
        return self._set_active(template_id, True)
