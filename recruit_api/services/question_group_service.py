"""
Admin management of question groups.

Each group-sourced test type has at most one active group; activating a group
deactivates its siblings in the same transaction.
"""
import logging
from dataclasses import dataclass
from typing import Mapping

from sqlalchemy.orm import Session as DbSession

from recruit_api.enums import TestType
from recruit_api.models.db.question import QuestionAnswer, QuestionTemplate, TestQuestionGroup
from recruit_api.models.question_groups import (
    QuestionGroupCreate,
    QuestionGroupUpdate,
    QuestionOrder,
    QuestionUpdate,
)
from recruit_api.repositories import question_repository as questions
from recruit_api.utils.errors import ErrorKind, Result
from recruit_api.utils.json_utils import json_dump
from recruit_api.utils.time_utils import Clock

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AdminOperation:
    message: str
    group_id: str | None = None


def _group_not_found() -> Result:
    return Result.fail("GROUP_NOT_FOUND", "Question group not found", ErrorKind.NOT_FOUND)


class QuestionGroupAdminService:
    def __init__(
        self, db: DbSession, clock: Clock, required_question_counts: Mapping[TestType, int]
    ) -> None:
        self.db = db
        self.clock = clock
        self.required_question_counts = required_question_counts

    def list_groups(
        self, test_type: TestType | None = None, include_inactive: bool = False
    ) -> list[TestQuestionGroup]:
        type_value = TestType(test_type).value if test_type is not None else None
        return questions.list_groups(self.db, type_value, active_only=not include_inactive)

    def get_group(self, group_id: str) -> TestQuestionGroup | None:
        return questions.get_group(self.db, group_id)

    def create_group(self, request: QuestionGroupCreate) -> Result[AdminOperation]:
        test_type = TestType(request.test_type)
        required = self.required_question_counts.get(test_type)
        if required is None:
            return Result.fail(
                "UNSUPPORTED_TEST_TYPE",
                f"Test type {test_type.value} is not supported",
                ErrorKind.VALIDATION,
            )
        if len(request.questions) != required:
            return Result.fail(
                "INVALID_QUESTION_COUNT",
                f"{test_type.value} test requires exactly {required} questions, "
                f"but {len(request.questions)} were provided",
                ErrorKind.VALIDATION,
                {"required": required, "provided": len(request.questions)},
            )
        orders = [question.group_order for question in request.questions]
        if len(set(orders)) != len(orders):
            return Result.fail(
                "DUPLICATE_GROUP_ORDER",
                "Each question must have a unique group order",
                ErrorKind.VALIDATION,
            )
        if any(order <= 0 for order in orders):
            return Result.fail(
                "INVALID_GROUP_ORDER",
                "Group order must be a positive number",
                ErrorKind.VALIDATION,
            )

        now = self.clock.now()
        group = TestQuestionGroup(
            test_type=test_type.value,
            group_name=request.group_name,
            description=request.description,
            difficulty_level=request.difficulty_level,
            is_active=request.is_active,
            created_at=now,
        )
        for item in request.questions:
            template = QuestionTemplate(
                test_type=test_type.value,
                group_order=item.group_order,
                question_text=item.question_text,
                point_value=item.point_value,
                estimated_time_seconds=item.estimated_time_seconds,
                difficulty_level=request.difficulty_level,
                is_active=True,
                created_at=now,
            )
            if item.expected_answer_guide is not None:
                template.answer = QuestionAnswer(
                    expected_answer_guide_json=json_dump(item.expected_answer_guide)
                )
            group.questions.append(template)

        if request.is_active:
            questions.deactivate_groups(self.db, test_type.value)
        self.db.add(group)
        self.db.commit()

        logger.info(
            "Created question group %s for test type %s with %d questions",
            group.id,
            test_type.value,
            len(request.questions),
        )
        return Result.ok(AdminOperation("Question group created successfully", group.id))

    def update_group(self, group_id: str, request: QuestionGroupUpdate) -> Result[AdminOperation]:
        group = questions.get_group(self.db, group_id)
        if group is None:
            return _group_not_found()

        group.group_name = request.group_name
        group.description = request.description
        group.difficulty_level = request.difficulty_level
        group.updated_at = self.clock.now()
        self.db.commit()
        logger.info("Updated question group %s metadata", group_id)
        return Result.ok(AdminOperation("Question group updated successfully", group_id))

    def update_question(
        self, group_id: str, question_id: str, request: QuestionUpdate
    ) -> Result[AdminOperation]:
        """Edit a template. Tests created earlier keep their snapshot."""
        group = questions.get_group(self.db, group_id)
        if group is None:
            return _group_not_found()
        question = next((q for q in group.questions if q.id == question_id), None)
        if question is None:
            return Result.fail(
                "QUESTION_NOT_FOUND", "Question not found in this group", ErrorKind.NOT_FOUND
            )

        now = self.clock.now()
        question.question_text = request.question_text
        question.point_value = request.point_value
        question.estimated_time_seconds = request.estimated_time_seconds
        question.version += 1
        question.updated_at = now
        group.updated_at = now
        self.db.commit()
        logger.info(
            "Updated question %s in group %s (version %d)", question_id, group_id, question.version
        )
        return Result.ok(AdminOperation("Question updated successfully", group_id))

    def reorder_questions(
        self, group_id: str, orderings: list[QuestionOrder]
    ) -> Result[AdminOperation]:
        group = questions.get_group(self.db, group_id)
        if group is None:
            return _group_not_found()

        by_id = {question.id: question for question in group.questions}
        requested_ids = [item.question_id for item in orderings]
        if len(set(requested_ids)) != len(requested_ids) or set(requested_ids) != set(by_id):
            return Result.fail(
                "INVALID_QUESTION_IDS",
                "All questions in the group must be included in the reorder request",
                ErrorKind.VALIDATION,
            )
        new_orders = [item.new_order for item in orderings]
        if len(set(new_orders)) != len(new_orders):
            return Result.fail(
                "DUPLICATE_ORDER", "Each question must have a unique order", ErrorKind.CONFLICT
            )

        now = self.clock.now()
        for item in orderings:
            question = by_id[item.question_id]
            question.group_order = item.new_order
            question.updated_at = now
        group.updated_at = now
        self.db.commit()
        logger.info("Reordered questions in group %s", group_id)
        return Result.ok(AdminOperation("Questions reordered successfully", group_id))

    def activate_group(self, group_id: str) -> Result[AdminOperation]:
        group = questions.get_group(self.db, group_id)
        if group is None:
            return _group_not_found()

        # Siblings go inactive first so the single-active index never sees two
        questions.deactivate_groups(self.db, group.test_type, except_id=group.id)
        group.is_active = True
        group.updated_at = self.clock.now()
        self.db.commit()
        logger.info("Activated question group %s for test type %s", group_id, group.test_type)
        return Result.ok(
            AdminOperation(
                "Question group activated. All other groups for this test type have been deactivated.",
                group_id,
            )
        )

    def deactivate_group(self, group_id: str) -> Result[AdminOperation]:
        group = questions.get_group(self.db, group_id)
        if group is None:
            return _group_not_found()

        if group.is_active and questions.count_active_groups(self.db, group.test_type) == 1:
            return Result.fail(
                "CANNOT_DEACTIVATE_ONLY_GROUP",
                "Cannot deactivate the only active group for this test type. "
                "Create or activate another group first.",
                ErrorKind.CONFLICT,
            )

        group.is_active = False
        group.updated_at = self.clock.now()
        self.db.commit()
        logger.info("Deactivated question group %s", group_id)
        return Result.ok(AdminOperation("Question group deactivated", group_id))

    def delete_group(self, group_id: str) -> Result[AdminOperation]:
        group = questions.get_group(self.db, group_id)
        if group is None:
            return _group_not_found()
        if questions.is_group_in_use(self.db, group_id):
            return Result.fail(
                "GROUP_IN_USE",
                "Cannot delete group because it is referenced by existing tests. "
                "Deactivate it instead.",
                ErrorKind.CONFLICT,
            )

        self.db.delete(group)
        self.db.commit()
        logger.info("Deleted question group %s", group_id)
        return Result.ok(AdminOperation("Question group deleted successfully"))
