"""Admin question-group endpoints (X-Admin-Key protected)."""
from typing import Annotated

from fastapi import APIRouter, Depends, status

from recruit_api.dependencies.auth import require_admin_key
from recruit_api.dependencies.services import get_question_group_service
from recruit_api.enums import TestType
from recruit_api.models.db.question import TestQuestionGroup
from recruit_api.models.question_groups import (
    AdminOperationResponse,
    QuestionDetail,
    QuestionGroupCreate,
    QuestionGroupDetail,
    QuestionGroupListResponse,
    QuestionGroupSummary,
    QuestionGroupUpdate,
    QuestionUpdate,
    ReorderQuestionsRequest,
)
from recruit_api.services.question_group_service import AdminOperation, QuestionGroupAdminService
from recruit_api.utils.errors import ErrorKind, Result, unwrap

router = APIRouter(
    prefix="/api/admin/question-groups",
    tags=["admin"],
    dependencies=[Depends(require_admin_key)],
)

Groups = Annotated[QuestionGroupAdminService, Depends(get_question_group_service)]


def _operation_out(result: Result[AdminOperation]) -> AdminOperationResponse:
    operation = unwrap(result)
    return AdminOperationResponse(message=operation.message, group_id=operation.group_id)


def _summary(group: TestQuestionGroup) -> QuestionGroupSummary:
    return QuestionGroupSummary(
        id=group.id,
        test_type=group.test_type,
        group_name=group.group_name,
        description=group.description,
        difficulty_level=group.difficulty_level,
        is_active=group.is_active,
        question_count=len(group.questions),
        created_at=group.created_at,
        updated_at=group.updated_at,
    )


@router.get("", response_model=QuestionGroupListResponse)
def list_groups(
    service: Groups,
    test_type: TestType | None = None,
    include_inactive: bool = False,
) -> QuestionGroupListResponse:
    groups = service.list_groups(test_type, include_inactive)
    return QuestionGroupListResponse(groups=[_summary(group) for group in groups])


@router.get("/{group_id}", response_model=QuestionGroupDetail)
def get_group(group_id: str, service: Groups) -> QuestionGroupDetail:
    group = service.get_group(group_id)
    if group is None:
        unwrap(Result.fail("GROUP_NOT_FOUND", "Question group not found", ErrorKind.NOT_FOUND))
    return QuestionGroupDetail(
        id=group.id,
        test_type=group.test_type,
        group_name=group.group_name,
        description=group.description,
        difficulty_level=group.difficulty_level,
        is_active=group.is_active,
        created_at=group.created_at,
        updated_at=group.updated_at,
        questions=[QuestionDetail.model_validate(question) for question in group.questions],
    )


@router.post("", response_model=AdminOperationResponse, status_code=status.HTTP_201_CREATED)
def create_group(payload: QuestionGroupCreate, service: Groups) -> AdminOperationResponse:
    """Create a group with exactly the required number of questions."""
    return _operation_out(service.create_group(payload))


@router.put("/{group_id}", response_model=AdminOperationResponse)
def update_group(
    group_id: str, payload: QuestionGroupUpdate, service: Groups
) -> AdminOperationResponse:
    return _operation_out(service.update_group(group_id, payload))


@router.put("/{group_id}/questions/{question_id}", response_model=AdminOperationResponse)
def update_question(
    group_id: str, question_id: str, payload: QuestionUpdate, service: Groups
) -> AdminOperationResponse:
    return _operation_out(service.update_question(group_id, question_id, payload))


@router.patch("/{group_id}/questions/reorder", response_model=AdminOperationResponse)
def reorder_questions(
    group_id: str, payload: ReorderQuestionsRequest, service: Groups
) -> AdminOperationResponse:
    return _operation_out(service.reorder_questions(group_id, payload.question_order))


@router.patch("/{group_id}/activate", response_model=AdminOperationResponse)
def activate_group(group_id: str, service: Groups) -> AdminOperationResponse:
    """Activate a group; the other groups of its test type are deactivated."""
    return _operation_out(service.activate_group(group_id))


@router.patch("/{group_id}/deactivate", response_model=AdminOperationResponse)
def deactivate_group(group_id: str, service: Groups) -> AdminOperationResponse:
    return _operation_out(service.deactivate_group(group_id))


@router.delete("/{group_id}", response_model=AdminOperationResponse)
def delete_group(group_id: str, service: Groups) -> AdminOperationResponse:
    return _operation_out(service.delete_group(group_id))
