"""Admin question bank endpoints (X-Admin-Key protected).

Only ``/{template_id}/with-answer`` returns answer keys.
"""
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from recruit_api.dependencies.auth import require_admin_key
from recruit_api.dependencies.services import get_question_template_service
from recruit_api.enums import Difficulty, TestType
from recruit_api.models.auth import MessageResponse
from recruit_api.models.db.question import QuestionTemplate
from recruit_api.models.question_templates import (
    QuestionTemplateCreate,
    QuestionTemplateOut,
    QuestionTemplatePage,
    QuestionTemplateUpdate,
    QuestionTemplateWithAnswer,
)
from recruit_api.services.question_template_service import QuestionTemplateAdminService
from recruit_api.utils.errors import unwrap
from recruit_api.utils.json_utils import load_dict, load_list

router = APIRouter(
    prefix="/api/admin/question-templates",
    tags=["admin"],
    dependencies=[Depends(require_admin_key)],
)

Templates = Annotated[QuestionTemplateAdminService, Depends(get_question_template_service)]


def _template_fields(template: QuestionTemplate) -> dict[str, object]:
    return {
        "id": template.id,
        "test_type": template.test_type,
        "question_text": template.question_text,
        "options": load_list(template.options_json),
        "allow_multiple_answers": template.allow_multiple_answers,
        "max_answers_allowed": template.max_answers_allowed,
        "difficulty_level": template.difficulty_level,
        "point_value": template.point_value,
        "estimated_time_seconds": template.estimated_time_seconds,
        "display_order": template.group_order,
        "is_active": template.is_active,
        "version": template.version,
        "created_at": template.created_at,
        "updated_at": template.updated_at,
        "has_answer": template.answer is not None and bool(template.answer.correct_answers),
    }


def _template_out(template: QuestionTemplate) -> QuestionTemplateOut:
    return QuestionTemplateOut(**_template_fields(template))


@router.post("", response_model=QuestionTemplateOut, status_code=status.HTTP_201_CREATED)
def create_template(payload: QuestionTemplateCreate, service: Templates) -> QuestionTemplateOut:
    """Add a question to the bank, with its answer key."""
    return _template_out(unwrap(service.create_template(payload)))


@router.get("", response_model=QuestionTemplatePage)
def list_templates(
    service: Templates,
    test_type: TestType,
    include_inactive: bool = False,
    page: Annotated[int, Query(ge=1)] = 1,
    page_size: Annotated[int, Query(ge=1, le=100)] = 50,
) -> QuestionTemplatePage:
    result = service.list_templates(test_type, include_inactive, page, page_size)
    return QuestionTemplatePage(
        items=[_template_out(template) for template in result.items],
        total=result.total,
        page=result.page,
        page_size=result.page_size,
    )


@router.get("/by-difficulty", response_model=list[QuestionTemplateOut])
def list_by_difficulty(
    service: Templates, test_type: TestType, difficulty: Difficulty
) -> list[QuestionTemplateOut]:
    return [_template_out(template) for template in service.list_by_difficulty(test_type, difficulty)]


@router.get("/{template_id}", response_model=QuestionTemplateOut)
def get_template(template_id: str, service: Templates) -> QuestionTemplateOut:
    return _template_out(unwrap(service.get_template(template_id)))


@router.get("/{template_id}/with-answer", response_model=QuestionTemplateWithAnswer)
def get_template_with_answer(template_id: str, service: Templates) -> QuestionTemplateWithAnswer:
    """Template including its answer key, for editing."""
    template = unwrap(service.get_template(template_id))
    answer = template.answer
    return QuestionTemplateWithAnswer(
        **_template_fields(template),
        correct_answers=answer.correct_answers if answer else [],
        expected_answer_guide=load_dict(answer.expected_answer_guide_json) if answer else None,
    )


@router.put("/{template_id}", response_model=QuestionTemplateOut)
def update_template(
    template_id: str, payload: QuestionTemplateUpdate, service: Templates
) -> QuestionTemplateOut:
    """Edit a template. Tests created earlier keep their snapshot."""
    return _template_out(unwrap(service.update_template(template_id, payload)))


@router.delete("/{template_id}", response_model=MessageResponse)
def deactivate_template(template_id: str, service: Templates) -> MessageResponse:
    unwrap(service.deactivate_template(template_id))
    return MessageResponse(message="Question template deactivated")


@router.post("/{template_id}/reactivate", response_model=MessageResponse)
def reactivate_template(template_id: str, service: Templates) -> MessageResponse:
    unwrap(service.reactivate_template(template_id))
    return MessageResponse(message="Question template reactivated")
