"""Admin Portuguese reading text endpoints (X-Admin-Key protected)."""
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from recruit_api.dependencies.auth import require_admin_key
from recruit_api.dependencies.services import get_portuguese_content_service
from recruit_api.models.auth import MessageResponse
from recruit_api.models.question_templates import ReadingTextCreate, ReadingTextOut
from recruit_api.services.portuguese_content_service import PortugueseContentAdminService
from recruit_api.utils.errors import unwrap

router = APIRouter(
    prefix="/api/admin/portuguese-content",
    tags=["admin"],
    dependencies=[Depends(require_admin_key)],
)

Content = Annotated[PortugueseContentAdminService, Depends(get_portuguese_content_service)]


@router.post("", response_model=ReadingTextOut, status_code=status.HTTP_201_CREATED)
def create_reading_text(payload: ReadingTextCreate, service: Content) -> ReadingTextOut:
    return ReadingTextOut.model_validate(unwrap(service.create_reading_text(payload)))


@router.get("", response_model=list[ReadingTextOut])
def list_reading_texts(
    service: Content,
    include_inactive: bool = False,
    page: Annotated[int, Query(ge=1)] = 1,
    page_size: Annotated[int, Query(ge=1, le=100)] = 50,
) -> list[ReadingTextOut]:
    return [
        ReadingTextOut.model_validate(text)
        for text in service.list_reading_texts(include_inactive, page, page_size)
    ]


@router.get("/{text_id}", response_model=ReadingTextOut)
def get_reading_text(text_id: str, service: Content) -> ReadingTextOut:
    return ReadingTextOut.model_validate(unwrap(service.get_reading_text(text_id)))


@router.delete("/{text_id}", response_model=MessageResponse)
def deactivate_reading_text(text_id: str, service: Content) -> MessageResponse:
    """Stop offering the text to new Portuguese tests."""
    unwrap(service.deactivate_reading_text(text_id))
    return MessageResponse(message="Reading text deactivated")
