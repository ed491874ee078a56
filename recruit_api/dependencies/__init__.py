"""FastAPI dependencies."""
from recruit_api.dependencies.auth import (
    ensure_candidate,
    get_current_candidate_claims,
    require_admin_key,
)
from recruit_api.dependencies.services import (
    get_candidate_auth_service,
    get_clock,
    get_email_sender,
    get_portuguese_content_service,
    get_question_group_service,
    get_question_template_service,
    get_test_service,
    get_video_response_service,
)

__all__ = [
    "ensure_candidate",
    "get_current_candidate_claims",
    "require_admin_key",
    "get_candidate_auth_service",
    "get_clock",
    "get_email_sender",
    "get_portuguese_content_service",
    "get_question_group_service",
    "get_question_template_service",
    "get_test_service",
    "get_video_response_service",
]
