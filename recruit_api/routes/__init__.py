"""API route modules."""
from recruit_api.routes import (
    admin_portuguese_content,
    admin_question_groups,
    admin_question_templates,
    candidate_auth,
    tests,
)

__all__ = [
    "admin_portuguese_content",
    "admin_question_groups",
    "admin_question_templates",
    "candidate_auth",
    "tests",
]
