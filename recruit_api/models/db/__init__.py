"""Database models."""
from recruit_api.models.db.candidate import Candidate, CandidateAuthToken
from recruit_api.models.db.question import (
    PortugueseReadingText,
    QuestionAnswer,
    QuestionTemplate,
    TestQuestionGroup,
)
from recruit_api.models.db.test_instance import (
    QuestionResponse,
    QuestionSnapshot,
    TestInstance,
    VideoResponse,
)

__all__ = [
    "Candidate",
    "CandidateAuthToken",
    "PortugueseReadingText",
    "QuestionAnswer",
    "QuestionTemplate",
    "TestQuestionGroup",
    "QuestionResponse",
    "QuestionSnapshot",
    "TestInstance",
    "VideoResponse",
]
