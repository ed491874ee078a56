"""Pydantic models."""
from recruit_api.models.auth import (
    LockoutStatusResponse,
    MessageResponse,
    TokenRequest,
    TokenRequestResponse,
    TokenValidationRequest,
    TokenValidationResponse,
)
from recruit_api.models.question_groups import (
    AdminOperationResponse,
    QuestionCreate,
    QuestionGroupCreate,
    QuestionGroupDetail,
    QuestionGroupListResponse,
    QuestionGroupSummary,
    QuestionGroupUpdate,
    QuestionOrder,
    QuestionUpdate,
    ReorderQuestionsRequest,
)
from recruit_api.models.question_templates import (
    AnswerOption,
    QuestionTemplateCreate,
    QuestionTemplateOut,
    QuestionTemplatePage,
    QuestionTemplateUpdate,
    QuestionTemplateWithAnswer,
    ReadingTextCreate,
    ReadingTextOut,
)
from recruit_api.models.tests import (
    AnswerSubmission,
    CanStartResponse,
    CreateTestRequest,
    QuestionResponseOut,
    QuestionSnapshotResponse,
    SaveAnswersRequest,
    StartTestRequest,
    SubmissionResultResponse,
    SubmitTestRequest,
    TestInstanceDetailResponse,
    TestInstanceResponse,
    TestQuestionsResponse,
    TestStatusResponse,
    VideoResponseOut,
)

__all__ = [
    "AdminOperationResponse",
    "AnswerOption",
    "AnswerSubmission",
    "CanStartResponse",
    "CreateTestRequest",
    "LockoutStatusResponse",
    "MessageResponse",
    "QuestionCreate",
    "QuestionGroupCreate",
    "QuestionGroupDetail",
    "QuestionGroupListResponse",
    "QuestionGroupSummary",
    "QuestionGroupUpdate",
    "QuestionOrder",
    "QuestionResponseOut",
    "QuestionSnapshotResponse",
    "QuestionTemplateCreate",
    "QuestionTemplateOut",
    "QuestionTemplatePage",
    "QuestionTemplateUpdate",
    "QuestionTemplateWithAnswer",
    "QuestionUpdate",
    "ReadingTextCreate",
    "ReadingTextOut",
    "ReorderQuestionsRequest",
    "SaveAnswersRequest",
    "StartTestRequest",
    "SubmissionResultResponse",
    "SubmitTestRequest",
    "TestInstanceDetailResponse",
    "TestInstanceResponse",
    "TestQuestionsResponse",
    "TestStatusResponse",
    "TokenRequest",
    "TokenRequestResponse",
    "TokenValidationRequest",
    "TokenValidationResponse",
    "VideoResponseOut",
]
