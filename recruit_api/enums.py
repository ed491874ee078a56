"""Domain enumerations shared by models, services and routes."""
import enum


class TestType(str, enum.Enum):
    """Kind of assessment a candidate can take."""

    PORTUGUESE = "portuguese"
    MATH = "math"
    PSYCHOLOGY = "psychology"
    VISUAL_RETENTION = "visual_retention"
    INTERVIEW = "interview"


class TestStatus(str, enum.Enum):
    """Lifecycle status of a test instance."""

    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    EXPIRED = "expired"
    CANCELLED = "cancelled"


ACTIVE_TEST_STATUSES = (TestStatus.NOT_STARTED.value, TestStatus.IN_PROGRESS.value)

# Test types answered by recorded video instead of multiple choice
VIDEO_TEST_TYPES = frozenset({TestType.PORTUGUESE, TestType.MATH, TestType.INTERVIEW})


class VideoResponseType(str, enum.Enum):
    """Purpose of an uploaded video (Portuguese tests record both)."""

    READING = "reading"
    QUESTION_ANSWER = "question_answer"


class Difficulty(str, enum.Enum):
    """Difficulty levels used for question and reading text selection."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"
