"""Admin management of Portuguese reading texts.

Texts are never edited in place: a test records the id and version of the
text it showed, so corrections go in as a new text and the old one is
deactivated.
"""
import logging

from sqlalchemy.orm import Session as DbSession

from recruit_api.enums import Difficulty
from recruit_api.models.db.question import PortugueseReadingText
from recruit_api.models.question_templates import ReadingTextCreate
from recruit_api.repositories import question_repository as questions
from recruit_api.utils.errors import ErrorKind, Result
from recruit_api.utils.time_utils import Clock

logger = logging.getLogger(__name__)


def _text_not_found() -> Result:
    return Result.fail(
        "READING_TEXT_NOT_FOUND", "Portuguese reading text not found", ErrorKind.NOT_FOUND
    )


class PortugueseContentAdminService:
    def __init__(self, db: DbSession, clock: Clock) -> None:
        self.db = db
        self.clock = clock

    def create_reading_text(self, request: ReadingTextCreate) -> Result[PortugueseReadingText]:
        text = PortugueseReadingText(
            title=request.title.strip(),
            content=request.content,
            author_name=request.author_name,
            source_attribution=request.source_attribution,
            difficulty_level=Difficulty(request.difficulty_level).value,
            estimated_reading_time_minutes=request.estimated_reading_time_minutes,
            word_count=request.word_count
            if request.word_count is not None
            else len(request.content.split()),
            version=1,
            is_active=True,
            created_at=self.clock.now(),
        )
        self.db.add(text)
        self.db.commit()
        logger.info("Created Portuguese reading text %s (%s)", text.id, text.difficulty_level)
        return Result.ok(text, "Reading text created")

    def get_reading_text(self, text_id: str) -> Result[PortugueseReadingText]:
        text = questions.get_reading_text(self.db, text_id)
        if text is None:
            return _text_not_found()
        return Result.ok(text)

    def list_reading_texts(
        self, include_inactive: bool = False, page: int = 1, page_size: int = 50
    ) -> list[PortugueseReadingText]:
        page = max(page, 1)
        page_size = min(max(page_size, 1), 100)
        return questions.list_reading_texts(
            self.db, include_inactive, offset=(page - 1) * page_size, limit=page_size
        )

    def deactivate_reading_text(self, text_id: str) -> Result[PortugueseReadingText]:
        """Stop offering the text to new tests; tests that showed it keep it."""
        text = questions.get_reading_text(self.db, text_id)
        if text is None:
            return _text_not_found()
        text.is_active = False
        self.db.commit()
        logger.info("Deactivated Portuguese reading text %s", text_id)
        return Result.ok(text)
