"""Video answers: validation, storage and dispatch for AI analysis."""
import logging
from pathlib import Path
from typing import BinaryIO

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session as DbSession

from recruit_api.config import VIDEO_ALLOWED_EXTENSIONS, VIDEO_MAX_SIZE_BYTES
from recruit_api.enums import TestStatus, VideoResponseType
from recruit_api.models.db.test_instance import TestInstance, VideoResponse
from recruit_api.repositories import test_repository as tests
from recruit_api.services.media_service import AIAgentClient, VideoStorage
from recruit_api.utils.errors import ErrorKind, Result
from recruit_api.utils.file_utils import get_file_size
from recruit_api.utils.time_utils import Clock

logger = logging.getLogger(__name__)


class VideoResponseService:
    def __init__(
        self,
        db: DbSession,
        clock: Clock,
        storage: VideoStorage,
        ai_agent: AIAgentClient,
        max_size_bytes: int = VIDEO_MAX_SIZE_BYTES,
        allowed_extensions: set[str] | frozenset[str] = frozenset(VIDEO_ALLOWED_EXTENSIONS),
    ) -> None:
        self.db = db
        self.clock = clock
        self.storage = storage
        self.ai_agent = ai_agent
        self.max_size_bytes = max_size_bytes
        self.allowed_extensions = frozenset(ext.lower() for ext in allowed_extensions)

    def _owned_test(self, test_id: str, candidate_id: str):
        test = tests.get_test(self.db, test_id)
        if test is None:
            return Result.fail("TEST_NOT_FOUND", "Test not found", ErrorKind.NOT_FOUND)
        if test.candidate_id != candidate_id:
            logger.warning("Candidate %s tried to access videos of test %s", candidate_id, test_id)
            return Result.fail(
                "FORBIDDEN", "Test does not belong to this candidate", ErrorKind.FORBIDDEN
            )
        return Result.ok(test)

    def upload_video(
        self,
        test_id: str,
        candidate_id: str,
        question_number: int,
        filename: str | None,
        stream: BinaryIO,
        question_snapshot_id: str | None = None,
        response_type: VideoResponseType | str | None = None,
    ) -> Result[VideoResponse]:
        owned = self._owned_test(test_id, candidate_id)
        if not owned.success:
            return owned
        test = owned.value
        if test.status != TestStatus.IN_PROGRESS.value:
            return Result.fail(
                "INVALID_STATE_TRANSITION",
                f"Videos can only be uploaded while the test is in progress (status: {test.status})",
                ErrorKind.STATE,
                {"status": test.status},
            )
        if question_snapshot_id is not None and question_snapshot_id not in {
            snapshot.id for snapshot in test.question_snapshots
        }:
            return Result.fail(
                "INVALID_QUESTION_SNAPSHOT",
                "Question does not belong to this test",
                ErrorKind.VALIDATION,
                {"question_snapshot_id": question_snapshot_id},
            )

        extension = Path(filename or "").suffix.lower()
        if extension not in self.allowed_extensions:
            return Result.fail(
                "INVALID_VIDEO_FILE",
                f"Unsupported video format '{extension or filename}'",
                ErrorKind.VALIDATION,
                {"allowed_extensions": sorted(self.allowed_extensions)},
            )
        size = get_file_size(stream)
        if size == 0 or size > self.max_size_bytes:
            return Result.fail(
                "INVALID_VIDEO_FILE",
                "Video file is empty or too large",
                ErrorKind.VALIDATION,
                {"size_bytes": size, "max_size_bytes": self.max_size_bytes},
            )

        blob_url = self.storage.save(test.id, f"q{question_number}{extension}", stream)
        video = VideoResponse(
            test_instance_id=test.id,
            question_snapshot_id=question_snapshot_id,
            question_number=question_number,
            response_type=VideoResponseType(response_type).value if response_type else None,
            blob_url=blob_url,
            file_size_bytes=size,
            uploaded_at=self.clock.now(),
        )
        self.db.add(video)
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.error("Could not record video for test %s; removing %s", test.id, blob_url)
            self.storage.delete(blob_url)
            raise
        logger.info(
            "Uploaded video %s for test %s question %d (%d bytes)",
            video.id,
            test.id,
            question_number,
            size,
        )

        if not self.ai_agent.dispatch_video(video.id, blob_url, test.test_type):
            logger.warning("Video %s was not dispatched for AI analysis", video.id)
        return Result.ok(video, "Video uploaded")

    def list_videos(self, test_id: str, candidate_id: str) -> Result[list[VideoResponse]]:
        owned = self._owned_test(test_id, candidate_id)
        if not owned.success:
            return owned
        return Result.ok(tests.list_videos(self.db, test_id))

    def _owned_video(
        self, test_id: str, video_id: str, candidate_id: str
    ) -> Result[tuple[TestInstance, VideoResponse]]:
        owned = self._owned_test(test_id, candidate_id)
        if not owned.success:
            return owned
        video = tests.get_video(self.db, video_id)
        if video is None or video.test_instance_id != test_id:
            return Result.fail("VIDEO_NOT_FOUND", "Video response not found", ErrorKind.NOT_FOUND)
        return Result.ok((owned.value, video))

    def get_video(self, test_id: str, video_id: str, candidate_id: str) -> Result[VideoResponse]:
        found = self._owned_video(test_id, video_id, candidate_id)
        if not found.success:
            return found
        return Result.ok(found.value[1])

    def delete_video(self, test_id: str, video_id: str, candidate_id: str) -> Result[None]:
        """Remove a video while the test is still in progress."""
        found = self._owned_video(test_id, video_id, candidate_id)
        if not found.success:
            return found
        test, video = found.value
        if test.status != TestStatus.IN_PROGRESS.value:
            return Result.fail(
                "INVALID_STATE_TRANSITION",
                f"Videos can only be deleted while the test is in progress (status: {test.status})",
                ErrorKind.STATE,
                {"status": test.status},
            )

        blob_url = video.blob_url
        self.db.delete(video)
        self.db.commit()
        try:
            self.storage.delete(blob_url)
        except OSError as exc:
            logger.warning("Failed to remove stored video %s: %s", blob_url, exc)
        logger.info("Deleted video %s of test %s", video_id, test_id)
        return Result.ok(None, "Video deleted")
