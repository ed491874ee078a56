import io
from pathlib import Path

import pytest
from sqlalchemy.exc import OperationalError

from recruit_api import enums
from recruit_api.services.media_service import LocalVideoStorage
from recruit_api.services.video_response_service import VideoResponseService


class FailingAIAgent:
    def dispatch_video(self, video_response_id: str, blob_url: str, test_type: str) -> bool:
        return False


@pytest.fixture
def video_service(db, clock, ai_agent, tmp_path: Path) -> VideoResponseService:
    return VideoResponseService(
        db, clock, LocalVideoStorage(tmp_path), ai_agent, max_size_bytes=1024
    )


@pytest.fixture
def math_test(test_service, make_candidate, make_group):
    candidate = make_candidate()
    make_group(enums.TestType.MATH, 2)
    test = test_service.create_test(candidate.id, enums.TestType.MATH).value
    test_service.start_test(test.id, candidate.id)
    return candidate.id, test


def test_upload_stores_file_and_dispatches(video_service, math_test, ai_agent, tmp_path: Path, clock) -> None:
    candidate_id, test = math_test
    snapshot_id = test.question_snapshots[0].id

    result = video_service.upload_video(
        test.id,
        candidate_id,
        1,
        "resposta.MP4",
        io.BytesIO(b"video-bytes"),
        question_snapshot_id=snapshot_id,
        response_type="question_answer",
    )

    assert result.success
    video = result.value
    assert video.blob_url == f"{test.id}/q1.mp4"
    assert (tmp_path / test.id / "q1.mp4").read_bytes() == b"video-bytes"
    assert video.file_size_bytes == 11
    assert video.question_snapshot_id == snapshot_id
    assert video.response_type == "question_answer"
    assert video.uploaded_at == clock.now()
    assert ai_agent.dispatched == [(video.id, f"{test.id}/q1.mp4", "math")]


def test_upload_counts_towards_status(video_service, test_service, math_test) -> None:
    candidate_id, test = math_test
    for number in (1, 2):
        video_service.upload_video(test.id, candidate_id, number, "a.webm", io.BytesIO(b"x"))

    status = test_service.get_test_status(test.id, candidate_id).value

    assert status.videos_uploaded == 2
    assert status.can_submit
    listed = video_service.list_videos(test.id, candidate_id).value
    assert [v.question_number for v in listed] == [1, 2]


def test_upload_survives_failed_dispatch(db, clock, math_test, tmp_path: Path) -> None:
    candidate_id, test = math_test
    service = VideoResponseService(db, clock, LocalVideoStorage(tmp_path), FailingAIAgent())

    result = service.upload_video(test.id, candidate_id, 1, "a.mp4", io.BytesIO(b"x"))

    assert result.success
    assert result.value.ai_score is None


@pytest.mark.parametrize(
    ("filename", "payload"),
    [("notes.txt", b"x"), ("noextension", b"x"), ("a.mp4", b""), ("a.mp4", b"x" * 2048)],
)
def test_upload_rejects_invalid_files(video_service, math_test, ai_agent, filename, payload) -> None:
    candidate_id, test = math_test

    result = video_service.upload_video(test.id, candidate_id, 1, filename, io.BytesIO(payload))

    assert result.code == "INVALID_VIDEO_FILE"
    assert ai_agent.dispatched == []


def test_upload_requires_in_progress_test(video_service, test_service, make_candidate, make_group) -> None:
    candidate = make_candidate()
    make_group(enums.TestType.INTERVIEW, 5)
    test = test_service.create_test(candidate.id, enums.TestType.INTERVIEW).value

    result = video_service.upload_video(test.id, candidate.id, 1, "a.mp4", io.BytesIO(b"x"))

    assert result.code == "INVALID_STATE_TRANSITION"


def test_upload_rejects_foreign_snapshot_and_candidate(video_service, math_test, make_candidate) -> None:
    candidate_id, test = math_test
    other = make_candidate(cpf="11144477735", email="o@y.com")

    foreign = video_service.upload_video(
        test.id, candidate_id, 1, "a.mp4", io.BytesIO(b"x"), question_snapshot_id="nope"
    )
    forbidden = video_service.upload_video(test.id, other.id, 1, "a.mp4", io.BytesIO(b"x"))
    missing = video_service.upload_video("missing", candidate_id, 1, "a.mp4", io.BytesIO(b"x"))

    assert foreign.code == "INVALID_QUESTION_SNAPSHOT"
    assert forbidden.code == "FORBIDDEN"
    assert missing.code == "TEST_NOT_FOUND"


def test_get_video_checks_test_and_owner(video_service, math_test, make_candidate) -> None:
    candidate_id, test = math_test
    video = video_service.upload_video(test.id, candidate_id, 1, "a.mp4", io.BytesIO(b"x")).value
    other = make_candidate(cpf="11144477735", email="o@y.com")

    assert video_service.get_video(test.id, video.id, candidate_id).value.id == video.id
    assert video_service.get_video(test.id, "missing", candidate_id).code == "VIDEO_NOT_FOUND"
    assert video_service.get_video(test.id, video.id, other.id).code == "FORBIDDEN"


def test_delete_video_removes_row_and_file(video_service, math_test, tmp_path: Path) -> None:
    candidate_id, test = math_test
    video = video_service.upload_video(test.id, candidate_id, 1, "a.mp4", io.BytesIO(b"x")).value
    video_id = video.id
    stored = tmp_path / test.id / "q1.mp4"
    assert stored.exists()

    result = video_service.delete_video(test.id, video_id, candidate_id)

    assert result.success
    assert not stored.exists()
    assert video_service.list_videos(test.id, candidate_id).value == []
    assert video_service.delete_video(test.id, video_id, candidate_id).code == "VIDEO_NOT_FOUND"


def test_delete_video_refused_after_submission(video_service, test_service, math_test) -> None:
    candidate_id, test = math_test
    video = video_service.upload_video(test.id, candidate_id, 1, "a.mp4", io.BytesIO(b"x")).value
    test_service.submit_test(test.id, candidate_id, [])

    result = video_service.delete_video(test.id, video.id, candidate_id)

    assert result.code == "INVALID_STATE_TRANSITION"
    assert result.error.details == {"status": "completed"}


def test_failed_commit_removes_stored_file(
    video_service, math_test, db, tmp_path: Path, ai_agent, monkeypatch
) -> None:
    candidate_id, test = math_test
    test_id = test.id

    def _broken_commit() -> None:
        raise OperationalError("INSERT", {}, Exception("disk full"))

    monkeypatch.setattr(db, "commit", _broken_commit)

    with pytest.raises(OperationalError):
        video_service.upload_video(test_id, candidate_id, 1, "a.mp4", io.BytesIO(b"x"))

    assert not (tmp_path / test_id / "q1.mp4").exists()
    assert ai_agent.dispatched == []
