"""Video storage and hand-off to the external AI agent."""
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import BinaryIO, Protocol

import requests

from recruit_api.config import (
    AI_AGENT_API_KEY,
    AI_AGENT_TIMEOUT_SECONDS,
    AI_AGENT_URL,
    VIDEOS_DIR,
)
from recruit_api.utils.file_utils import safe_child_path, save_stream

log = logging.getLogger(__name__)


class VideoStorage(Protocol):
    def save(self, test_id: str, filename: str | None, stream: BinaryIO) -> str: ...

    def delete(self, blob_url: str) -> None: ...


class AIAgentClient(Protocol):
    def dispatch_video(self, video_response_id: str, blob_url: str, test_type: str) -> bool: ...


class LocalVideoStorage:
    """Stores uploads on disk, one directory per test."""

    def __init__(self, base_dir: Path = VIDEOS_DIR) -> None:
        self.base_dir = base_dir

    def save(self, test_id: str, filename: str | None, stream: BinaryIO) -> str:
        """Write the stream and return its path relative to the storage root."""
        target_dir = safe_child_path(self.base_dir, test_id)
        saved = save_stream(stream, target_dir, filename)
        log.info("Stored video %s for test %s", saved.name, test_id)
        return saved.relative_to(self.base_dir.resolve()).as_posix()

    def delete(self, blob_url: str) -> None:
        """Remove a stored video; a missing file is not an error."""
        safe_child_path(self.base_dir, blob_url).unlink(missing_ok=True)
        log.info("Deleted stored video %s", blob_url)


class ExternalAIAgentClient:
    """Posts uploaded videos to the analysis agent. Results come back out of band."""

    def __init__(
        self,
        url: str | None = AI_AGENT_URL,
        api_key: str | None = AI_AGENT_API_KEY,
        timeout: int = AI_AGENT_TIMEOUT_SECONDS,
    ) -> None:
        self.url = url
        self.api_key = api_key
        self.timeout = timeout

    def dispatch_video(self, video_response_id: str, blob_url: str, test_type: str) -> bool:
        if not self.url:
            log.info("AI agent URL is missing; skipping analysis of video %s", video_response_id)
            return False

        headers = {}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        payload = {
            "videoResponseId": video_response_id,
            "blobUrl": blob_url,
            "testType": test_type,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        try:
            response = requests.post(
                self.url, json=payload, headers=headers, timeout=self.timeout
            )
            response.raise_for_status()
        except requests.RequestException as exc:
            log.warning("Failed to send video %s to AI agent: %s", video_response_id, exc)
            return False

        log.info("Sent video %s to AI agent", video_response_id)
        return True
