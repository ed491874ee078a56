import io
from pathlib import Path

import pytest
import requests

from recruit_api.services import email_service, media_service


class FakeResponse:
    def __init__(self, status_code: int = 202) -> None:
        self.status_code = status_code

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"HTTP {self.status_code}")


def _recording_post(calls: list, response: FakeResponse):
    def fake_post(url, json=None, headers=None, timeout=None):
        calls.append({"url": url, "json": json, "headers": headers, "timeout": timeout})
        return response

    return fake_post


def test_sendgrid_posts_auth_token(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list = []
    monkeypatch.setattr(email_service.requests, "post", _recording_post(calls, FakeResponse()))
    sender = email_service.SendGridEmailSender(
        api_key="sg-key", api_url="https://mail.test/send", from_address="rh@empresa.com"
    )

    assert sender.send_auth_token("maria@example.com", "Maria <b>", "004217", 15)

    call = calls[0]
    assert call["url"] == "https://mail.test/send"
    assert call["headers"] == {"Authorization": "Bearer sg-key"}
    assert call["timeout"] == sender.timeout
    payload = call["json"]
    assert payload["personalizations"] == [{"to": [{"email": "maria@example.com"}]}]
    assert payload["from"]["email"] == "rh@empresa.com"
    body = payload["content"][0]["value"]
    assert "004217" in body
    assert "15 minutos" in body
    assert "Maria &lt;b&gt;" in body


def test_sendgrid_failure_returns_false(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list = []
    monkeypatch.setattr(email_service.requests, "post", _recording_post(calls, FakeResponse(500)))
    sender = email_service.SendGridEmailSender(api_key="sg-key")

    assert sender.send("x@y.com", "Assunto", "<p>oi</p>") is False
    assert len(calls) == 1


def test_sendgrid_network_error_returns_false(monkeypatch: pytest.MonkeyPatch) -> None:
    def broken_post(*args, **kwargs):
        raise requests.ConnectionError("down")

    monkeypatch.setattr(email_service.requests, "post", broken_post)
    sender = email_service.SendGridEmailSender(api_key="sg-key")

    assert sender.send("x@y.com", "Assunto", "<p>oi</p>") is False


def test_sendgrid_without_key_skips_request(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list = []
    monkeypatch.setattr(email_service.requests, "post", _recording_post(calls, FakeResponse()))
    sender = email_service.SendGridEmailSender(api_key=None)

    assert sender.send("x@y.com", "Assunto", "<p>oi</p>") is True
    assert calls == []


def test_ai_agent_posts_video_reference(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list = []
    monkeypatch.setattr(media_service.requests, "post", _recording_post(calls, FakeResponse(200)))
    client = media_service.ExternalAIAgentClient(url="https://agent.test/analyze", api_key="k", timeout=5)

    assert client.dispatch_video("vid-1", "test-1/q1.mp4", "interview")

    call = calls[0]
    assert call["headers"] == {"Authorization": "Bearer k"}
    assert call["timeout"] == 5
    assert call["json"]["videoResponseId"] == "vid-1"
    assert call["json"]["blobUrl"] == "test-1/q1.mp4"
    assert call["json"]["testType"] == "interview"
    assert "timestamp" in call["json"]


def test_ai_agent_failure_returns_false(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list = []
    monkeypatch.setattr(media_service.requests, "post", _recording_post(calls, FakeResponse(503)))
    client = media_service.ExternalAIAgentClient(url="https://agent.test/analyze")

    assert client.dispatch_video("vid-1", "test-1/q1.mp4", "math") is False


def test_ai_agent_without_url_skips_request(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list = []
    monkeypatch.setattr(media_service.requests, "post", _recording_post(calls, FakeResponse()))
    client = media_service.ExternalAIAgentClient(url=None)

    assert client.dispatch_video("vid-1", "test-1/q1.mp4", "math") is False
    assert calls == []


def test_local_storage_blocks_traversal(tmp_path: Path) -> None:
    storage = media_service.LocalVideoStorage(tmp_path)
    with pytest.raises(ValueError):
        storage.save("../outside", "q1.mp4", io.BytesIO(b"x"))
