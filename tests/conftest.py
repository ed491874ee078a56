from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

import recruit_api.models.db  # noqa: F401
from recruit_api import config
from recruit_api.app import app
from recruit_api.config import AuthSettings, TestSettings
from recruit_api.database import Base, get_db
from recruit_api.dependencies.services import (
    get_ai_agent,
    get_auth_config,
    get_clock,
    get_email_sender,
    get_video_storage,
)
from recruit_api.enums import TestType
from recruit_api.models.db import (
    Candidate,
    PortugueseReadingText,
    QuestionAnswer,
    QuestionTemplate,
    TestQuestionGroup,
)
from recruit_api.services.candidate_auth_service import CandidateAuthenticationService
from recruit_api.services.jwt_service import JwtService
from recruit_api.services.media_service import LocalVideoStorage
from recruit_api.services.portuguese_content_service import PortugueseContentAdminService
from recruit_api.services.question_group_service import QuestionGroupAdminService
from recruit_api.services.question_template_service import QuestionTemplateAdminService
from recruit_api.services.test_service import TestService
from recruit_api.utils.json_utils import json_dump

VALID_CPF = "52998224725"
OTHER_CPF = "11144477735"
ADMIN_KEY = "admin-secret"
FAST_AUTH = AuthSettings(code_hash_rounds=4)


class FixedClock:
    """Clock that only moves when told to; starts at the real current time."""

    def __init__(self, start: datetime | None = None) -> None:
        self.current = start or datetime.now(timezone.utc).replace(microsecond=0)

    def now(self) -> datetime:
        return self.current

    def advance(self, **kwargs: float) -> None:
        self.current += timedelta(**kwargs)


class RecordingEmailSender:
    def __init__(self, result: bool = True) -> None:
        self.result = result
        self.sent: list[dict[str, object]] = []

    def send(self, to: str, subject: str, html_body: str) -> bool:
        self.sent.append({"to": to, "subject": subject, "body": html_body})
        return self.result

    def send_auth_token(self, to: str, name: str, code: str, expiration_minutes: int) -> bool:
        self.sent.append({"to": to, "name": name, "code": code, "minutes": expiration_minutes})
        return self.result

    @property
    def last_code(self) -> str:
        return str(self.sent[-1]["code"])


class RecordingAIAgent:
    def __init__(self) -> None:
        self.dispatched: list[tuple[str, str, str]] = []

    def dispatch_video(self, video_response_id: str, blob_url: str, test_type: str) -> bool:
        self.dispatched.append((video_response_id, blob_url, test_type))
        return True


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(session_factory) -> Session:
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def email_sender() -> RecordingEmailSender:
    return RecordingEmailSender()


@pytest.fixture
def ai_agent() -> RecordingAIAgent:
    return RecordingAIAgent()


@pytest.fixture
def auth_service(db, email_sender, clock) -> CandidateAuthenticationService:
    return CandidateAuthenticationService(db, email_sender, JwtService(), clock, FAST_AUTH)


@pytest.fixture
def test_service(db, clock) -> TestService:
    return TestService(db, clock, TestSettings())


@pytest.fixture
def group_service(db, clock) -> QuestionGroupAdminService:
    return QuestionGroupAdminService(db, clock, TestSettings().required_question_counts)


@pytest.fixture
def template_service(db, clock) -> QuestionTemplateAdminService:
    return QuestionTemplateAdminService(db, clock, TestSettings().bank_question_counts.keys())


@pytest.fixture
def content_service(db, clock) -> PortugueseContentAdminService:
    return PortugueseContentAdminService(db, clock)


@pytest.fixture
def client(session_factory, clock, email_sender, ai_agent, tmp_path: Path, monkeypatch):
    def _get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    monkeypatch.setattr(config, "ADMIN_API_KEY", ADMIN_KEY)
    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_clock] = lambda: clock
    app.dependency_overrides[get_auth_config] = lambda: FAST_AUTH
    app.dependency_overrides[get_email_sender] = lambda: email_sender
    app.dependency_overrides[get_ai_agent] = lambda: ai_agent
    app.dependency_overrides[get_video_storage] = lambda: LocalVideoStorage(tmp_path / "videos")
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_candidate(db):
    def _make(
        cpf: str = VALID_CPF,
        email: str = "x@y.com",
        name: str = "Maria Silva",
        has_accepted_lgpd: bool = False,
    ) -> Candidate:
        candidate = Candidate(
            name=name, email=email, cpf=cpf, has_accepted_lgpd=has_accepted_lgpd
        )
        db.add(candidate)
        db.commit()
        return candidate

    return _make


@pytest.fixture
def make_group(db):
    def _make(
        test_type: TestType,
        count: int,
        is_active: bool = True,
        name: str = "Grupo",
    ) -> TestQuestionGroup:
        group = TestQuestionGroup(
            test_type=test_type.value, group_name=name, is_active=is_active
        )
        for order in range(1, count + 1):
            group.questions.append(
                QuestionTemplate(
                    test_type=test_type.value,
                    group_order=order,
                    question_text=f"{name} pergunta {order}",
                    point_value=1.0,
                )
            )
        db.add(group)
        db.commit()
        return group

    return _make


@pytest.fixture
def make_bank_question(db):
    def _make(
        test_type: TestType,
        correct: list[str] | None,
        order: int = 1,
        point_value: float = 1.0,
        allow_multiple: bool = False,
        max_answers: int | None = None,
        difficulty: str | None = "medium",
    ) -> QuestionTemplate:
        template = QuestionTemplate(
            test_type=test_type.value,
            group_order=order,
            question_text=f"Pergunta {order}",
            options_json=json_dump([{"id": o, "text": o.upper()} for o in ("a", "b", "c", "d")]),
            allow_multiple_answers=allow_multiple,
            max_answers_allowed=max_answers,
            point_value=point_value,
            difficulty_level=difficulty,
        )
        if correct is not None:
            template.answer = QuestionAnswer(correct_answer_json=json_dump(correct))
        db.add(template)
        db.commit()
        return template

    return _make


@pytest.fixture
def make_reading_text(db):
    def _make(difficulty: str = "medium") -> PortugueseReadingText:
        text = PortugueseReadingText(
            title="O Alienista", content="Texto...", author_name="Machado de Assis",
            difficulty_level=difficulty,
        )
        db.add(text)
        db.commit()
        return text

    return _make
