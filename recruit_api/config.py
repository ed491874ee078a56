"""Application configuration and constants."""
import os
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Mapping

from recruit_api.enums import TestType


def _parse_int_env(name: str, default: int) -> int:
    """Parse integer from environment variable."""
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


# Database
DB_DIR = Path(os.environ.get("DB_DIR", Path.cwd() / "data"))
DB_DIR.mkdir(parents=True, exist_ok=True)
DATABASE_URL = os.environ.get(
    "DATABASE_URL", f"sqlite:///{DB_DIR / 'recruit.db'}"
)

# Logging
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

# JWT
SECRET_KEY = os.environ.get(
    "SECRET_KEY",
    "CHANGE_ME_IN_PRODUCTION_USE_openssl_rand_hex_32"
)
ALGORITHM = "HS256"
JWT_ISSUER = os.environ.get("JWT_ISSUER", "recruit-api")
JWT_AUDIENCE = os.environ.get("JWT_AUDIENCE", "recruit-api.candidate")
ACCESS_TOKEN_EXPIRE_MINUTES = _parse_int_env("ACCESS_TOKEN_EXPIRE_MINUTES", 60)

# Admin API
ADMIN_API_KEY = os.environ.get("ADMIN_API_KEY") or None

# E-mail (SendGrid)
SENDGRID_API_KEY = os.environ.get("SENDGRID_API_KEY") or None
SENDGRID_API_URL = os.environ.get(
    "SENDGRID_API_URL", "https://api.sendgrid.com/v3/mail/send"
)
EMAIL_FROM_ADDRESS = os.environ.get("EMAIL_FROM_ADDRESS", "no-reply@recruit.local")
EMAIL_FROM_NAME = os.environ.get("EMAIL_FROM_NAME", "Recrutamento")
EMAIL_TIMEOUT_SECONDS = _parse_int_env("EMAIL_TIMEOUT_SECONDS", 10)

# External AI agent
AI_AGENT_URL = os.environ.get("AI_AGENT_URL") or None
AI_AGENT_API_KEY = os.environ.get("AI_AGENT_API_KEY") or None
AI_AGENT_TIMEOUT_SECONDS = _parse_int_env("AI_AGENT_TIMEOUT_SECONDS", 15)

# Videos
VIDEOS_DIR = Path(os.environ.get("VIDEOS_DIR", Path.cwd() / "data" / "videos"))
VIDEOS_DIR.mkdir(parents=True, exist_ok=True)
VIDEO_MAX_SIZE_BYTES = _parse_int_env("VIDEO_MAX_SIZE_BYTES", 200 * 1024 * 1024)
VIDEO_ALLOWED_EXTENSIONS = {".mp4", ".webm", ".mov", ".mkv"}

# Auth token retention
AUTH_TOKEN_RETENTION_DAYS = _parse_int_env("AUTH_TOKEN_RETENTION_DAYS", 30)


@dataclass(frozen=True)
class AuthSettings:
    """Candidate login code and lockout policy."""

    max_failed_attempts: int = 10
    lockout_minutes: int = 10
    token_expiration_minutes: int = 15
    token_length: int = 6
    code_hash_rounds: int = 10


@dataclass(frozen=True)
class TestSettings:
    """
    Question sourcing and timing per test type.

    required_question_counts lists the group-sourced test types; every other
    type draws from the template bank using bank_question_counts.
    """

    required_question_counts: Mapping[TestType, int] = field(
        default_factory=lambda: MappingProxyType({
            TestType.PORTUGUESE: 3,
            TestType.MATH: 2,
            TestType.INTERVIEW: 5,
        })
    )
    # None draws every active template in order
    bank_question_counts: Mapping[TestType, int | None] = field(
        default_factory=lambda: MappingProxyType({
            TestType.PSYCHOLOGY: None,
            TestType.VISUAL_RETENTION: 15,
        })
    )
    time_limits_seconds: Mapping[TestType, int | None] = field(
        default_factory=lambda: MappingProxyType({
            TestType.PORTUGUESE: None,
            TestType.MATH: None,
            TestType.INTERVIEW: None,
            TestType.PSYCHOLOGY: 3600,
            TestType.VISUAL_RETENTION: 1200,
        })
    )

    def __post_init__(self) -> None:
        # Freeze whatever mapping the caller handed in.
        for name in ("required_question_counts", "bank_question_counts", "time_limits_seconds"):
            object.__setattr__(self, name, MappingProxyType(dict(getattr(self, name))))

    def is_group_sourced(self, test_type: TestType) -> bool:
        return test_type in self.required_question_counts

    def time_limit_for(self, test_type: TestType) -> int | None:
        return self.time_limits_seconds.get(test_type)


def get_auth_settings() -> AuthSettings:
    """Build auth settings from environment."""
    return AuthSettings(
        max_failed_attempts=_parse_int_env("AUTH_MAX_FAILED_ATTEMPTS", 10),
        lockout_minutes=_parse_int_env("AUTH_LOCKOUT_MINUTES", 10),
        token_expiration_minutes=_parse_int_env("AUTH_TOKEN_EXPIRATION_MINUTES", 15),
        token_length=_parse_int_env("AUTH_TOKEN_LENGTH", 6),
        code_hash_rounds=_parse_int_env("AUTH_CODE_HASH_ROUNDS", 10),
    )


def get_test_settings() -> TestSettings:
    """Build test settings, with per-type time limits overridable from environment."""
    defaults = TestSettings()
    time_limits: dict[TestType, int | None] = {}
    for test_type, default in defaults.time_limits_seconds.items():
        raw = _parse_int_env(f"TEST_TIME_LIMIT_{test_type.name}", default or 0)
        time_limits[test_type] = raw if raw > 0 else None
    return TestSettings(
        required_question_counts=defaults.required_question_counts,
        bank_question_counts=defaults.bank_question_counts,
        time_limits_seconds=time_limits,
    )
