from datetime import timedelta

from jose import jwt
from sqlalchemy import func, select

from recruit_api.config import JWT_AUDIENCE, SECRET_KEY
from recruit_api.models.db.candidate import CandidateAuthToken

VALID_CPF = "52998224725"
OTHER_CPF = "11144477735"


def _tokens(db) -> list[CandidateAuthToken]:
    db.expire_all()
    return list(
        db.execute(select(CandidateAuthToken).order_by(CandidateAuthToken.created_at)).scalars()
    )


def _wrong(code: str) -> str:
    return "999999" if code != "999999" else "000000"


def test_request_token_sends_code_and_masks_email(auth_service, make_candidate, email_sender) -> None:
    make_candidate(email="maria@example.com")

    result = auth_service.request_token("529.982.247-25", "Maria@Example.com ")

    assert result.success
    assert result.value.expiration_minutes == 15
    assert "mar***@example.com" in result.value.message
    assert len(email_sender.sent) == 1
    assert email_sender.sent[0]["to"] == "maria@example.com"
    assert len(email_sender.last_code) == 6


def test_request_token_rejects_invalid_cpf(auth_service, email_sender) -> None:
    result = auth_service.request_token("123.456.789-00", "x@y.com")
    assert result.code == "INVALID_CPF"
    assert email_sender.sent == []


def test_request_token_unknown_candidate(auth_service) -> None:
    result = auth_service.request_token(OTHER_CPF, "x@y.com")
    assert result.code == "CANDIDATE_NOT_FOUND"


def test_request_token_email_mismatch(auth_service, make_candidate, email_sender) -> None:
    make_candidate()
    result = auth_service.request_token(VALID_CPF, "other@y.com")
    assert result.code == "EMAIL_MISMATCH"
    assert email_sender.sent == []


def test_new_request_invalidates_previous_code(auth_service, make_candidate, clock, db) -> None:
    make_candidate()
    auth_service.request_token(VALID_CPF, "x@y.com")
    clock.advance(seconds=30)
    auth_service.request_token(VALID_CPF, "x@y.com")

    rows = _tokens(db)
    assert len(rows) == 2
    assert [row.is_active for row in rows] == [False, True]
    assert rows[0].is_invalidated


def test_email_failure_still_succeeds(auth_service, make_candidate, email_sender) -> None:
    make_candidate()
    email_sender.result = False
    result = auth_service.request_token(VALID_CPF, "x@y.com")
    assert result.success


def test_validate_token_issues_jwt(auth_service, make_candidate, email_sender, db) -> None:
    candidate = make_candidate()
    candidate_id = candidate.id
    auth_service.request_token(VALID_CPF, "x@y.com")

    result = auth_service.validate_token("529.982.247-25", email_sender.last_code)

    assert result.success
    outcome = result.value
    assert outcome.candidate_id == candidate_id
    assert outcome.requires_lgpd_consent is True
    assert outcome.refresh_token
    claims = jwt.decode(
        outcome.access_token, SECRET_KEY, algorithms=["HS256"], audience=JWT_AUDIENCE
    )
    assert claims["sub"] == candidate_id
    assert claims["role"] == "candidate"
    assert claims["cpf"] == VALID_CPF

    token = _tokens(db)[0]
    assert token.is_used
    assert token.used_at is not None


def test_validate_token_reports_lgpd_consent(auth_service, make_candidate, email_sender) -> None:
    make_candidate(has_accepted_lgpd=True)
    auth_service.request_token(VALID_CPF, "x@y.com")
    result = auth_service.validate_token(VALID_CPF, email_sender.last_code)
    assert result.value.requires_lgpd_consent is False


def test_code_is_single_use(auth_service, make_candidate, email_sender) -> None:
    make_candidate()
    auth_service.request_token(VALID_CPF, "x@y.com")
    code = email_sender.last_code

    assert auth_service.validate_token(VALID_CPF, code).success
    assert auth_service.validate_token(VALID_CPF, code).code == "TOKEN_NOT_FOUND"


def test_old_code_is_rejected_after_new_request(auth_service, make_candidate, email_sender) -> None:
    make_candidate()
    auth_service.request_token(VALID_CPF, "x@y.com")
    first = email_sender.last_code
    auth_service.request_token(VALID_CPF, "x@y.com")
    second = email_sender.last_code

    if first != second:
        assert auth_service.validate_token(VALID_CPF, first).code == "INVALID_TOKEN"
    assert auth_service.validate_token(VALID_CPF, second).success


def test_validate_token_without_request(auth_service, make_candidate) -> None:
    make_candidate()
    assert auth_service.validate_token(VALID_CPF, "123456").code == "TOKEN_NOT_FOUND"


def test_expired_code_is_rejected(auth_service, make_candidate, email_sender, clock, db) -> None:
    make_candidate()
    auth_service.request_token(VALID_CPF, "x@y.com")

    clock.advance(minutes=15)
    result = auth_service.validate_token(VALID_CPF, email_sender.last_code)
    wrong = auth_service.validate_token(VALID_CPF, _wrong(email_sender.last_code))

    assert result.code == "TOKEN_EXPIRED"
    assert wrong.code == "TOKEN_EXPIRED"
    assert _tokens(db)[0].failed_attempts == 0


def test_wrong_code_counts_down_attempts(auth_service, make_candidate, email_sender, db) -> None:
    make_candidate()
    auth_service.request_token(VALID_CPF, "x@y.com")
    wrong = _wrong(email_sender.last_code)

    first = auth_service.validate_token(VALID_CPF, wrong)
    second = auth_service.validate_token(VALID_CPF, wrong)

    assert first.code == "INVALID_TOKEN"
    assert first.error.details == {"attempts_remaining": 9}
    assert second.error.details == {"attempts_remaining": 8}
    assert _tokens(db)[0].failed_attempts == 2


def test_tenth_failure_locks_account(auth_service, make_candidate, email_sender, clock) -> None:
    make_candidate()
    auth_service.request_token(VALID_CPF, "x@y.com")
    code = email_sender.last_code
    wrong = _wrong(code)

    for _ in range(9):
        assert auth_service.validate_token(VALID_CPF, wrong).code == "INVALID_TOKEN"
    locked = auth_service.validate_token(VALID_CPF, wrong)

    assert locked.code == "ACCOUNT_LOCKED"
    assert locked.error.details["remaining_minutes"] == 10

    # Even the right code is refused while locked
    assert auth_service.validate_token(VALID_CPF, code).code == "ACCOUNT_LOCKED"

    status = auth_service.check_lockout_status(VALID_CPF)
    assert status.is_locked_out
    assert status.locked_until == clock.now() + timedelta(minutes=10)
    assert status.remaining_minutes == 10


def test_lockout_survives_new_code_request(auth_service, make_candidate, email_sender) -> None:
    make_candidate()
    auth_service.request_token(VALID_CPF, "x@y.com")
    wrong = _wrong(email_sender.last_code)
    for _ in range(10):
        auth_service.validate_token(VALID_CPF, wrong)

    result = auth_service.request_token(VALID_CPF, "x@y.com")

    assert result.code == "ACCOUNT_LOCKED"
    assert len(email_sender.sent) == 1


def test_lockout_expires_and_resets_counter(auth_service, make_candidate, email_sender, clock, db) -> None:
    make_candidate()
    auth_service.request_token(VALID_CPF, "x@y.com")
    code = email_sender.last_code
    wrong = _wrong(code)
    for _ in range(10):
        auth_service.validate_token(VALID_CPF, wrong)

    clock.advance(minutes=5)
    status = auth_service.check_lockout_status(VALID_CPF)
    assert status.is_locked_out
    assert status.remaining_minutes == 5

    clock.advance(minutes=5)
    assert not auth_service.check_lockout_status(VALID_CPF).is_locked_out

    first_try = auth_service.validate_token(VALID_CPF, wrong)
    assert first_try.code == "INVALID_TOKEN"
    assert first_try.error.details == {"attempts_remaining": 9}

    assert auth_service.validate_token(VALID_CPF, code).success
    token = _tokens(db)[0]
    assert token.failed_attempts == 0
    assert token.locked_until is None


def test_check_lockout_status_is_read_only(auth_service, make_candidate, email_sender, clock, db) -> None:
    make_candidate()
    auth_service.request_token(VALID_CPF, "x@y.com")
    wrong = _wrong(email_sender.last_code)
    for _ in range(10):
        auth_service.validate_token(VALID_CPF, wrong)

    clock.advance(minutes=11)
    assert not auth_service.check_lockout_status(VALID_CPF).is_locked_out

    # Stale lockout stays on the row until a request or validation clears it
    assert _tokens(db)[0].locked_until is not None


def test_unlocked_cpf_status(auth_service) -> None:
    status = auth_service.check_lockout_status(OTHER_CPF)
    assert not status.is_locked_out
    assert status.locked_until is None
    assert status.remaining_minutes == 0


def test_single_active_code_per_cpf(auth_service, make_candidate, db) -> None:
    make_candidate()
    for _ in range(3):
        auth_service.request_token(VALID_CPF, "x@y.com")

    db.expire_all()
    active = db.execute(
        select(func.count())
        .select_from(CandidateAuthToken)
        .where(
            CandidateAuthToken.is_used == False,  # noqa: E712
            CandidateAuthToken.is_invalidated == False,  # noqa: E712
        )
    ).scalar_one()
    assert active == 1
