"""
Candidate login by CPF, e-mail and a one-time numeric code.

A CPF is locked out for ``lockout_minutes`` once the active code collects
``max_failed_attempts`` mismatches. The counter and lockout timestamp live on
the code rows, so a lockout survives issuing a new code.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session as DbSession

from recruit_api.config import AuthSettings
from recruit_api.repositories import auth_token_repository as tokens
from recruit_api.repositories.candidate_repository import get_candidate_by_cpf
from recruit_api.services.email_service import EmailSender
from recruit_api.services.jwt_service import JwtService
from recruit_api.utils.cpf import is_valid_cpf, mask_email, normalize_cpf
from recruit_api.utils.errors import ErrorKind, Result
from recruit_api.utils.security import generate_numeric_code, hash_code, verify_code
from recruit_api.utils.time_utils import Clock, ceil_minutes

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TokenRequestOutcome:
    message: str
    expiration_minutes: int


@dataclass(frozen=True)
class TokenValidationOutcome:
    access_token: str
    refresh_token: str
    candidate_id: str
    requires_lgpd_consent: bool
    message: str


@dataclass(frozen=True)
class LockoutStatus:
    is_locked_out: bool
    locked_until: datetime | None = None
    remaining_minutes: int = 0


def _locked_result(locked_until: datetime, now: datetime) -> Result:
    minutes = ceil_minutes(locked_until - now)
    return Result.fail(
        "ACCOUNT_LOCKED",
        f"Conta bloqueada por excesso de tentativas. Tente novamente em {minutes} minuto(s).",
        ErrorKind.AUTH,
        {"locked_until": locked_until.isoformat(), "remaining_minutes": minutes},
    )


class CandidateAuthenticationService:
    def __init__(
        self,
        db: DbSession,
        email_sender: EmailSender,
        jwt_service: JwtService,
        clock: Clock,
        settings: AuthSettings,
    ) -> None:
        self.db = db
        self.email_sender = email_sender
        self.jwt_service = jwt_service
        self.clock = clock
        self.settings = settings

    def _active_lockout(self, cpf: str, now: datetime) -> datetime | None:
        """Return the pending lockout of a CPF, clearing it once it has run out."""
        locked_until = tokens.get_lockout_until(self.db, cpf)
        if locked_until is None:
            return None
        if locked_until > now:
            return locked_until
        tokens.clear_lockout(self.db, cpf)
        self.db.commit()
        logger.info("Lockout expired for CPF ***%s; counters reset", cpf[-4:])
        return None

    def request_token(
        self,
        cpf: str,
        email: str,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> Result[TokenRequestOutcome]:
        cpf = normalize_cpf(cpf)
        if not is_valid_cpf(cpf):
            return Result.fail("INVALID_CPF", "CPF inválido", ErrorKind.VALIDATION)

        now = self.clock.now()
        locked_until = self._active_lockout(cpf, now)
        if locked_until is not None:
            return _locked_result(locked_until, now)

        candidate = get_candidate_by_cpf(self.db, cpf)
        if candidate is None:
            return Result.fail(
                "CANDIDATE_NOT_FOUND", "Candidato não encontrado", ErrorKind.NOT_FOUND
            )
        if candidate.email.strip().casefold() != email.strip().casefold():
            logger.warning("E-mail mismatch on token request for CPF ***%s", cpf[-4:])
            return Result.fail(
                "EMAIL_MISMATCH", "E-mail não corresponde ao cadastro", ErrorKind.AUTH
            )

        code = generate_numeric_code(self.settings.token_length)
        expires_at = now + timedelta(minutes=self.settings.token_expiration_minutes)
        try:
            invalidated = tokens.invalidate_active_tokens(self.db, cpf)
            tokens.add_token(
                self.db,
                cpf=cpf,
                email=candidate.email,
                code_hash=hash_code(code, self.settings.code_hash_rounds),
                created_at=now,
                expires_at=expires_at,
                ip_address=ip_address,
                user_agent=user_agent,
            )
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            logger.warning("Concurrent token request for CPF ***%s", cpf[-4:])
            return Result.fail(
                "TOKEN_REQUEST_CONFLICT",
                "Outra solicitação de código está em andamento. Tente novamente.",
                ErrorKind.CONFLICT,
            )

        logger.info(
            "Issued login code for candidate %s (%d previous code(s) invalidated)",
            candidate.id,
            invalidated,
        )

        try:
            sent = self.email_sender.send_auth_token(
                candidate.email, candidate.name, code, self.settings.token_expiration_minutes
            )
        except Exception:
            logger.exception("E-mail sender raised for candidate %s", candidate.id)
            sent = False
        if not sent:
            logger.error("Failed to deliver login code to candidate %s", candidate.id)

        return Result.ok(
            TokenRequestOutcome(
                message=f"Código de verificação enviado para {mask_email(candidate.email)}",
                expiration_minutes=self.settings.token_expiration_minutes,
            )
        )

    def validate_token(self, cpf: str, code: str) -> Result[TokenValidationOutcome]:
        cpf = normalize_cpf(cpf)
        now = self.clock.now()

        locked_until = self._active_lockout(cpf, now)
        if locked_until is not None:
            return _locked_result(locked_until, now)

        token = tokens.get_active_token(self.db, cpf)
        if token is None:
            return Result.fail(
                "TOKEN_NOT_FOUND",
                "Nenhum código ativo. Solicite um novo código.",
                ErrorKind.NOT_FOUND,
            )
        if token.expires_at <= now:
            return Result.fail(
                "TOKEN_EXPIRED", "Código expirado. Solicite um novo código.", ErrorKind.AUTH
            )

        if not verify_code(code.strip(), token.token_hash):
            attempts = tokens.increment_failed_attempts(self.db, token.id)
            if attempts >= self.settings.max_failed_attempts:
                locked_until = now + timedelta(minutes=self.settings.lockout_minutes)
                tokens.set_lockout(self.db, token.id, locked_until)
                self.db.commit()
                logger.warning(
                    "CPF ***%s locked until %s after %d failed attempts",
                    cpf[-4:],
                    locked_until.isoformat(),
                    attempts,
                )
                return _locked_result(locked_until, now)
            self.db.commit()
            remaining = self.settings.max_failed_attempts - attempts
            return Result.fail(
                "INVALID_TOKEN",
                f"Código inválido. Tentativas restantes: {remaining}",
                ErrorKind.AUTH,
                {"attempts_remaining": remaining},
            )

        if not tokens.consume_token(self.db, token.id, now):
            self.db.rollback()
            return Result.fail(
                "TOKEN_NOT_FOUND",
                "Nenhum código ativo. Solicite um novo código.",
                ErrorKind.NOT_FOUND,
            )
        tokens.clear_lockout(self.db, cpf)
        self.db.commit()

        candidate = get_candidate_by_cpf(self.db, cpf)
        if candidate is None:
            return Result.fail(
                "CANDIDATE_NOT_FOUND", "Candidato não encontrado", ErrorKind.NOT_FOUND
            )

        access_token = self.jwt_service.issue_access_token(
            candidate_id=candidate.id,
            cpf=cpf,
            email=candidate.email,
            lgpd_accepted=candidate.has_accepted_lgpd,
        )
        logger.info("Candidate %s authenticated", candidate.id)
        return Result.ok(
            TokenValidationOutcome(
                access_token=access_token,
                refresh_token=self.jwt_service.issue_refresh_token(),
                candidate_id=candidate.id,
                requires_lgpd_consent=not candidate.has_accepted_lgpd,
                message="Autenticação realizada com sucesso",
            )
        )

    def check_lockout_status(self, cpf: str) -> LockoutStatus:
        """Read-only view of the lockout; never clears anything."""
        cpf = normalize_cpf(cpf)
        now = self.clock.now()
        locked_until = tokens.get_lockout_until(self.db, cpf)
        if locked_until is None or locked_until <= now:
            return LockoutStatus(is_locked_out=False)
        return LockoutStatus(
            is_locked_out=True,
            locked_until=locked_until,
            remaining_minutes=ceil_minutes(locked_until - now),
        )
