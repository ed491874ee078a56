"""JWT issuing and verification for candidate sessions."""
import uuid
from datetime import timedelta

from jose import JWTError, jwt

from recruit_api.config import (
    ACCESS_TOKEN_EXPIRE_MINUTES,
    ALGORITHM,
    JWT_AUDIENCE,
    JWT_ISSUER,
    SECRET_KEY,
)
from recruit_api.utils.security import generate_refresh_token
from recruit_api.utils.time_utils import Clock, SystemClock

CANDIDATE_ROLE = "candidate"


class JwtService:
    """Signs HS256 access tokens bound to an issuer and audience."""

    def __init__(
        self,
        secret_key: str = SECRET_KEY,
        algorithm: str = ALGORITHM,
        issuer: str = JWT_ISSUER,
        audience: str = JWT_AUDIENCE,
        expire_minutes: int = ACCESS_TOKEN_EXPIRE_MINUTES,
        clock: Clock | None = None,
    ) -> None:
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.issuer = issuer
        self.audience = audience
        self.expire_minutes = expire_minutes
        self.clock = clock or SystemClock()

    def issue_access_token(
        self, candidate_id: str, cpf: str, email: str, lgpd_accepted: bool
    ) -> str:
        now = self.clock.now()
        claims = {
            "sub": candidate_id,
            "cpf": cpf,
            "email": email,
            "role": CANDIDATE_ROLE,
            "lgpd_accepted": lgpd_accepted,
            "iss": self.issuer,
            "aud": self.audience,
            "iat": now,
            "exp": now + timedelta(minutes=self.expire_minutes),
            "jti": str(uuid.uuid4()),
        }
        return jwt.encode(claims, self.secret_key, algorithm=self.algorithm)

    def issue_refresh_token(self) -> str:
        return generate_refresh_token()

    def validate(self, token: str) -> dict | None:
        """Verify and decode a JWT token.

        Returns:
            Decoded claims or None if the signature, issuer, audience or
            expiry check fails.
        """
        try:
            return jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                audience=self.audience,
                issuer=self.issuer,
            )
        except JWTError:
            return None
