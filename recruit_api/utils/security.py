"""Login code hashing and random secrets."""
import secrets

import bcrypt


def generate_numeric_code(length: int = 6) -> str:
    """Uniformly random zero-padded numeric code, e.g. ``"004217"``."""
    if length <= 0:
        raise ValueError("length must be positive")
    return str(secrets.randbelow(10**length)).zfill(length)


def generate_refresh_token() -> str:
    """Opaque refresh token (64 random bytes, URL-safe)."""
    return secrets.token_urlsafe(64)


def hash_code(code: str, rounds: int = 10) -> str:
    """Hash a login code using bcrypt."""
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(code.encode("utf-8"), salt).decode("utf-8")


def verify_code(plain_code: str, hashed_code: str) -> bool:
    """Verify a login code against its hash."""
    return bcrypt.checkpw(plain_code.encode("utf-8"), hashed_code.encode("utf-8"))
