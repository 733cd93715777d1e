"""Password hashing, session tokens and password-reset token primitives."""

import hashlib
import hmac
import secrets
import string
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any

import bcrypt
import jwt

if TYPE_CHECKING:
    from app.core.config import Settings

BCRYPT_ROUNDS = 10

PASSWORD_MIN_LEN = 6
PASSWORD_MAX_LEN = 128

# 32 random bytes, hex-encoded (64 chars) as sent by email.
RESET_TOKEN_BYTES = 32

PROVISIONAL_PASSWORD_LEN = 8
_PROVISIONAL_ALPHABET = string.ascii_lowercase + string.digits


def hash_password(plain_password: str) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    # bcrypt has a 72-byte limit; truncate to avoid errors (validation already limits length).
    pw_bytes = plain_password.encode("utf-8")[:72]
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash."""
    pw_bytes = plain_password.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


def generate_provisional_password() -> str:
    return "".join(
        secrets.choice(_PROVISIONAL_ALPHABET) for _ in range(PROVISIONAL_PASSWORD_LEN)
    )


def create_session_token(
    settings: "Settings", user_id: str, role: str, province_id: str
) -> str:
    """Create a signed session token carrying the user id, role and province context."""
    now = datetime.now(UTC)
    payload: dict[str, Any] = {
        "sub": user_id,
        "role": role,
        "province": province_id,
        "exp": now + timedelta(minutes=settings.SESSION_EXPIRE_MINUTES),
        "iat": now,
    }
    return jwt.encode(
        payload,
        settings.JWT_SECRET.get_secret_value(),
        algorithm=settings.JWT_ALGORITHM,
    )


def decode_session_token(settings: "Settings", token: str) -> dict[str, Any]:
    """
    Decode and validate a session token; return payload (sub, role, province, exp, iat).
    Raises jwt.PyJWTError on invalid or expired token.
    """
    return jwt.decode(
        token,
        settings.JWT_SECRET.get_secret_value(),
        algorithms=[settings.JWT_ALGORITHM],
    )


def generate_reset_token() -> str:
    """Plain reset token; only ever travels in the recovery email."""
    return secrets.token_hex(RESET_TOKEN_BYTES)


def hash_reset_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def constant_time_equals(left: str, right: str) -> bool:
    return hmac.compare_digest(left.encode("utf-8"), right.encode("utf-8"))
