"""Password recovery tokens: issue (hash at rest, plain value by email only) and single-use redeem.

One live token per email is kept by deleting older tokens before issuing; this is a
delete-then-insert sequence, not a locked transaction.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

from sqlalchemy import delete, select, update
from sqlalchemy.orm import Session

from app.core.errors import BadRequest, EmailDeliveryError, NotFound
from app.core.security import (
    PASSWORD_MIN_LEN,
    constant_time_equals,
    generate_reset_token,
    hash_password,
    hash_reset_token,
)
from app.models import PasswordResetToken
from app.services.accounts import get_user_by_email
from app.services.notifier import NotifierError

if TYPE_CHECKING:
    from app.core.config import Settings
    from app.schemas.auth import ResetPasswordWithTokenRequest
    from app.services.notifier import EmailNotifier

logger = logging.getLogger(__name__)

# Same wording whether or not the account exists.
RECOVERY_GENERIC_MESSAGE = "Se o email existir, receberá instruções de recuperação."
RECOVERY_SENT_MESSAGE = "Instruções de recuperação enviadas por email."
RESET_SUCCESS_MESSAGE = "Password redefinida com sucesso"
INVALID_TOKEN = "Token inválido ou expirado"


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def delete_tokens_for_email(db: Session, email: str) -> int:
    result = db.execute(delete(PasswordResetToken).where(PasswordResetToken.email == email))
    return result.rowcount or 0


def delete_expired_tokens(db: Session, now: datetime | None = None) -> int:
    """Sweep every expired token (any email). Returns the number deleted."""
    now = now or datetime.now(UTC)
    result = db.execute(
        delete(PasswordResetToken).where(PasswordResetToken.expires_at < now)
    )
    db.commit()
    deleted = result.rowcount or 0
    if deleted:
        logger.info("Expired reset tokens deleted: %s", deleted)
    return deleted


def find_live_token(db: Session, token_hash: str, now: datetime | None = None) -> PasswordResetToken | None:
    now = now or datetime.now(UTC)
    stmt = select(PasswordResetToken).where(
        PasswordResetToken.token_hash == token_hash,
        PasswordResetToken.used_at.is_(None),
        PasswordResetToken.expires_at >= now,
    )
    return db.scalars(stmt).first()


def mark_token_used(db: Session, token_id: str, now: datetime | None = None) -> bool:
    """Set used_at only if still unset; False when another redemption got there first."""
    result = db.execute(
        update(PasswordResetToken)
        .where(PasswordResetToken.id == token_id, PasswordResetToken.used_at.is_(None))
        .values(used_at=now or datetime.now(UTC))
    )
    return (result.rowcount or 0) == 1


def issue_token(db: Session, settings: Settings, email: str, now: datetime | None = None) -> str:
    """Persist a fresh token hash for email (replacing older ones) and return the plain token."""
    now = now or datetime.now(UTC)
    token = generate_reset_token()
    delete_tokens_for_email(db, email)
    delete_expired_tokens(db, now)
    db.add(
        PasswordResetToken(
            email=email,
            token_hash=hash_reset_token(token),
            expires_at=now + timedelta(minutes=settings.PASSWORD_RESET_TOKEN_TTL_MINUTES),
            created_at=now,
        )
    )
    db.commit()
    return token


async def request_password_reset(
    db: Session,
    settings: Settings,
    notifier: EmailNotifier,
    email: str,
    province_id: str | None = None,
) -> str:
    """
    Start recovery for email. Returns the user-facing message.

    Unknown emails and province mismatches get the generic message and create no token.
    A notifier failure surfaces as EmailDeliveryError.
    """
    user = get_user_by_email(db, email)
    if user is None:
        return RECOVERY_GENERIC_MESSAGE
    if province_id and user.province_id != province_id:
        return RECOVERY_GENERIC_MESSAGE

    token = issue_token(db, settings, email)
    try:
        await notifier.send_password_recovery(email, user.name, token)
    except NotifierError as e:
        logger.error("Password recovery email failed: %s", e.message, extra={"user_id": user.id})
        raise EmailDeliveryError() from e
    return RECOVERY_SENT_MESSAGE


def redeem_token(
    db: Session,
    body: ResetPasswordWithTokenRequest,
    now: datetime | None = None,
) -> str:
    """Validate a plain token for email, consume it, and set the new password."""
    if not body.email or not body.token or not body.new_password:
        raise BadRequest("Dados obrigatórios em falta")
    if len(body.new_password) < PASSWORD_MIN_LEN:
        raise BadRequest(f"Nova password deve ter pelo menos {PASSWORD_MIN_LEN} caracteres")

    user = get_user_by_email(db, body.email)
    if user is None:
        raise NotFound(INVALID_TOKEN)

    now = now or datetime.now(UTC)
    stored = find_live_token(db, hash_reset_token(body.token), now)
    if stored is None:
        raise BadRequest(INVALID_TOKEN)
    if not constant_time_equals(stored.email, body.email):
        raise BadRequest(INVALID_TOKEN)
    # The lookup already filtered on these; checked again on the loaded row.
    if _as_utc(stored.expires_at) < now or stored.used_at is not None:
        raise BadRequest(INVALID_TOKEN)
    if not mark_token_used(db, stored.id, now):
        db.rollback()
        raise BadRequest(INVALID_TOKEN)

    user.password_hash = hash_password(body.new_password)
    user.is_provisional = False
    db.commit()
    logger.info("Password reset via recovery token", extra={"user_id": user.id})
    return RESET_SUCCESS_MESSAGE
