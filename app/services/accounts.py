"""Accounts: credentials, leader management, emergency admins and the per-province admin limit.

The admin limit and the email/username uniqueness checks are a count-then-write
sequence without a transaction; two concurrent requests may both pass the check.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.core.errors import (
    AdminLimitExceeded,
    BadRequest,
    Conflict,
    Forbidden,
    NotFound,
    Unauthenticated,
)
from app.core.security import (
    constant_time_equals,
    generate_provisional_password,
    hash_password,
    verify_password,
)
from app.models import ROLE_ADMIN, ROLE_LEADER, User
from app.services.notifier import NotifierError
from app.services.provinces import get_province

if TYPE_CHECKING:
    from app.core.config import Settings
    from app.schemas.auth import ChangePasswordRequest
    from app.schemas.users import EmergencyAdminRequest, LeaderCreate, LeaderUpdate
    from app.services.notifier import EmailNotifier

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Credenciais inválidas"
EMAIL_TAKEN = "Utilizador com este email já existe"


def get_user(db: Session, user_id: str) -> User | None:
    return db.get(User, user_id)


def get_user_by_username(db: Session, username: str) -> User | None:
    return db.scalars(select(User).where(User.username == username)).first()


def get_user_by_email(db: Session, email: str) -> User | None:
    return db.scalars(select(User).where(User.email == email)).first()


def list_users(db: Session, role: str | None = None) -> list[User]:
    """Accounts newest first, optionally limited to one role."""
    stmt = select(User).order_by(User.created_at.desc())
    if role:
        stmt = stmt.where(User.role == role)
    return list(db.scalars(stmt))


def count_admins(db: Session, province_id: str) -> int:
    return db.scalar(
        select(func.count())
        .select_from(User)
        .where(User.province_id == province_id, User.role == ROLE_ADMIN)
    ) or 0


def ensure_admin_capacity(
    db: Session,
    province_id: str,
    limit: int,
    current: User | None = None,
) -> None:
    """
    Refuse when the province already holds `limit` admins besides `current`.

    `current` is the account being updated; its own slot is not counted when it is
    already an admin of the target province.
    """
    count = count_admins(db, province_id)
    if (
        current is not None
        and current.role == ROLE_ADMIN
        and current.province_id == province_id
    ):
        count -= 1
    if count >= limit:
        raise AdminLimitExceeded(limit)


def create_user(
    db: Session,
    *,
    username: str,
    email: str,
    password: str,
    name: str,
    province_id: str,
    role: str = ROLE_LEADER,
    is_provisional: bool = True,
    max_admins: int = 5,
) -> User:
    """Hash the password and persist a new account (admin limit enforced for admins)."""
    if role == ROLE_ADMIN:
        ensure_admin_capacity(db, province_id, max_admins)
    user = User(
        username=username,
        email=email,
        password_hash=hash_password(password),
        name=name,
        role=role,
        province_id=province_id,
        is_provisional=is_provisional,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def update_user(db: Session, user: User, *, max_admins: int = 5, **updates: Any) -> User:
    """Apply attribute updates; re-checks the admin limit when role or province changes."""
    if updates.get("role") == ROLE_ADMIN or updates.get("province_id"):
        final_role = updates.get("role") or user.role
        final_province = updates.get("province_id") or user.province_id
        if final_role == ROLE_ADMIN:
            ensure_admin_capacity(db, final_province, max_admins, current=user)
    for key, value in updates.items():
        setattr(user, key, value)
    db.commit()
    db.refresh(user)
    return user


def delete_user(db: Session, user_id: str) -> bool:
    user = db.get(User, user_id)
    if user is None:
        return False
    db.delete(user)
    db.commit()
    return True


def authenticate(db: Session, username: str, password: str) -> User:
    user = get_user_by_username(db, username)
    if user is None or not verify_password(password, user.password_hash):
        logger.info("Login failed", extra={"username": username})
        raise Unauthenticated(INVALID_CREDENTIALS)
    return user


def resolve_province_context(db: Session, user: User, requested: str | None) -> str:
    """Province the session works in: leaders are pinned to their own, admins pick any existing one."""
    if not requested:
        return user.province_id
    if user.role == ROLE_LEADER and requested != user.province_id:
        raise Forbidden("Acesso negado à província selecionada")
    _ensure_province_exists(db, requested)
    return requested


def _ensure_province_exists(db: Session, province_id: str) -> None:
    if get_province(db, province_id) is None:
        raise BadRequest("Província não encontrada")


async def change_password(
    db: Session,
    notifier: EmailNotifier,
    user: User,
    body: ChangePasswordRequest,
) -> None:
    """Self-service password change; completing a provisional account sends the welcome email."""
    if not verify_password(body.current_password, user.password_hash):
        raise BadRequest("Password atual incorreta")
    was_provisional = bool(user.is_provisional)
    user.password_hash = hash_password(body.new_password)
    user.is_provisional = False
    db.commit()
    if was_provisional:
        try:
            await notifier.send_welcome(user.email, user.name)
        except NotifierError as e:
            logger.error("Welcome email failed: %s", e.message, extra={"user_id": user.id})


async def create_leader(
    db: Session,
    settings: Settings,
    notifier: EmailNotifier,
    body: LeaderCreate,
) -> tuple[User, str]:
    """
    Create a provisional leader account and email the provisional password.

    An email failure is logged; the account stays created.
    Returns (user, provisional_password).
    """
    email = str(body.email)
    if get_user_by_email(db, email) or get_user_by_username(db, email):
        raise Conflict(EMAIL_TAKEN)
    _ensure_province_exists(db, body.province_id)

    provisional_password = generate_provisional_password()
    leader = create_user(
        db,
        username=email,
        email=email,
        password=provisional_password,
        name=body.name,
        role=ROLE_LEADER,
        province_id=body.province_id,
        is_provisional=True,
        max_admins=settings.MAX_ADMINS_PER_PROVINCE,
    )
    logger.info(
        "Leader created",
        extra={"user_id": leader.id, "province_id": leader.province_id},
    )
    try:
        await notifier.send_provisional_password(email, body.name, provisional_password)
    except NotifierError as e:
        logger.error(
            "Provisional password email failed: %s",
            e.message,
            extra={"user_id": leader.id},
        )
    return leader, provisional_password


def update_leader(
    db: Session,
    settings: Settings,
    leader_id: str,
    body: LeaderUpdate,
) -> User:
    leader = get_user(db, leader_id)
    if leader is None:
        raise NotFound("Líder não encontrado")
    email = str(body.email)
    # The email doubles as the username.
    for other in (get_user_by_email(db, email), get_user_by_username(db, email)):
        if other is not None and other.id != leader_id:
            raise Conflict(EMAIL_TAKEN)
    if body.province_id != leader.province_id:
        _ensure_province_exists(db, body.province_id)
    return update_user(
        db,
        leader,
        max_admins=settings.MAX_ADMINS_PER_PROVINCE,
        name=body.name,
        email=email,
        username=email,
        province_id=body.province_id,
    )


def delete_leader(db: Session, acting_user_id: str, leader_id: str) -> None:
    if leader_id == acting_user_id:
        raise BadRequest("Não pode eliminar o próprio utilizador")
    if not delete_user(db, leader_id):
        raise NotFound("Líder não encontrado")


def _emergency_key_matches(settings: Settings, supplied: str | None) -> bool:
    if settings.EMERGENCY_ADMIN_KEY is None or not supplied:
        return False
    expected = settings.EMERGENCY_ADMIN_KEY.get_secret_value()
    return bool(expected) and constant_time_equals(expected, supplied)


def register_emergency_admin(
    db: Session,
    settings: Settings,
    body: EmergencyAdminRequest,
) -> User:
    """Create a non-provisional admin. In production the emergency key must match."""
    if settings.is_production and not _emergency_key_matches(settings, body.emergency_key):
        raise Forbidden()
    if not all((body.name, body.email, body.username, body.province_id, body.password)):
        raise BadRequest("Todos os campos são obrigatórios")
    if get_user_by_email(db, body.email) or get_user_by_username(db, body.username):
        raise Conflict("Utilizador já existe com este email ou username")
    _ensure_province_exists(db, body.province_id)

    admin = create_user(
        db,
        username=body.username,
        email=body.email,
        password=body.password,
        name=body.name,
        role=ROLE_ADMIN,
        province_id=body.province_id,
        is_provisional=False,
        max_admins=settings.MAX_ADMINS_PER_PROVINCE,
    )
    logger.warning(
        "Emergency admin created",
        extra={
            "user_id": admin.id,
            "email": admin.email,
            "province_id": admin.province_id,
            "created_at": datetime.now(UTC).isoformat(),
        },
    )
    return admin
