"""Startup seeding: province list and the default admin account."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy.orm import Session

from app.core.security import hash_password, verify_password
from app.models import ROLE_ADMIN
from app.services.accounts import create_user, get_user_by_username
from app.services.provinces import get_province_by_name, seed_provinces

if TYPE_CHECKING:
    from app.core.config import Settings

logger = logging.getLogger(__name__)


def ensure_default_admin(db: Session, settings: Settings) -> bool:
    """
    Create the default admin in DEFAULT_ADMIN_PROVINCE when missing. Returns True if created.

    In dev, an existing default admin whose password no longer matches
    ADMIN_INITIAL_PASSWORD gets it reset.
    """
    province = get_province_by_name(db, settings.DEFAULT_ADMIN_PROVINCE)
    if province is None:
        logger.error(
            "Cannot create default admin: province %r not found",
            settings.DEFAULT_ADMIN_PROVINCE,
        )
        return False

    password = settings.ADMIN_INITIAL_PASSWORD.get_secret_value()
    existing = get_user_by_username(db, settings.DEFAULT_ADMIN_USERNAME)
    if existing is None:
        admin = create_user(
            db,
            username=settings.DEFAULT_ADMIN_USERNAME,
            email=settings.DEFAULT_ADMIN_EMAIL,
            password=password,
            name="Administrador",
            role=ROLE_ADMIN,
            province_id=province.id,
            is_provisional=False,
            max_admins=settings.MAX_ADMINS_PER_PROVINCE,
        )
        logger.warning(
            "Default admin created (change its password after first login)",
            extra={"user_id": admin.id, "province": province.name},
        )
        return True

    if settings.APP_ENV == "dev" and not verify_password(password, existing.password_hash):
        existing.password_hash = hash_password(password)
        db.commit()
        logger.warning("Default admin password reset to ADMIN_INITIAL_PASSWORD (dev only)")
    return False


def run_bootstrap(db: Session, settings: Settings) -> tuple[int, bool]:
    """Seed provinces and the default admin. Idempotent. Returns (provinces_created, admin_created)."""
    provinces_created = seed_provinces(db)
    admin_created = ensure_default_admin(db, settings)
    return provinces_created, admin_created
