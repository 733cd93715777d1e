"""Shared fixtures for tests: in-memory database, settings and seed helpers."""

from datetime import datetime
from unittest.mock import MagicMock

from pydantic import SecretStr
from sqlalchemy.orm import Session, sessionmaker

from app.core.config import Settings
from app.core.database import build_engine, build_session_factory
from app.core.security import hash_password
from app.models import ROLE_ADMIN, ROLE_LEADER, Base, Donation, Donor, Province, User
from app.services.notifier import EmailNotifier

TEST_PASSWORD = "secret123"


def make_settings(**overrides) -> Settings:
    values = {
        "APP_ENV": "dev",
        "DATABASE_URL": "sqlite://",
        "JWT_SECRET": SecretStr("test-secret"),
        "BOOTSTRAP_ON_STARTUP": False,
        "EMAIL_API_BASE": "https://mail.example.test/exec",
    }
    values.update(overrides)
    return Settings(**values)


def make_session_factory() -> sessionmaker[Session]:
    """Fresh in-memory SQLite database with all tables."""
    engine = build_engine("sqlite://")
    Base.metadata.create_all(engine)
    return build_session_factory(engine)


def make_notifier() -> MagicMock:
    """Notifier double; its send_* methods are AsyncMocks."""
    return MagicMock(spec=EmailNotifier)


def add_province(db: Session, name: str) -> Province:
    province = Province(name=name)
    db.add(province)
    db.commit()
    return province


def add_user(
    db: Session,
    username: str,
    province_id: str,
    role: str = ROLE_LEADER,
    password: str = TEST_PASSWORD,
    is_provisional: bool = False,
) -> User:
    user = User(
        username=username,
        email=f"{username}@example.org",
        password_hash=hash_password(password),
        name=username.title(),
        role=role,
        province_id=province_id,
        is_provisional=is_provisional,
    )
    db.add(user)
    db.commit()
    return user


def add_admin(db: Session, username: str, province_id: str) -> User:
    return add_user(db, username, province_id, role=ROLE_ADMIN)


def add_donor(
    db: Session,
    bi_number: str,
    province_id: str,
    created_by: str,
    blood_type: str = "O+",
    created_at: datetime | None = None,
    **fields,
) -> Donor:
    values = {
        "full_name": f"Doador {bi_number}",
        "birth_date": "1990-01-01",
        "age": 35,
        "gender": "M",
        "municipality": "Viana",
        "rh_factor": "positive" if blood_type.endswith("+") else "negative",
    }
    values.update(fields)
    donor = Donor(
        bi_number=bi_number,
        blood_type=blood_type,
        province_id=province_id,
        created_by=created_by,
        **values,
    )
    if created_at is not None:
        donor.created_at = created_at
    db.add(donor)
    db.commit()
    return donor


def add_donation(
    db: Session,
    donor_id: str,
    donation_date: str = "2026-01-15",
    created_at: datetime | None = None,
) -> Donation:
    donation = Donation(donor_id=donor_id, donation_date=donation_date, donation_time="09:30")
    if created_at is not None:
        donation.created_at = created_at
    db.add(donation)
    db.commit()
    return donation
