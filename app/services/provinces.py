"""Province reference list: lookup and one-time seeding."""

import logging

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.models import Province

logger = logging.getLogger(__name__)

ANGOLA_PROVINCES: tuple[str, ...] = (
    "Luanda",
    "Bengo",
    "Benguela",
    "Bié",
    "Cabinda",
    "Cunene",
    "Huambo",
    "Huíla",
    "Kuando Kubango",
    "Kwanza Norte",
    "Kwanza Sul",
    "Lunda Norte",
    "Lunda Sul",
    "Malanje",
    "Moxico",
    "Namibe",
    "Uíge",
    "Zaire",
)


def list_provinces(db: Session) -> list[Province]:
    return list(db.scalars(select(Province).order_by(Province.name)))


def get_province(db: Session, province_id: str) -> Province | None:
    return db.get(Province, province_id)


def get_province_by_name(db: Session, name: str) -> Province | None:
    return db.scalars(select(Province).where(Province.name == name)).first()


def seed_provinces(db: Session, names: tuple[str, ...] = ANGOLA_PROVINCES) -> int:
    """Insert the reference list when the table is empty. Returns the number created."""
    existing = db.scalar(select(func.count()).select_from(Province)) or 0
    if existing:
        return 0
    for name in names:
        db.add(Province(name=name))
    db.commit()
    logger.info("Seeded provinces: count=%s", len(names))
    return len(names)
