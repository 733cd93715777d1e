"""ORM model for the province reference list."""

from sqlalchemy import Column, DateTime, String

from app.models.base import Base, new_id, utcnow


class Province(Base):
    """Administrative region; seeded once, names are unique."""

    __tablename__ = "provinces"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String(255), nullable=False, unique=True, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
