"""ORM model for application accounts (admins and province leaders)."""

from sqlalchemy import Boolean, Column, DateTime, String

from app.models.base import Base, new_id, utcnow

ROLE_ADMIN = "admin"
ROLE_LEADER = "leader"
ROLES = (ROLE_ADMIN, ROLE_LEADER)


class User(Base):
    """
    Account used for session login and role-scoped access.

    role: 'admin' or 'leader'. is_provisional forces a password change before normal use.
    """

    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=new_id)
    username = Column(String(255), nullable=False, unique=True, index=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    name = Column(String(255), nullable=False)
    role = Column(String(32), nullable=False, default=ROLE_LEADER)
    province_id = Column(String(36), nullable=False, index=True)
    is_provisional = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
