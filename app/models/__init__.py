"""SQLAlchemy ORM models."""

from app.models.base import Base
from app.models.donation import Donation
from app.models.donor import Donor
from app.models.password_reset_token import PasswordResetToken
from app.models.province import Province
from app.models.user import ROLE_ADMIN, ROLE_LEADER, ROLES, User

__all__ = [
    "Base",
    "Donation",
    "Donor",
    "PasswordResetToken",
    "Province",
    "ROLE_ADMIN",
    "ROLE_LEADER",
    "ROLES",
    "User",
]
