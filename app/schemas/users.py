"""Schemas for account management (leaders, emergency admins, token maintenance)."""

from pydantic import EmailStr, Field

from app.schemas.auth import UserOut
from app.schemas.common import CamelModel


class LeaderCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    province_id: str = Field(..., min_length=1)


class LeaderUpdate(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    province_id: str = Field(..., min_length=1)


class LeaderCreatedOut(UserOut):
    """New leader; in dev the provisional password is echoed for manual testing."""

    test_provisional_password: str | None = Field(
        default=None, alias="_testProvisionalPassword"
    )


class EmergencyAdminRequest(CamelModel):
    """All fields optional here so the service can answer with a specific message."""

    emergency_key: str | None = None
    name: str | None = None
    email: str | None = None
    username: str | None = None
    province_id: str | None = None
    password: str | None = None


class EmergencyAdminResponse(CamelModel):
    message: str
    admin: UserOut


class CleanupTokensResponse(CamelModel):
    message: str
    deleted_count: int
