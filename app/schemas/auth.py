"""Request/response schemas for auth endpoints."""

from datetime import datetime

from pydantic import EmailStr, Field, model_validator

from app.core.security import PASSWORD_MAX_LEN, PASSWORD_MIN_LEN
from app.schemas.common import CamelModel


class LoginRequest(CamelModel):
    """Credentials for login. provinceId selects the province context (admins may pick any)."""

    username: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=1, max_length=PASSWORD_MAX_LEN)
    province_id: str | None = None


class UserOut(CamelModel):
    """Account as returned to clients (never the password hash)."""

    id: str
    username: str
    email: str
    name: str
    role: str
    province_id: str
    is_provisional: bool
    created_at: datetime


class SessionResponse(CamelModel):
    """Returned after login; the token is also set as an HttpOnly cookie."""

    user: UserOut
    province_context: str
    access_token: str
    token_type: str = "bearer"


class MeResponse(CamelModel):
    user: UserOut
    province_context: str


class CurrentUser(CamelModel):
    """Authenticated caller, re-derived from the user record on every request."""

    id: str
    username: str
    role: str
    province_id: str
    province_context: str


class ChangePasswordRequest(CamelModel):
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN)
    confirm_password: str = Field(..., min_length=1)

    @model_validator(mode="after")
    def passwords_match(self) -> "ChangePasswordRequest":
        if self.new_password != self.confirm_password:
            raise ValueError("Passwords não coincidem")
        return self


class ForgotPasswordRequest(CamelModel):
    email: EmailStr
    province_id: str | None = None


class ResetPasswordWithTokenRequest(CamelModel):
    """Fields are checked by the service so missing values get a specific message."""

    email: str | None = None
    token: str | None = None
    new_password: str | None = None
