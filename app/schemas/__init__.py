"""Pydantic request/response schemas."""

from app.schemas.auth import (
    ChangePasswordRequest,
    CurrentUser,
    ForgotPasswordRequest,
    LoginRequest,
    MeResponse,
    ResetPasswordWithTokenRequest,
    SessionResponse,
    UserOut,
)
from app.schemas.common import CamelModel, MessageResponse
from app.schemas.donation import DonationCreate, DonationOut, DonationWithDonor
from app.schemas.donor import (
    BLOOD_TYPES,
    DonorCreate,
    DonorOut,
    DonorSearchFilters,
    DonorUpdate,
)
from app.schemas.health import HealthResponse
from app.schemas.province import ProvinceOut
from app.schemas.stats import BloodTypeStat, DonorStats
from app.schemas.users import (
    CleanupTokensResponse,
    EmergencyAdminRequest,
    EmergencyAdminResponse,
    LeaderCreate,
    LeaderCreatedOut,
    LeaderUpdate,
)

__all__ = [
    "BLOOD_TYPES",
    "BloodTypeStat",
    "CamelModel",
    "ChangePasswordRequest",
    "CleanupTokensResponse",
    "CurrentUser",
    "DonationCreate",
    "DonationOut",
    "DonationWithDonor",
    "DonorCreate",
    "DonorOut",
    "DonorSearchFilters",
    "DonorStats",
    "DonorUpdate",
    "EmergencyAdminRequest",
    "EmergencyAdminResponse",
    "ForgotPasswordRequest",
    "HealthResponse",
    "LeaderCreate",
    "LeaderCreatedOut",
    "LeaderUpdate",
    "LoginRequest",
    "MeResponse",
    "MessageResponse",
    "ProvinceOut",
    "ResetPasswordWithTokenRequest",
    "SessionResponse",
    "UserOut",
]
