"""Admin maintenance: emergency admin registration and reset-token cleanup."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api.v1.auth import get_app_settings, require_admin
from app.core.config import Settings
from app.core.database import get_db
from app.schemas.auth import CurrentUser, UserOut
from app.schemas.users import (
    CleanupTokensResponse,
    EmergencyAdminRequest,
    EmergencyAdminResponse,
)
from app.services.accounts import register_emergency_admin
from app.services.password_reset import delete_expired_tokens

router = APIRouter()


@router.post(
    "/register-emergency",
    response_model=EmergencyAdminResponse,
    status_code=status.HTTP_201_CREATED,
)
def register_emergency(
    body: EmergencyAdminRequest,
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> EmergencyAdminResponse:
    """
    Create an admin without logging in. In production emergencyKey must match
    EMERGENCY_ADMIN_KEY; the per-province admin limit still applies.
    """
    admin = register_emergency_admin(db, settings, body)
    return EmergencyAdminResponse(
        message="Administrador de emergência criado com sucesso",
        admin=UserOut.model_validate(admin),
    )


@router.post("/cleanup-tokens", response_model=CleanupTokensResponse)
def cleanup_tokens(
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> CleanupTokensResponse:
    deleted = delete_expired_tokens(db)
    return CleanupTokensResponse(
        message=f"{deleted} tokens expirados foram removidos",
        deleted_count=deleted,
    )
