"""Account management for admins: leaders CRUD and the full user list."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api.v1.auth import get_app_settings, get_notifier, require_admin
from app.core.config import Settings
from app.core.database import get_db
from app.models import ROLE_LEADER
from app.schemas.auth import CurrentUser, UserOut
from app.schemas.common import MessageResponse
from app.schemas.users import LeaderCreate, LeaderCreatedOut, LeaderUpdate
from app.services.accounts import create_leader, delete_leader, list_users, update_leader
from app.services.notifier import EmailNotifier

router = APIRouter()


@router.get("/leaders", response_model=list[UserOut])
def get_leaders(
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> list[UserOut]:
    return [UserOut.model_validate(u) for u in list_users(db, role=ROLE_LEADER)]


@router.get("/users", response_model=list[UserOut])
def get_users(
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> list[UserOut]:
    return [UserOut.model_validate(u) for u in list_users(db)]


@router.post(
    "/leaders",
    response_model=LeaderCreatedOut,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
async def post_leader(
    body: LeaderCreate,
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_app_settings)],
    notifier: Annotated[EmailNotifier, Depends(get_notifier)],
) -> LeaderCreatedOut:
    """
    Create a provisional leader and email the provisional password.
    In dev the password is echoed back as _testProvisionalPassword.
    """
    leader, provisional_password = await create_leader(db, settings, notifier, body)
    out = LeaderCreatedOut.model_validate(leader)
    if not settings.is_production:
        out.test_provisional_password = provisional_password
    return out


@router.put("/leaders/{leader_id}", response_model=UserOut)
def put_leader(
    leader_id: str,
    body: LeaderUpdate,
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> UserOut:
    return UserOut.model_validate(update_leader(db, settings, leader_id, body))


@router.delete("/leaders/{leader_id}", response_model=MessageResponse)
def remove_leader(
    leader_id: str,
    admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> MessageResponse:
    delete_leader(db, admin.id, leader_id)
    return MessageResponse(message="Líder eliminado com sucesso")
