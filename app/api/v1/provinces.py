"""Province list (public; used by the login and registration forms)."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.schemas.province import ProvinceOut
from app.services.provinces import list_provinces

router = APIRouter()


@router.get("", response_model=list[ProvinceOut])
def get_provinces(db: Annotated[Session, Depends(get_db)]) -> list[ProvinceOut]:
    return [ProvinceOut.model_validate(p) for p in list_provinces(db)]
