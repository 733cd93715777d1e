"""Donor statistics for the dashboard."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.api.v1.auth import get_scope
from app.core.database import get_db
from app.schemas.stats import DonorStats
from app.services.access import AccessScope
from app.services.stats import compute_donor_stats

router = APIRouter()


@router.get("", response_model=DonorStats)
def get_stats(
    scope: Annotated[AccessScope, Depends(get_scope)],
    db: Annotated[Session, Depends(get_db)],
    province_id: Annotated[str | None, Query(alias="provinceId")] = None,
) -> DonorStats:
    """Totals scoped like donor visibility; provinceId only narrows an admin's view."""
    return compute_donor_stats(db, scope, province_id or None)
