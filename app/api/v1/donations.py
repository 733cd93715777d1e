"""Donation endpoints: record a donation, list a donor's history, recent donations."""

from dataclasses import asdict
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.api.v1.auth import get_scope
from app.core.database import get_db
from app.schemas.donation import DonationCreate, DonationOut, DonationWithDonor
from app.services.access import AccessScope
from app.services.donations import (
    RECENT_DEFAULT_LIMIT,
    RECENT_MAX_LIMIT,
    create_donation,
    list_donations_for_donor,
    recent_donations,
)

router = APIRouter()


@router.post("", response_model=DonationOut, status_code=status.HTTP_201_CREATED)
def post_donation(
    body: DonationCreate,
    _scope: Annotated[AccessScope, Depends(get_scope)],
    db: Annotated[Session, Depends(get_db)],
) -> DonationOut:
    return DonationOut.model_validate(create_donation(db, body))


@router.get("/donor/{donor_id}", response_model=list[DonationOut])
def get_donor_donations(
    donor_id: str,
    _scope: Annotated[AccessScope, Depends(get_scope)],
    db: Annotated[Session, Depends(get_db)],
) -> list[DonationOut]:
    return [DonationOut.model_validate(d) for d in list_donations_for_donor(db, donor_id)]


@router.get("/recent", response_model=list[DonationWithDonor])
def get_recent_donations(
    scope: Annotated[AccessScope, Depends(get_scope)],
    db: Annotated[Session, Depends(get_db)],
    limit: Annotated[int, Query(ge=1, le=RECENT_MAX_LIMIT)] = RECENT_DEFAULT_LIMIT,
) -> list[DonationWithDonor]:
    """Newest donations the caller may see, with donor name, BI number and blood type."""
    return [DonationWithDonor(**asdict(row)) for row in recent_donations(db, scope, limit)]
