"""Donation ledger: append-only donation events and scoped listings joined with donor details."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.models import Donation, Donor
from app.services.donors import require_donor

if TYPE_CHECKING:
    from app.schemas.donation import DonationCreate
    from app.services.access import AccessScope

UNKNOWN_DONOR_NAME = "Doador Desconhecido"
UNKNOWN_VALUE = "N/A"

RECENT_DEFAULT_LIMIT = 10
RECENT_MAX_LIMIT = 100


@dataclass
class DonationRow:
    """A donation with the owning donor's display fields."""

    id: str
    donor_id: str
    donation_date: str
    donation_time: str
    notes: str
    created_at: datetime
    donor_name: str
    donor_bi_number: str
    blood_type: str


def _row(donation: Donation, donor: Donor | None) -> DonationRow:
    return DonationRow(
        id=donation.id,
        donor_id=donation.donor_id,
        donation_date=donation.donation_date,
        donation_time=donation.donation_time,
        notes=donation.notes,
        created_at=donation.created_at,
        donor_name=(donor.full_name if donor else None) or UNKNOWN_DONOR_NAME,
        donor_bi_number=(donor.bi_number if donor else None) or UNKNOWN_VALUE,
        blood_type=(donor.blood_type if donor else None) or UNKNOWN_VALUE,
    )


def create_donation(db: Session, body: DonationCreate) -> Donation:
    require_donor(db, body.donor_id)
    donation = Donation(**body.model_dump())
    db.add(donation)
    db.commit()
    db.refresh(donation)
    return donation


def list_donations_for_donor(db: Session, donor_id: str) -> list[Donation]:
    stmt = (
        select(Donation)
        .where(Donation.donor_id == donor_id)
        .order_by(Donation.donation_date.desc(), Donation.created_at.desc())
    )
    return list(db.scalars(stmt))


def recent_donations(
    db: Session, scope: AccessScope, limit: int = RECENT_DEFAULT_LIMIT
) -> list[DonationRow]:
    """Newest donations visible to the caller; donations whose donor no longer exists are skipped."""
    limit = max(1, min(RECENT_MAX_LIMIT, limit))
    stmt = (
        select(Donation, Donor)
        .join(Donor, Donor.id == Donation.donor_id)
        .where(*scope.donation_conditions())
        .order_by(Donation.created_at.desc())
        .limit(limit)
    )
    return [_row(donation, donor) for donation, donor in db.execute(stmt)]


def donations_with_filters(
    db: Session,
    scope: AccessScope,
    donor_id: str | None = None,
    date_from: str | None = None,
    date_to: str | None = None,
) -> list[DonationRow]:
    """
    Donations for export, newest donation date first.

    Admins also get donations whose donor was deleted (reported as unknown); a leader
    only sees donations of donors in their province, so those never match.
    """
    conditions = list(scope.donation_conditions())
    if donor_id:
        conditions.append(Donation.donor_id == donor_id)
    if date_from:
        conditions.append(Donation.donation_date >= date_from)
    if date_to:
        conditions.append(Donation.donation_date <= date_to)
    stmt = (
        select(Donation, Donor)
        .outerjoin(Donor, Donor.id == Donation.donor_id)
        .where(*conditions)
        .order_by(Donation.donation_date.desc(), Donation.created_at.desc())
    )
    return [_row(donation, donor) for donation, donor in db.execute(stmt)]
