"""Statistics over donors and donations, scoped exactly like donor visibility for the caller."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.core.errors import UnscopedQueryError
from app.models import Donation, Donor
from app.schemas.donor import BLOOD_TYPES
from app.schemas.stats import BloodTypeStat, DonorStats

if TYPE_CHECKING:
    from app.services.access import AccessScope

MONTHLY_REPORT_MONTHS = 12


@dataclass
class MonthlyRow:
    month: str  # YYYY-MM
    new_donors: int
    donations: int


def percentage(count: int, total: int) -> int:
    """Share of total as a whole percent, halves rounded up; 0 when total is 0."""
    if total <= 0:
        return 0
    return math.floor(count / total * 100 + 0.5)


def start_of_month(now: datetime | None = None) -> datetime:
    """First instant of the current calendar month in server local time."""
    local = (now or datetime.now(UTC)).astimezone()
    return local.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


def _count_donors(db: Session, conditions: list[Any]) -> int:
    return db.scalar(select(func.count()).select_from(Donor).where(*conditions)) or 0


def _count_donations(db: Session, donor_conditions: list[Any]) -> int:
    stmt = select(func.count()).select_from(Donation)
    if donor_conditions:
        # Donations and donors are separate tables: resolve matching donor ids first.
        stmt = stmt.where(Donation.donor_id.in_(select(Donor.id).where(*donor_conditions)))
    return db.scalar(stmt) or 0


def compute_donor_stats(
    db: Session,
    scope: AccessScope | None,
    province_id: str | None = None,
    now: datetime | None = None,
) -> DonorStats:
    """
    Totals, active and new-this-month donors, and per-blood-type counts for the caller.

    Leaders are limited to their own province; admins see the given province or all.
    A missing scope is a programming error: this never falls back to global numbers.
    """
    if scope is None:
        raise UnscopedQueryError(
            "Donor statistics require a caller scope; refusing to compute unscoped totals"
        )
    conditions = scope.donor_stats_conditions(province_id)

    total_donors = _count_donors(db, conditions)
    total_donations = _count_donations(db, conditions)
    active_donors = _count_donors(db, [*conditions, Donor.is_apt_to_donate.is_(True)])
    new_this_month = _count_donors(
        db, [*conditions, Donor.created_at >= start_of_month(now).astimezone(UTC)]
    )

    by_type = dict(
        db.execute(
            select(Donor.blood_type, func.count())
            .where(*conditions)
            .group_by(Donor.blood_type)
        ).all()
    )
    blood_type_stats = {
        blood_type: BloodTypeStat(
            count=by_type.get(blood_type, 0),
            percentage=percentage(by_type.get(blood_type, 0), total_donors),
        )
        for blood_type in BLOOD_TYPES
    }
    return DonorStats(
        total_donors=total_donors,
        total_donations=total_donations,
        active_donors=active_donors,
        new_this_month=new_this_month,
        blood_type_stats=blood_type_stats,
    )


def _month_keys(now: datetime, months: int) -> list[str]:
    year, month = now.year, now.month
    keys: list[str] = []
    for _ in range(months):
        keys.append(f"{year:04d}-{month:02d}")
        month -= 1
        if month == 0:
            year, month = year - 1, 12
    return list(reversed(keys))


def _local_month(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone().strftime("%Y-%m")


def monthly_activity(
    db: Session,
    scope: AccessScope | None,
    province_id: str | None = None,
    now: datetime | None = None,
    months: int = MONTHLY_REPORT_MONTHS,
) -> list[MonthlyRow]:
    """New donors (by registration time) and donations (by donation date) per month, oldest first."""
    if scope is None:
        raise UnscopedQueryError("Monthly activity requires a caller scope")
    current = (now or datetime.now(UTC)).astimezone()
    keys = _month_keys(current, months)
    rows = {key: MonthlyRow(month=key, new_donors=0, donations=0) for key in keys}
    window_start = f"{keys[0]}-01"
    conditions = scope.donor_stats_conditions(province_id)

    first_month = start_of_month(current).replace(year=int(keys[0][:4]), month=int(keys[0][5:]))
    for created_at in db.scalars(
        select(Donor.created_at).where(
            *conditions, Donor.created_at >= first_month.astimezone(UTC)
        )
    ):
        key = _local_month(created_at)
        if key in rows:
            rows[key].new_donors += 1

    donation_stmt = select(Donation.donation_date).where(Donation.donation_date >= window_start)
    if conditions:
        donation_stmt = donation_stmt.where(
            Donation.donor_id.in_(select(Donor.id).where(*conditions))
        )
    for donation_date in db.scalars(donation_stmt):
        key = (donation_date or "")[:7]
        if key in rows:
            rows[key].donations += 1

    return [rows[key] for key in keys]
