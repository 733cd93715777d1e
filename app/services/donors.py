"""Donor registry: registration, scoped search, and ownership-checked updates/deletes."""

from __future__ import annotations

import logging
from datetime import UTC, datetime, time
from typing import TYPE_CHECKING, Any

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from app.core.errors import Conflict, NotFound
from app.models import Donor

if TYPE_CHECKING:
    from app.schemas.donor import DonorCreate, DonorSearchFilters, DonorUpdate
    from app.services.access import AccessScope

logger = logging.getLogger(__name__)

DUPLICATE_BI = "Doador com este BI já existe"
DONOR_NOT_FOUND = "Doador não encontrado"

# sortBy value -> column
SORT_COLUMNS = {
    "name": Donor.full_name,
    "age": Donor.age,
    "bloodType": Donor.blood_type,
    "createdAt": Donor.created_at,
    "lastDonation": Donor.last_donation,
}


def get_donor(db: Session, donor_id: str) -> Donor | None:
    return db.get(Donor, donor_id)


def get_donor_by_bi_number(db: Session, bi_number: str) -> Donor | None:
    return db.scalars(select(Donor).where(Donor.bi_number == bi_number)).first()


def require_donor(db: Session, donor_id: str) -> Donor:
    donor = get_donor(db, donor_id)
    if donor is None:
        raise NotFound(DONOR_NOT_FOUND)
    return donor


def create_donor(db: Session, scope: AccessScope, body: DonorCreate) -> Donor:
    """Register a donor owned by the caller, in the caller's home province. BI numbers are unique."""
    if get_donor_by_bi_number(db, body.bi_number) is not None:
        raise Conflict(DUPLICATE_BI)
    donor = Donor(
        **body.model_dump(),
        province_id=scope.province_id,
        created_by=scope.user_id,
    )
    db.add(donor)
    db.commit()
    db.refresh(donor)
    logger.info(
        "Donor registered",
        extra={"donor_id": donor.id, "province_id": donor.province_id},
    )
    return donor


def update_donor(db: Session, scope: AccessScope, donor_id: str, body: DonorUpdate) -> Donor:
    donor = require_donor(db, donor_id)
    scope.ensure_can_modify_donor(donor, "edit")
    updates = body.model_dump(exclude_unset=True, exclude_none=True)
    new_bi = updates.get("bi_number")
    if new_bi and new_bi != donor.bi_number and get_donor_by_bi_number(db, new_bi):
        raise Conflict(DUPLICATE_BI)
    for key, value in updates.items():
        setattr(donor, key, value)
    db.commit()
    db.refresh(donor)
    return donor


def delete_donor(db: Session, scope: AccessScope, donor_id: str) -> None:
    donor = require_donor(db, donor_id)
    scope.ensure_can_modify_donor(donor, "delete")
    db.delete(donor)
    db.commit()


def build_search_conditions(scope: AccessScope, filters: DonorSearchFilters) -> list[Any]:
    """Scope conditions first, then the caller's filters (AND-ed)."""
    conditions = scope.donor_search_conditions(filters.province_id)

    if filters.query:
        q = filters.query
        conditions.append(
            or_(
                Donor.full_name.icontains(q, autoescape=True),
                Donor.bi_number.icontains(q, autoescape=True),
                Donor.contact.icontains(q, autoescape=True),
                Donor.position.icontains(q, autoescape=True),
            )
        )
    if filters.blood_type:
        conditions.append(Donor.blood_type == filters.blood_type)
    if filters.gender:
        conditions.append(Donor.gender == filters.gender)
    if filters.municipality:
        conditions.append(Donor.municipality.icontains(filters.municipality, autoescape=True))
    if filters.department:
        conditions.append(Donor.department == filters.department)
    if filters.age_min is not None:
        conditions.append(Donor.age >= filters.age_min)
    if filters.age_max is not None:
        conditions.append(Donor.age <= filters.age_max)
    if filters.is_apt_to_donate is not None:
        conditions.append(Donor.is_apt_to_donate == filters.is_apt_to_donate)
    if filters.available_for_future is not None:
        conditions.append(Donor.available_for_future == filters.available_for_future)
    if filters.has_history is not None:
        conditions.append(Donor.has_history == filters.has_history)
    if filters.created_date_from:
        conditions.append(
            Donor.created_at
            >= datetime.combine(filters.created_date_from, time.min).astimezone(UTC)
        )
    if filters.created_date_to:
        # Inclusive: through the end of that day, server local time.
        conditions.append(
            Donor.created_at
            <= datetime.combine(filters.created_date_to, time.max).astimezone(UTC)
        )
    if filters.last_donation_from:
        conditions.append(Donor.last_donation >= filters.last_donation_from)
    if filters.last_donation_to:
        conditions.append(Donor.last_donation <= filters.last_donation_to)
    return conditions


def _order_by(filters: DonorSearchFilters) -> Any:
    if not filters.sort_by:
        return Donor.created_at.desc()
    column = SORT_COLUMNS[filters.sort_by]
    return column.asc() if filters.sort_order == "asc" else column.desc()


def search_donors(db: Session, scope: AccessScope, filters: DonorSearchFilters) -> list[Donor]:
    """
    Donors visible to the caller that match the filters.

    Default order is newest first; sortBy/sortOrder override it (descending unless 'asc').
    """
    stmt = (
        select(Donor)
        .where(*build_search_conditions(scope, filters))
        .order_by(_order_by(filters), Donor.id)
    )
    return list(db.scalars(stmt))
