"""Donor registry endpoints: scoped search, read, register, update, delete."""

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.api.v1.auth import get_scope
from app.core.database import get_db
from app.schemas.common import MessageResponse
from app.schemas.donor import (
    DonorCreate,
    DonorOut,
    DonorSearchFilters,
    DonorUpdate,
    Gender,
    SortKey,
    SortOrder,
)
from app.services.access import AccessScope
from app.services.donors import (
    create_donor,
    delete_donor,
    require_donor,
    search_donors,
    update_donor,
)

router = APIRouter()


def search_filters(
    query: Annotated[str | None, Query()] = None,
    blood_type: Annotated[str | None, Query(alias="bloodType")] = None,
    gender: Annotated[Gender | None, Query()] = None,
    municipality: Annotated[str | None, Query()] = None,
    age_min: Annotated[int | None, Query(alias="ageMin")] = None,
    age_max: Annotated[int | None, Query(alias="ageMax")] = None,
    is_apt_to_donate: Annotated[bool | None, Query(alias="isAptToDonate")] = None,
    available_for_future: Annotated[bool | None, Query(alias="availableForFuture")] = None,
    department: Annotated[str | None, Query()] = None,
    has_history: Annotated[bool | None, Query(alias="hasHistory")] = None,
    province_id: Annotated[str | None, Query(alias="provinceId")] = None,
    created_date_from: Annotated[date | None, Query(alias="createdDateFrom")] = None,
    created_date_to: Annotated[date | None, Query(alias="createdDateTo")] = None,
    last_donation_from: Annotated[str | None, Query(alias="lastDonationFrom")] = None,
    last_donation_to: Annotated[str | None, Query(alias="lastDonationTo")] = None,
    sort_by: Annotated[SortKey | None, Query(alias="sortBy")] = None,
    sort_order: Annotated[SortOrder | None, Query(alias="sortOrder")] = None,
) -> DonorSearchFilters:
    """Dependency: query-string filters for donor search. bloodType=all means no filter."""
    return DonorSearchFilters(
        query=query or None,
        blood_type=None if blood_type in (None, "", "all") else blood_type,
        gender=gender,
        municipality=municipality or None,
        age_min=age_min,
        age_max=age_max,
        is_apt_to_donate=is_apt_to_donate,
        available_for_future=available_for_future,
        department=department or None,
        has_history=has_history,
        province_id=province_id or None,
        created_date_from=created_date_from,
        created_date_to=created_date_to,
        last_donation_from=last_donation_from or None,
        last_donation_to=last_donation_to or None,
        sort_by=sort_by,
        sort_order=sort_order,
    )


@router.get("", response_model=list[DonorOut])
def get_donors(
    filters: Annotated[DonorSearchFilters, Depends(search_filters)],
    scope: Annotated[AccessScope, Depends(get_scope)],
    db: Annotated[Session, Depends(get_db)],
) -> list[DonorOut]:
    """
    Search donors visible to the caller.

    Leaders only see donors they registered; admins see every province unless
    provinceId narrows the search.
    """
    return [DonorOut.model_validate(d) for d in search_donors(db, scope, filters)]


@router.get("/{donor_id}", response_model=DonorOut)
def get_donor(
    donor_id: str,
    _scope: Annotated[AccessScope, Depends(get_scope)],
    db: Annotated[Session, Depends(get_db)],
) -> DonorOut:
    return DonorOut.model_validate(require_donor(db, donor_id))


@router.post("", response_model=DonorOut, status_code=status.HTTP_201_CREATED)
def post_donor(
    body: DonorCreate,
    scope: Annotated[AccessScope, Depends(get_scope)],
    db: Annotated[Session, Depends(get_db)],
) -> DonorOut:
    return DonorOut.model_validate(create_donor(db, scope, body))


@router.put("/{donor_id}", response_model=DonorOut)
def put_donor(
    donor_id: str,
    body: DonorUpdate,
    scope: Annotated[AccessScope, Depends(get_scope)],
    db: Annotated[Session, Depends(get_db)],
) -> DonorOut:
    return DonorOut.model_validate(update_donor(db, scope, donor_id, body))


@router.delete("/{donor_id}", response_model=MessageResponse)
def remove_donor(
    donor_id: str,
    scope: Annotated[AccessScope, Depends(get_scope)],
    db: Annotated[Session, Depends(get_db)],
) -> MessageResponse:
    delete_donor(db, scope, donor_id)
    return MessageResponse(message="Doador eliminado com sucesso")
