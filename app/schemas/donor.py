"""Pydantic schemas for donors: registration form, partial update, output, search filters."""

from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, Field

from app.schemas.common import CamelModel

BLOOD_TYPES: tuple[str, ...] = ("O+", "O-", "A+", "A-", "B+", "B-", "AB+", "AB-")

BloodType = Literal["O+", "O-", "A+", "A-", "B+", "B-", "AB+", "AB-"]
Gender = Literal["M", "F"]
RhFactor = Literal["positive", "negative"]
PreferredContact = Literal["call", "sms", "email", "whatsapp"]
SortKey = Literal["name", "age", "bloodType", "createdAt", "lastDonation"]
SortOrder = Literal["asc", "desc"]


class DonorCreate(CamelModel):
    """Registration form. provinceId and createdBy are ignored if sent; the server assigns them."""

    bi_number: str = Field(..., min_length=1, max_length=64)
    full_name: str = Field(..., min_length=1, max_length=255)
    birth_date: str = Field(..., min_length=1, max_length=32)
    age: int = Field(..., ge=1, le=150)
    gender: Gender
    municipality: str = Field(..., min_length=1, max_length=255)
    neighborhood: str = ""
    contact: str = ""
    position: str = ""
    department: str = ""
    blood_type: BloodType
    rh_factor: RhFactor
    has_history: bool = False
    previous_donations: int = Field(default=0, ge=0)
    last_donation: str = ""
    medical_restrictions: str = ""
    is_apt_to_donate: bool = True
    available_for_future: bool = True
    preferred_contact: PreferredContact = "call"
    observations: str = ""


class DonorUpdate(CamelModel):
    """Partial update; only the fields present in the request are changed."""

    bi_number: str | None = Field(default=None, min_length=1, max_length=64)
    full_name: str | None = Field(default=None, min_length=1, max_length=255)
    birth_date: str | None = Field(default=None, min_length=1, max_length=32)
    age: int | None = Field(default=None, ge=1, le=150)
    gender: Gender | None = None
    municipality: str | None = Field(default=None, min_length=1, max_length=255)
    neighborhood: str | None = None
    contact: str | None = None
    position: str | None = None
    department: str | None = None
    blood_type: BloodType | None = None
    rh_factor: RhFactor | None = None
    has_history: bool | None = None
    previous_donations: int | None = Field(default=None, ge=0)
    last_donation: str | None = None
    medical_restrictions: str | None = None
    is_apt_to_donate: bool | None = None
    available_for_future: bool | None = None
    preferred_contact: PreferredContact | None = None
    observations: str | None = None


class DonorOut(CamelModel):
    id: str
    bi_number: str
    full_name: str
    birth_date: str
    age: int
    gender: str
    municipality: str
    neighborhood: str
    contact: str
    position: str
    department: str
    blood_type: str
    rh_factor: str
    has_history: bool
    previous_donations: int
    last_donation: str
    medical_restrictions: str
    is_apt_to_donate: bool
    available_for_future: bool
    preferred_contact: str
    observations: str
    province_id: str
    created_by: str
    created_at: datetime
    updated_at: datetime


class DonorSearchFilters(BaseModel):
    """Caller-supplied search filters. Role scoping is applied on top, never replaced by these."""

    query: str | None = None
    blood_type: str | None = None
    gender: Gender | None = None
    municipality: str | None = None
    age_min: int | None = None
    age_max: int | None = None
    is_apt_to_donate: bool | None = None
    available_for_future: bool | None = None
    department: str | None = None
    has_history: bool | None = None
    province_id: str | None = None
    created_date_from: date | None = None
    created_date_to: date | None = None
    last_donation_from: str | None = None
    last_donation_to: str | None = None
    sort_by: SortKey | None = None
    sort_order: SortOrder | None = None
