"""Pydantic schemas for donations."""

from datetime import datetime

from pydantic import Field

from app.schemas.common import CamelModel


class DonationCreate(CamelModel):
    donor_id: str = Field(..., min_length=1)
    donation_date: str = Field(..., min_length=1, max_length=32)
    donation_time: str = Field(..., min_length=1, max_length=16)
    notes: str = ""


class DonationOut(CamelModel):
    id: str
    donor_id: str
    donation_date: str
    donation_time: str
    notes: str
    created_at: datetime


class DonationWithDonor(DonationOut):
    """Donation joined with the owning donor's display fields."""

    donor_name: str
    donor_bi_number: str
    blood_type: str
