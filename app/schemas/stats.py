"""Pydantic schemas for donor statistics."""

from pydantic import Field

from app.schemas.common import CamelModel


class BloodTypeStat(CamelModel):
    count: int = Field(..., ge=0)
    percentage: int = Field(..., ge=0, le=100)


class DonorStats(CamelModel):
    """Counts scoped to what the caller may see."""

    total_donors: int
    total_donations: int
    active_donors: int
    new_this_month: int
    blood_type_stats: dict[str, BloodTypeStat] = Field(
        default_factory=dict,
        description="Blood type -> count and rounded percentage of total donors.",
    )
