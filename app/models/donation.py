"""ORM model for donation events (append-only)."""

from sqlalchemy import Column, DateTime, String, Text

from app.models.base import Base, new_id, utcnow


class Donation(Base):
    """
    A single donation by a donor.

    donor_id is a plain reference: deleting a donor leaves its donations in place, and
    readers joining on donors treat a missing donor as unknown.
    """

    __tablename__ = "donations"

    id = Column(String(36), primary_key=True, default=new_id)
    donor_id = Column(String(36), nullable=False, index=True)
    donation_date = Column(String(32), nullable=False, index=True)
    donation_time = Column(String(16), nullable=False)
    notes = Column(Text, nullable=False, default="")
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
