"""ORM model for registered blood donors."""

from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text

from app.models.base import Base, new_id, utcnow


class Donor(Base):
    """
    One donor, keyed by the unique national ID (BI) number.

    province_id and created_by are assigned from the caller's session, never from input.
    Date-like fields captured by the registration form (birth_date, last_donation) are
    kept as ISO strings; range filters compare them lexically.
    """

    __tablename__ = "donors"

    id = Column(String(36), primary_key=True, default=new_id)
    bi_number = Column(String(64), nullable=False, unique=True, index=True)
    full_name = Column(String(255), nullable=False)
    birth_date = Column(String(32), nullable=False)
    age = Column(Integer, nullable=False)
    gender = Column(String(1), nullable=False)
    municipality = Column(String(255), nullable=False)
    neighborhood = Column(String(255), nullable=False, default="")
    contact = Column(String(255), nullable=False, default="")
    position = Column(String(255), nullable=False, default="")
    department = Column(String(64), nullable=False, default="")
    blood_type = Column(String(3), nullable=False, index=True)
    rh_factor = Column(String(16), nullable=False)
    has_history = Column(Boolean, nullable=False, default=False)
    previous_donations = Column(Integer, nullable=False, default=0)
    last_donation = Column(String(32), nullable=False, default="")
    medical_restrictions = Column(Text, nullable=False, default="")
    is_apt_to_donate = Column(Boolean, nullable=False, default=True)
    available_for_future = Column(Boolean, nullable=False, default=True)
    preferred_contact = Column(String(16), nullable=False, default="call")
    observations = Column(Text, nullable=False, default="")
    province_id = Column(String(36), nullable=False, index=True)
    created_by = Column(String(36), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )
