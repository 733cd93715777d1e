"""Pydantic schemas for provinces."""

from datetime import datetime

from app.schemas.common import CamelModel


class ProvinceOut(CamelModel):
    id: str
    name: str
    created_at: datetime
