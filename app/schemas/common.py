"""Shared schema base: snake_case in Python, camelCase on the wire."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        extra="ignore",
    )


class MessageResponse(BaseModel):
    """Plain acknowledgement returned by mutations and by error handlers."""

    message: str = Field(..., description="User-facing message")
