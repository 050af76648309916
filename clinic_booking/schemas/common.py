"""Shared schema base classes and response envelopes."""

from datetime import datetime
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class ApiModel(BaseModel):
    """Base schema: snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class DateRange(ApiModel):
    """Inclusive instant range covered by a listing or generation run."""

    from_: datetime = Field(alias="from")
    to: datetime


class Envelope(ApiModel, Generic[T]):
    """Success envelope: an optional message plus the payload."""

    message: str | None = None
    data: T


class MessageResponse(ApiModel):
    """Success envelope without payload."""

    message: str


class ErrorBody(ApiModel):
    code: str
    message: str


class ErrorResponse(ApiModel):
    """Failure envelope."""

    error: ErrorBody
