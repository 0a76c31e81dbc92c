"""Shared Pydantic schemas for common API elements."""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base schema exposing camelCase keys on the wire.

    Fields are declared in snake_case and may be populated by name, so ORM
    rows and service views validate directly via ``from_attributes``.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class MessageResponse(BaseModel):
    """Plain acknowledgement returned by mutating endpoints."""

    message: str = Field(..., description="Human readable outcome")


class ErrorResponse(BaseModel):
    """Body of every error response."""

    message: str
    errors: dict[str, list[str]] | None = None
