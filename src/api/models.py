"""
API request and response models.

Pydantic models for FastAPI endpoint validation and OpenAPI schema generation.
JSON field names are camelCase; Python attributes stay snake_case.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model exposing camelCase aliases and accepting both spellings."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TripResponse(CamelModel):
    """A trip with its destination countries."""

    id: int
    name: str
    description: str
    date_from: datetime
    date_to: datetime
    max_people: int
    countries: list[str]


class ClientTripResponse(CamelModel):
    """A trip a client is registered to."""

    trip_id: int
    name: str
    description: str
    date_from: datetime
    date_to: datetime
    max_people: int
    registered_at: int = Field(..., description="Registration date as YYYYMMDD")
    payment_date: int | None = Field(None, description="Payment date as YYYYMMDD")


class CreateClientRequest(CamelModel):
    """
    Request model for client creation.

    Fields are optional at the schema level; blank or missing required
    fields are rejected by the domain with 400 rather than 422.
    """

    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    telephone: str | None = None
    pesel: str | None = None


class CreateClientResponse(CamelModel):
    """Response model for successful client creation."""

    client_id: int


class MessageResponse(BaseModel):
    """Response model for successful enrollment changes."""

    message: str


class ErrorResponse(BaseModel):
    """Standard error response model."""

    detail: str
