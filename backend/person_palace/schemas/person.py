"""
Person schema (API contract). The wire shape of the remote persons backend.

``id`` is the one canonical identifier. Some backend versions answer with
``PersonId`` instead; it is accepted on input and never emitted.
"""

from datetime import date
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

NAME_MIN_LENGTH = 1
COMPANY_MAX_LENGTH = 50
TITLE_MAX_LENGTH = 50


class PersonBase(BaseModel):
    Company: str | None = None
    Title: str | None = None
    Phone: str | None = None
    DOB: str | None = Field(None, description='ISO date "yyyy-mm-dd"')


class Person(PersonBase):
    """Response schema; one record as stored server-side."""
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: str = Field(..., validation_alias=AliasChoices("id", "PersonId"))
    Name: str

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: Any) -> Any:
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v


class PersonCreate(BaseModel):
    """Request body for creating a person. Name required; no identifier."""
    model_config = ConfigDict(extra="forbid")

    Name: str = Field(..., min_length=NAME_MIN_LENGTH, description="Full name")
    Company: str | None = Field(None, max_length=COMPANY_MAX_LENGTH)
    Title: str | None = Field(None, max_length=TITLE_MAX_LENGTH)
    Phone: str | None = None
    DOB: date | None = None

    def to_payload(self) -> dict[str, Any]:
        """JSON body: only fields that were explicitly set."""
        return self.model_dump(mode="json", exclude_unset=True)


class PersonUpdate(BaseModel):
    """
    Request body for partial update.
    Unset fields are omitted from the payload and left unchanged server-side;
    a field set to "" (or DOB set to None) is sent and clears the value.
    """
    model_config = ConfigDict(extra="forbid")

    Name: str | None = Field(None, min_length=NAME_MIN_LENGTH)
    Company: str | None = Field(None, max_length=COMPANY_MAX_LENGTH)
    Title: str | None = Field(None, max_length=TITLE_MAX_LENGTH)
    Phone: str | None = None
    DOB: date | None = None

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_unset=True)


class PersonListResponse(BaseModel):
    """List of persons."""
    persons: list[Person]
