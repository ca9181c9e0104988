"""
Person create/edit form: field validation and date conversion between the
form (datetime.date for the picker) and the wire ("yyyy-mm-dd" string).
The form never calls the API; a successful submit hands the payload back.
"""

import logging
from datetime import date
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from person_palace.schemas.person import (
    COMPANY_MAX_LENGTH,
    NAME_MIN_LENGTH,
    TITLE_MAX_LENGTH,
    Person,
    PersonCreate,
    PersonUpdate,
)

logger = logging.getLogger(__name__)

FormMode = Literal["create", "edit"]
ErrorCode = Literal["required", "too-long"]

OPTIONAL_TEXT_FIELDS: tuple[str, ...] = ("Company", "Title", "Phone")

# pydantic error type -> (code, message)
_ERROR_MESSAGES: dict[str, tuple[ErrorCode, str]] = {
    "string_too_short": ("required", "Name is required"),
    "missing": ("required", "Name is required"),
    "string_too_long": ("too-long", "Max 50 chars"),
}


class FieldError(BaseModel):
    code: ErrorCode
    message: str


class PersonValidationError(ValueError):
    """Client-side constraint violation. Carries one FieldError per failing field."""

    def __init__(self, errors: dict[str, FieldError]) -> None:
        self.errors = errors
        summary = ", ".join(f"{name}: {err.code}" for name, err in errors.items())
        super().__init__(f"Invalid person form ({summary})")


class PersonFormValues(BaseModel):
    """Raw form state; blank strings mean "not filled in"."""
    Name: str = ""
    Company: str = ""
    Title: str = ""
    Phone: str = ""
    DOB: date | None = None


class _PersonFormRules(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    Name: str = Field(..., min_length=NAME_MIN_LENGTH)
    Company: str = Field("", max_length=COMPANY_MAX_LENGTH)
    Title: str = Field("", max_length=TITLE_MAX_LENGTH)
    Phone: str = ""
    DOB: date | None = None


def parse_wire_date(value: str | None) -> date | None:
    """'2000-01-01' -> date(2000, 1, 1). Blank or malformed input gives None."""
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        logger.warning("Ignoring malformed DOB %r", value)
        return None


def form_values_from_person(person: Person) -> PersonFormValues:
    """Pre-fill values for edit mode."""
    return PersonFormValues(
        Name=person.Name,
        Company=person.Company or "",
        Title=person.Title or "",
        Phone=person.Phone or "",
        DOB=parse_wire_date(person.DOB),
    )


def validate_form(values: PersonFormValues) -> PersonFormValues:
    """Return the cleaned values or raise PersonValidationError with every failing field."""
    try:
        rules = _PersonFormRules.model_validate(values.model_dump())
    except ValidationError as e:
        errors: dict[str, FieldError] = {}
        for err in e.errors():
            field_name = str(err["loc"][0]) if err["loc"] else "__root__"
            code, message = _ERROR_MESSAGES.get(err["type"], ("required", err["msg"]))
            errors.setdefault(field_name, FieldError(code=code, message=message))
        raise PersonValidationError(errors) from e
    return PersonFormValues.model_validate(rules.model_dump())


def build_submit_payload(
    values: PersonFormValues,
    original: Person | None = None,
) -> PersonCreate | PersonUpdate:
    """
    Create mode (no original): blank optional fields stay unset.
    Edit mode: non-blank fields are sent; a field the record had and the
    user blanked is sent as an explicit clear ("" or DOB=None).
    """
    data: dict[str, object] = {"Name": values.Name}
    for name in OPTIONAL_TEXT_FIELDS:
        value = getattr(values, name)
        if value:
            data[name] = value
        elif original is not None and getattr(original, name):
            data[name] = ""
    if values.DOB is not None:
        data["DOB"] = values.DOB
    elif original is not None and original.DOB:
        data["DOB"] = None

    if original is None:
        return PersonCreate(**data)
    return PersonUpdate(**data)


class PersonForm:
    """Modal form state. Each closed -> open transition starts a new session."""

    def __init__(self) -> None:
        self.is_open = False
        self.values = PersonFormValues()
        self.errors: dict[str, FieldError] = {}
        self.original: Person | None = None
        self.busy = False
        self.session = 0

    @property
    def mode(self) -> FormMode:
        return "edit" if self.original is not None else "create"

    @property
    def submit_label(self) -> str:
        return "Saving..." if self.busy else "Save"

    @property
    def inputs_enabled(self) -> bool:
        return not self.busy

    def open(self, person: Person | None = None) -> None:
        """Open in edit mode for ``person`` or in create mode with blank fields."""
        if self.is_open:
            return
        self.original = person
        self.values = form_values_from_person(person) if person is not None else PersonFormValues()
        self.errors = {}
        self.session += 1
        self.is_open = True

    def close(self) -> None:
        self.is_open = False
        self.errors = {}

    def submit(self, values: PersonFormValues | None = None) -> PersonCreate | PersonUpdate:
        """Validate and build the payload. Errors are stored for inline display and raised."""
        if values is not None:
            self.values = values
        try:
            cleaned = validate_form(self.values)
        except PersonValidationError as e:
            self.errors = e.errors
            raise
        self.errors = {}
        return build_submit_payload(cleaned, self.original)
