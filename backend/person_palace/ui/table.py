"""
Persons table view-model: client-side column sorting and row rendering.
"""

import locale
import logging
from datetime import date
from functools import cmp_to_key
from typing import Literal, Sequence

from pydantic import BaseModel, ConfigDict, Field

from person_palace.core.config import get_settings
from person_palace.schemas.person import Person

logger = logging.getLogger(__name__)

SortDirection = Literal["asc", "desc"]
TableState = Literal["loading", "empty", "populated"]

COLUMNS: tuple[str, ...] = ("Name", "Company", "Title", "Phone", "DOB")

LOADING_MESSAGE = "Loading..."
EMPTY_MESSAGE = "No persons found."


class SortState(BaseModel):
    model_config = ConfigDict(frozen=True)

    key: str | None = None
    direction: SortDirection = "asc"


class TableRow(BaseModel):
    key: str
    cells: dict[str, str]
    edit_enabled: bool
    delete_enabled: bool


class TableView(BaseModel):
    state: TableState
    sort: SortState
    rows: list[TableRow] = Field(default_factory=list)
    message: str | None = None


def _is_missing(value: str | None) -> bool:
    return value is None or value == ""


def sort_persons(
    persons: Sequence[Person],
    key: str | None,
    direction: SortDirection = "asc",
) -> list[Person]:
    """
    Stable sort by one column. Missing values always sort last, whichever the
    direction; present values use locale-aware comparison.
    """
    if key is None:
        return list(persons)
    if key not in COLUMNS:
        raise ValueError(f"Unknown sort column: {key!r}")
    sign = -1 if direction == "desc" else 1

    def compare(a: Person, b: Person) -> int:
        va = getattr(a, key)
        vb = getattr(b, key)
        if _is_missing(va) and _is_missing(vb):
            return 0
        if _is_missing(va):
            return 1
        if _is_missing(vb):
            return -1
        return sign * locale.strcoll(str(va), str(vb))

    return sorted(persons, key=cmp_to_key(compare))


def format_dob(value: str | None, fmt: str | None = None) -> str:
    """Render a wire DOB for display; blank when absent or unparseable."""
    if not value:
        return ""
    try:
        parsed = date.fromisoformat(value)
    except ValueError:
        logger.debug("Unparseable DOB %r", value)
        return ""
    return parsed.strftime(fmt or get_settings().date_display_format)


class PersonTable:
    """Holds the sort state; receives the record list on every render."""

    def __init__(self, date_format: str | None = None) -> None:
        self.sort = SortState()
        self._date_format = date_format

    def toggle_sort(self, column: str) -> SortState:
        """Header click: new column sorts ascending, same column flips direction."""
        if column not in COLUMNS:
            raise ValueError(f"Unknown sort column: {column!r}")
        if self.sort.key == column:
            direction: SortDirection = "desc" if self.sort.direction == "asc" else "asc"
            self.sort = SortState(key=column, direction=direction)
        else:
            self.sort = SortState(key=column, direction="asc")
        return self.sort

    def sorted(self, persons: Sequence[Person]) -> list[Person]:
        return sort_persons(persons, self.sort.key, self.sort.direction)

    def _row(self, person: Person, busy: bool) -> TableRow:
        return TableRow(
            key=person.id,
            cells={
                "Name": person.Name,
                "Company": person.Company or "",
                "Title": person.Title or "",
                "Phone": person.Phone or "",
                "DOB": format_dob(person.DOB, self._date_format),
            },
            edit_enabled=not busy,
            delete_enabled=not busy,
        )

    def render(
        self,
        persons: Sequence[Person],
        loading: bool = False,
        busy: bool = False,
    ) -> TableView:
        """
        loading: initial fetch in progress (takes precedence over empty).
        busy: a mutation is in flight; row actions are disabled.
        """
        if loading:
            return TableView(state="loading", sort=self.sort, message=LOADING_MESSAGE)
        if not persons:
            return TableView(state="empty", sort=self.sort, message=EMPTY_MESSAGE)
        return TableView(
            state="populated",
            sort=self.sort,
            rows=[self._row(p, busy) for p in self.sorted(persons)],
        )
