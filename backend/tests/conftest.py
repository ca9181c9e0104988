"""
Shared fixtures: an in-memory persons backend, a recording notifier and a
helper for building canned ``requests`` responses.
"""

import json
from typing import Any

import pytest
import requests

from person_palace.schemas.person import Person, PersonCreate, PersonUpdate
from person_palace.services.person_service import RequestError
from person_palace.ui.notifier import Notification

BASE_URL = "https://persons.example.test/crud2"


def make_response(status_code: int = 200, body: Any = None, text: str | None = None) -> requests.Response:
    """Build a real requests.Response carrying ``body`` as JSON (or raw ``text``)."""
    resp = requests.Response()
    resp.status_code = status_code
    resp.url = BASE_URL
    resp.reason = "OK" if status_code < 400 else "Error"
    if text is not None:
        resp._content = text.encode("utf-8")
    elif body is not None:
        resp._content = json.dumps(body).encode("utf-8")
        resp.headers["Content-Type"] = "application/json"
    else:
        resp._content = b""
    return resp


class FakePersonService:
    """In-memory stand-in for PersonService with the same operation surface."""

    def __init__(self, persons: list[Person] | None = None) -> None:
        self._records: dict[str, dict[str, Any]] = {}
        self._next_id = 1
        self.calls: list[tuple[str, Any]] = []
        self.fail_with: RequestError | None = None
        for p in persons or []:
            self._records[p.id] = p.model_dump(exclude_none=True)
            if p.id.isdigit():
                self._next_id = max(self._next_id, int(p.id) + 1)

    def _check(self, op: str, arg: Any = None) -> None:
        self.calls.append((op, arg))
        if self.fail_with is not None:
            raise self.fail_with

    def list_persons(self) -> list[Person]:
        self._check("list")
        return [Person.model_validate(r) for r in self._records.values()]

    def create_person(self, data: PersonCreate) -> Person:
        self._check("create", data.to_payload())
        pid = str(self._next_id)
        self._next_id += 1
        self._records[pid] = {"id": pid, **data.to_payload()}
        return Person.model_validate(self._records[pid])

    def update_person(self, person_id: str, data: PersonUpdate) -> Person:
        self._check("update", (person_id, data.to_payload()))
        if person_id not in self._records:
            raise RequestError("Failed to update person", status_code=404)
        self._records[person_id].update(data.to_payload())
        return Person.model_validate(self._records[person_id])

    def delete_person(self, person_id: str) -> None:
        self._check("delete", person_id)
        if self._records.pop(person_id, None) is None:
            raise RequestError("Failed to delete person", status_code=404)


class RecordingNotifier:
    def __init__(self) -> None:
        self.notifications: list[Notification] = []

    def notify(self, notification: Notification) -> None:
        self.notifications.append(notification)

    @property
    def titles(self) -> list[str]:
        return [n.title for n in self.notifications]


@pytest.fixture
def people() -> list[Person]:
    return [
        Person(id="1", Name="Carol", Company="Initech", Title="CTO", Phone="555-0101", DOB="1985-03-12"),
        Person(id="2", Name="Alice", Company="Acme", DOB="1990-05-01"),
        Person(id="3", Name="Bob", Title="Engineer"),
    ]


@pytest.fixture
def backend(people: list[Person]) -> FakePersonService:
    return FakePersonService(people)


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()
