"""
Persons REST backend client.
One round trip per operation, JSON bodies, no retries (retrying is a caller concern).
"""

import logging
from typing import Any

import requests
from pydantic import ValidationError

from person_palace.core.config import get_settings
from person_palace.schemas.person import Person, PersonCreate, PersonUpdate

logger = logging.getLogger(__name__)

PERSONS_PATH = "/persons"


class RequestError(Exception):
    """Raised when a persons backend call fails (non-2xx, transport error, bad body)."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        detail: Any = None,
    ) -> None:
        self.message = message
        self.status_code = status_code
        self.detail = detail
        super().__init__(message)


class PersonService:
    """
    Persons backend service: list, create, update, delete.
    Non-success responses raise RequestError with a generic per-operation message;
    status code and decoded body are kept on the error for callers that care.
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
    ) -> None:
        settings = get_settings()
        self._base_url = (base_url or settings.persons_api_root).rstrip("/")
        self._timeout = timeout if timeout is not None else settings.persons_api_timeout

    @property
    def base_url(self) -> str:
        return self._base_url

    @staticmethod
    def _decode_body(response: requests.Response) -> Any:
        try:
            return response.json()
        except ValueError:
            return response.text or None

    def _request(
        self,
        method: str,
        path: str,
        failure_message: str,
        *,
        json: dict[str, Any] | None = None,
    ) -> Any:
        """
        Execute one HTTP request and return the decoded JSON body (None when empty).
        path: e.g. /persons/42 (leading slash optional).
        """
        url = f"{self._base_url}/{path.lstrip('/')}"
        headers = {"Content-Type": "application/json"} if json is not None else None
        try:
            resp = requests.request(
                method=method,
                url=url,
                headers=headers,
                json=json,
                timeout=self._timeout,
            )
        except requests.RequestException as e:
            logger.warning("Persons backend %s %s failed: %s", method, url, e)
            raise RequestError(failure_message) from e

        if not resp.ok:
            body = self._decode_body(resp)
            logger.warning("Persons backend %s %s -> %s", method, url, resp.status_code)
            raise RequestError(failure_message, status_code=resp.status_code, detail=body)

        if resp.status_code == 204 or not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as e:
            raise RequestError(failure_message, status_code=resp.status_code, detail=resp.text) from e

    @staticmethod
    def _to_person(data: Any, failure_message: str) -> Person:
        if not isinstance(data, dict):
            raise RequestError(failure_message, detail=data)
        try:
            return Person.model_validate(data)
        except ValidationError as e:
            raise RequestError(failure_message, detail=data) from e

    # -------------------------------------------------------------------------
    # Persons
    # -------------------------------------------------------------------------

    def list_persons(self) -> list[Person]:
        """Fetch all persons, in server order."""
        message = "Failed to fetch persons"
        data = self._request("GET", PERSONS_PATH, message)
        if not isinstance(data, list):
            raise RequestError(message, detail=data)
        return [self._to_person(item, message) for item in data]

    def create_person(self, data: PersonCreate) -> Person:
        """Create a person. Returns the created record with its assigned id."""
        message = "Failed to create person"
        body = self._request("POST", PERSONS_PATH, message, json=data.to_payload())
        return self._to_person(body, message)

    def update_person(self, person_id: str, data: PersonUpdate) -> Person:
        """Partially update a person; only fields set on ``data`` are sent."""
        message = "Failed to update person"
        body = self._request(
            "PUT",
            f"{PERSONS_PATH}/{person_id}",
            message,
            json=data.to_payload(),
        )
        return self._to_person(body, message)

    def delete_person(self, person_id: str) -> None:
        """Delete a person by id. The backend answers with an empty body."""
        self._request("DELETE", f"{PERSONS_PATH}/{person_id}", "Failed to delete person")


def get_person_service() -> PersonService:
    """Dependency: return a PersonService instance."""
    return PersonService()
