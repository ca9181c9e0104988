"""Unit tests for the persons backend client."""

from datetime import date
from unittest.mock import patch

import pytest
import requests

from conftest import BASE_URL, make_response
from person_palace.schemas.person import PersonCreate, PersonUpdate
from person_palace.services.person_service import PersonService, RequestError

REQUEST = "person_palace.services.person_service.requests.request"


@pytest.fixture
def service() -> PersonService:
    return PersonService(base_url=BASE_URL + "/", timeout=5)


class TestListPersons:
    def test_list_returns_records_in_server_order(self, service):
        body = [
            {"id": "b", "Name": "Bo", "DOB": "2000-01-01"},
            {"id": "a", "Name": "Ann", "Company": "Acme"},
        ]
        with patch(REQUEST, return_value=make_response(200, body)) as req:
            persons = service.list_persons()

        assert [p.id for p in persons] == ["b", "a"]
        assert persons[0].DOB == "2000-01-01"
        assert persons[1].Company == "Acme"
        req.assert_called_once_with(
            method="GET",
            url=f"{BASE_URL}/persons",
            headers=None,
            json=None,
            timeout=5,
        )

    def test_list_normalises_drifted_identifier(self, service):
        body = [{"PersonId": 7, "Name": "Cy"}]
        with patch(REQUEST, return_value=make_response(200, body)):
            persons = service.list_persons()
        assert persons[0].id == "7"
        assert "PersonId" not in persons[0].model_dump()

    def test_list_non_success_raises_request_error(self, service):
        with patch(REQUEST, return_value=make_response(500, {"error": "boom"})):
            with pytest.raises(RequestError) as exc_info:
                service.list_persons()
        err = exc_info.value
        assert err.message == "Failed to fetch persons"
        assert err.status_code == 500
        assert err.detail == {"error": "boom"}

    def test_list_non_array_body_raises(self, service):
        with patch(REQUEST, return_value=make_response(200, {"persons": []})):
            with pytest.raises(RequestError, match="Failed to fetch persons"):
                service.list_persons()

    def test_transport_failure_is_wrapped(self, service):
        with patch(REQUEST, side_effect=requests.ConnectionError("refused")):
            with pytest.raises(RequestError) as exc_info:
                service.list_persons()
        assert exc_info.value.status_code is None
        assert isinstance(exc_info.value.__cause__, requests.ConnectionError)


class TestCreatePerson:
    def test_create_posts_payload_without_identifier(self, service):
        created = {"id": "42", "Name": "Ann", "DOB": "1990-05-01"}
        with patch(REQUEST, return_value=make_response(201, created)) as req:
            person = service.create_person(PersonCreate(Name="Ann", DOB=date(1990, 5, 1)))

        assert person.id == "42"
        kwargs = req.call_args.kwargs
        assert kwargs["method"] == "POST"
        assert kwargs["url"] == f"{BASE_URL}/persons"
        assert kwargs["json"] == {"Name": "Ann", "DOB": "1990-05-01"}
        assert kwargs["headers"] == {"Content-Type": "application/json"}

    def test_create_failure_keeps_status_and_text_body(self, service):
        with patch(REQUEST, return_value=make_response(400, text="bad input")):
            with pytest.raises(RequestError) as exc_info:
                service.create_person(PersonCreate(Name="Ann"))
        assert exc_info.value.message == "Failed to create person"
        assert exc_info.value.status_code == 400
        assert exc_info.value.detail == "bad input"

    def test_create_response_without_identifier_raises(self, service):
        with patch(REQUEST, return_value=make_response(200, {"Name": "Ann"})):
            with pytest.raises(RequestError, match="Failed to create person"):
                service.create_person(PersonCreate(Name="Ann"))


class TestUpdatePerson:
    def test_update_sends_only_set_fields(self, service):
        updated = {"id": "9", "Name": "Bo", "Title": "Boss"}
        with patch(REQUEST, return_value=make_response(200, updated)) as req:
            person = service.update_person("9", PersonUpdate(Title="Boss"))

        assert person.Title == "Boss"
        kwargs = req.call_args.kwargs
        assert kwargs["method"] == "PUT"
        assert kwargs["url"] == f"{BASE_URL}/persons/9"
        assert kwargs["json"] == {"Title": "Boss"}

    def test_update_explicit_clear_is_sent(self, service):
        updated = {"id": "9", "Name": "Bo"}
        with patch(REQUEST, return_value=make_response(200, updated)) as req:
            service.update_person("9", PersonUpdate(Company="", DOB=None))
        assert req.call_args.kwargs["json"] == {"Company": "", "DOB": None}

    def test_update_404_raises(self, service):
        with patch(REQUEST, return_value=make_response(404, {"message": "not found"})):
            with pytest.raises(RequestError) as exc_info:
                service.update_person("missing", PersonUpdate(Name="X"))
        assert exc_info.value.message == "Failed to update person"
        assert exc_info.value.status_code == 404


class TestDeletePerson:
    def test_delete_has_no_body_and_returns_none(self, service):
        with patch(REQUEST, return_value=make_response(204)) as req:
            assert service.delete_person("5") is None
        kwargs = req.call_args.kwargs
        assert kwargs["method"] == "DELETE"
        assert kwargs["url"] == f"{BASE_URL}/persons/5"
        assert kwargs["json"] is None

    def test_delete_accepts_empty_200(self, service):
        with patch(REQUEST, return_value=make_response(200)):
            service.delete_person("5")

    def test_delete_failure_raises(self, service):
        with patch(REQUEST, return_value=make_response(500)):
            with pytest.raises(RequestError, match="Failed to delete person"):
                service.delete_person("5")


def test_base_url_defaults_to_settings(monkeypatch):
    from person_palace.core.config import get_settings

    monkeypatch.setenv("PERSONS_API_ROOT", "http://backend.local/api/")
    get_settings.cache_clear()
    try:
        assert PersonService().base_url == "http://backend.local/api"
    finally:
        get_settings.cache_clear()
