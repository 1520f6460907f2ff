"""Tests for HelpRequestClient with a mocked requests session."""

from datetime import datetime
from unittest.mock import MagicMock

import pytest
import requests

from helprequest_api.client import HelpRequestClient


def make_response(status_code=200, payload=None) -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.content = b"{}" if payload is not None else b""
    response.json.return_value = payload
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(response=response)
    return response


@pytest.fixture
def session() -> MagicMock:
    return MagicMock(spec=requests.Session)


@pytest.fixture
def api(session) -> HelpRequestClient:
    return HelpRequestClient(base_url="http://testserver/", api_key="tok", session=session)


class TestHelpRequestClient:

    def test_list_sends_bearer_token(self, api, session):
        session.request.return_value = make_response(payload=[{"id": 1}])

        data, error = api.list_help_requests()

        assert (data, error) == ([{"id": 1}], None)
        kwargs = session.request.call_args.kwargs
        assert kwargs["url"] == "http://testserver/api/helprequests/all"
        assert kwargs["headers"] == {"Authorization": "Bearer tok"}

    def test_create_sends_query_params(self, api, session):
        session.request.return_value = make_response(payload={"id": 5})

        data, error = api.create_help_request(
            requester_email="cgaucho@ucsb.edu",
            team_id="s22-5pm-3",
            table_or_breakout_room="7",
            request_time=datetime(2022, 4, 20, 17, 35),
            explanation="Need help",
            solved=True,
        )

        assert data == {"id": 5} and error is None
        kwargs = session.request.call_args.kwargs
        assert kwargs["method"] == "POST"
        assert kwargs["params"]["requestTime"] == "2022-04-20T17:35:00"
        assert kwargs["params"]["solved"] == "true"

    def test_update_sends_json_body_and_id_param(self, api, session):
        session.request.return_value = make_response(payload={"id": 5})

        api.update_help_request(
            5,
            requester_email="cgaucho@ucsb.edu",
            team_id="s22-5pm-3",
            table_or_breakout_room="7",
            request_time="2022-04-20T17:35:00",
            explanation="Need help",
            solved=False,
        )

        kwargs = session.request.call_args.kwargs
        assert kwargs["method"] == "PUT"
        assert kwargs["params"] == {"id": 5}
        assert kwargs["json"]["solved"] is False

    def test_not_found_is_returned_as_error(self, api, session):
        session.request.return_value = make_response(
            404, {"type": "EntityNotFoundException", "message": "HelpRequest with id 9 not found", "status": 404}
        )

        data, error = api.get_help_request(9)

        assert data is None
        assert error == {"status_code": 404, "message": "HelpRequest with id 9 not found"}

    def test_delete_returns_message(self, api, session):
        session.request.return_value = make_response(payload={"message": "HelpRequest with id 3 deleted"})

        assert api.delete_help_request(3) == ("HelpRequest with id 3 deleted", None)

    def test_connection_errors_are_returned_as_error(self, api, session):
        session.request.side_effect = requests.ConnectionError("refused")

        data, error = api.list_help_requests()

        assert data == []
        assert error["status_code"] is None

    def test_login_stores_token(self, session):
        client = HelpRequestClient(base_url="http://testserver", session=session)
        session.request.return_value = make_response(payload={"access_token": "new", "token_type": "bearer"})

        assert client.login("a@example.com", "pw") == ("new", None)
        assert client.api_key == "new"
