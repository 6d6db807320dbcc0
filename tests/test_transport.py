"""
Tests for the HTTP transport: error mapping and body handling.
"""

from unittest.mock import patch

import pytest
import requests
import responses

from fixtures import BASE_URL
from monzo_api import MonzoAPIError, MonzoConfig, MonzoConnectionError
from monzo_api.transport import Transport


@pytest.fixture
def transport() -> Transport:
    return Transport(MonzoConfig())


class TestTransport:
    @responses.activate
    def test_api_error_fields(self, transport):
        responses.add(
            responses.GET,
            f"{BASE_URL}/accounts",
            json={
                "code": "unauthorized.bad_access_token",
                "message": "Access token has expired",
            },
            status=401,
        )

        with pytest.raises(MonzoAPIError) as exc_info:
            transport.request("GET", "/accounts", authorization="Bearer tok")

        error = exc_info.value
        assert error.status_code == 401
        assert error.code == "unauthorized.bad_access_token"
        assert error.message == "Access token has expired"
        assert "unauthorized.bad_access_token" in error.response_body
        assert "401" in str(error)

    @responses.activate
    def test_api_error_non_json_body(self, transport):
        responses.add(responses.GET, f"{BASE_URL}/accounts", body="Bad Gateway", status=502)

        with pytest.raises(MonzoAPIError) as exc_info:
            transport.request("GET", "/accounts")

        assert exc_info.value.status_code == 502
        assert exc_info.value.code is None
        assert exc_info.value.response_body == "Bad Gateway"

    @responses.activate
    def test_no_retry_on_server_error(self, transport):
        responses.add(responses.GET, f"{BASE_URL}/accounts", json={}, status=503)

        with pytest.raises(MonzoAPIError):
            transport.request("GET", "/accounts")

        assert len(responses.calls) == 1

    @responses.activate
    def test_connection_error(self, transport):
        responses.add(
            responses.GET,
            f"{BASE_URL}/accounts",
            body=requests.exceptions.ConnectionError("refused"),
        )

        with pytest.raises(MonzoConnectionError) as exc_info:
            transport.request("GET", "/accounts")

        assert isinstance(exc_info.value.__cause__, requests.exceptions.ConnectionError)

    @responses.activate
    def test_timeout(self, transport):
        responses.add(
            responses.GET,
            f"{BASE_URL}/accounts",
            body=requests.exceptions.ReadTimeout("slow"),
        )

        with pytest.raises(MonzoConnectionError):
            transport.request("GET", "/accounts")

    @responses.activate
    def test_invalid_json(self, transport):
        responses.add(responses.GET, f"{BASE_URL}/accounts", body="not json", status=200)

        with pytest.raises(MonzoAPIError) as exc_info:
            transport.request("GET", "/accounts")

        assert exc_info.value.status_code == 200

    @responses.activate
    def test_unwrap(self, transport):
        responses.add(responses.GET, f"{BASE_URL}/accounts", json={"accounts": [1, 2]})

        assert transport.request("GET", "/accounts", unwrap="accounts") == [1, 2]

    @responses.activate
    def test_unwrap_missing_field(self, transport):
        responses.add(responses.GET, f"{BASE_URL}/accounts", json={"other": []})

        with pytest.raises(MonzoAPIError):
            transport.request("GET", "/accounts", unwrap="accounts")

    @responses.activate
    def test_empty_body(self, transport):
        responses.add(responses.DELETE, f"{BASE_URL}/webhooks/webhook_1", body="", status=200)

        assert transport.request("DELETE", "/webhooks/webhook_1") == {}

    @responses.activate
    def test_authorization_not_stored_on_session(self, transport):
        responses.add(responses.GET, f"{BASE_URL}/a", json={})
        responses.add(responses.GET, f"{BASE_URL}/b", json={})

        transport.request("GET", "/a", authorization="Bearer one")
        transport.request("GET", "/b")

        assert responses.calls[0].request.headers["Authorization"] == "Bearer one"
        assert "Authorization" not in responses.calls[1].request.headers
        assert "Authorization" not in transport.session.headers

    def test_timeout_passed_to_session(self):
        transport = Transport(MonzoConfig(timeout=7))

        with patch.object(transport.session, "request") as request:
            request.return_value.ok = True
            request.return_value.content = b""
            transport.request("GET", "/ping/whoami")

        assert request.call_args.kwargs["timeout"] == 7
        assert request.call_args.kwargs["url"] == f"{BASE_URL}/ping/whoami"

    @responses.activate
    def test_required_field_missing(self, transport):
        responses.add(responses.POST, f"{BASE_URL}/oauth2/token", json={"user_id": "user_1"})

        with pytest.raises(MonzoAPIError) as exc_info:
            transport.request("POST", "/oauth2/token", require=("access_token",))

        assert exc_info.value.status_code == 200
        assert exc_info.value.response_body == '{"user_id": "user_1"}'

    @responses.activate
    def test_supplied_session_headers_untouched(self):
        session = requests.Session()
        before = dict(session.headers)
        responses.add(responses.GET, f"{BASE_URL}/accounts", json={})

        Transport(MonzoConfig(), session=session).request("GET", "/accounts")

        assert dict(session.headers) == before
        assert responses.calls[0].request.headers["Accept"] == "application/json"
