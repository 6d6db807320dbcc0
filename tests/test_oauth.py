"""
Tests for the OAuth authorization-code flow.
"""

from urllib.parse import parse_qs, urlparse

import pytest
import responses

from fixtures import BASE_URL, SAMPLE_TOKEN_RESPONSE, form_of
from monzo_api import MonzoAPIError, MonzoClient, MonzoConfig, MonzoOAuthClient
from monzo_api.oauth import AuthorizationRequest, generate_state


@pytest.fixture
def oauth(app_credentials) -> MonzoOAuthClient:
    return MonzoOAuthClient(app_credentials)


class TestAuthorizationUrl:
    """Test authorization URL construction."""

    def test_exact_url(self, oauth):
        """URL matches the documented example byte for byte."""
        assert oauth.build_authorization_url("state") == (
            "https://auth.monzo.com?client_id=oauth2client_test"
            "&redirect_uri=https%3A%2F%2Fexample.com%2Foauth"
            "&response_type=code&state=state"
        )

    @pytest.mark.parametrize("state", ["abc", "state_0123456789abcdef", "a b&c=d/é"])
    def test_url_carries_state_and_app(self, oauth, state):
        url = oauth.build_authorization_url(state)
        query = parse_qs(urlparse(url).query)

        assert query == {
            "client_id": ["oauth2client_test"],
            "redirect_uri": ["https://example.com/oauth"],
            "response_type": ["code"],
            "state": [state],
        }

    def test_empty_state_rejected(self, oauth):
        with pytest.raises(ValueError):
            oauth.build_authorization_url("")

    def test_custom_auth_url(self, app_credentials):
        oauth = MonzoOAuthClient(app_credentials, config=MonzoConfig(auth_url="https://auth.test/"))
        assert oauth.build_authorization_url("s").startswith("https://auth.test?client_id=")

    def test_create_authorization_request(self, oauth):
        request = oauth.create_authorization_request()

        assert isinstance(request, AuthorizationRequest)
        assert request.state
        assert request.url == oauth.build_authorization_url(request.state)

    def test_generated_states_differ(self, oauth):
        states = {oauth.create_authorization_request().state for _ in range(20)}
        assert len(states) == 20

    def test_generate_state_format(self):
        state = generate_state()
        assert state.startswith("state_")
        assert len(state) == len("state_") + 32

    def test_get_oauth_url_shapes(self, oauth):
        assert oauth.get_oauth_url("state") == oauth.build_authorization_url("state")

        request = oauth.get_oauth_url()
        assert isinstance(request, AuthorizationRequest)
        assert isinstance(request.url, str)
        assert isinstance(request.state, str)


class TestExchangeAuthorizationCode:
    """Test code-for-token exchange."""

    @responses.activate
    def test_exchange_success(self, oauth, app_credentials):
        responses.add(
            responses.POST,
            f"{BASE_URL}/oauth2/token",
            json=SAMPLE_TOKEN_RESPONSE,
            status=200,
        )

        client = oauth.exchange_authorization_code("auth_code_123")

        assert len(responses.calls) == 1
        request = responses.calls[0].request
        assert request.headers["Content-Type"] == "application/x-www-form-urlencoded"
        assert "Authorization" not in request.headers
        assert form_of(request) == {
            "grant_type": "authorization_code",
            "client_id": "oauth2client_test",
            "client_secret": "secret",
            "redirect_uri": "https://example.com/oauth",
            "code": "auth_code_123",
        }

        assert isinstance(client, MonzoClient)
        assert client.app == app_credentials
        # Response merged with the app credentials
        expected = {
            **SAMPLE_TOKEN_RESPONSE,
            "client_secret": "secret",
            "redirect_uri": "https://example.com/oauth",
        }
        assert client.credentials.to_dict() == expected

    @responses.activate
    def test_returned_client_uses_token(self, oauth):
        responses.add(responses.POST, f"{BASE_URL}/oauth2/token", json=SAMPLE_TOKEN_RESPONSE)
        responses.add(
            responses.GET,
            f"{BASE_URL}/ping/whoami",
            json={
                "authenticated": True,
                "client_id": "oauth2client_test",
                "user_id": "user_00009237aqC8c5umZmrRdh",
            },
        )

        client = oauth.exchange_authorization_code("code")
        info = client.whoami()

        assert info.authenticated is True
        assert responses.calls[1].request.headers["Authorization"] == "Bearer access_token_abc"

    @responses.activate
    def test_exchange_failure(self, oauth):
        responses.add(
            responses.POST,
            f"{BASE_URL}/oauth2/token",
            json={"code": "bad_request.invalid_grant", "message": "Invalid authorization code"},
            status=400,
        )

        with pytest.raises(MonzoAPIError) as exc_info:
            oauth.exchange_authorization_code("bad")

        assert exc_info.value.status_code == 400
        assert exc_info.value.code == "bad_request.invalid_grant"
        # No retry
        assert len(responses.calls) == 1

    @responses.activate
    def test_exchange_without_access_token(self, oauth):
        responses.add(responses.POST, f"{BASE_URL}/oauth2/token", json={"user_id": "user_1"})

        with pytest.raises(MonzoAPIError) as exc_info:
            oauth.exchange_authorization_code("c")

        assert exc_info.value.status_code == 200
        assert "access_token" in exc_info.value.message
