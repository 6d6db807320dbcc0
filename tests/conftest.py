"""Test fixtures and utilities."""

import pytest

from monzo_api import AppCredentials, MonzoClient, UserCredentials


@pytest.fixture
def app_credentials() -> AppCredentials:
    return AppCredentials(
        client_id="oauth2client_test",
        client_secret="secret",
        redirect_uri="https://example.com/oauth",
    )


@pytest.fixture
def user_credentials() -> UserCredentials:
    return UserCredentials(
        access_token="access_token_abc",
        client_id="oauth2client_test",
        user_id="user_00009237aqC8c5umZmrRdh",
        expires_in=21600,
        refresh_token="refresh_token_xyz",
    )


@pytest.fixture
def client(user_credentials, app_credentials) -> MonzoClient:
    return MonzoClient(user_credentials, app=app_credentials)


@pytest.fixture(autouse=True)
def _clear_monzo_env(monkeypatch):
    """Keep MONZO_* variables from the developer's shell out of the tests."""
    for name in (
        "MONZO_API_URL",
        "MONZO_AUTH_URL",
        "MONZO_TIMEOUT",
        "MONZO_CLIENT_ID",
        "MONZO_CLIENT_SECRET",
        "MONZO_REDIRECT_URI",
        "MONZO_ACCESS_TOKEN",
        "MONZO_REFRESH_TOKEN",
        "MONZO_USER_ID",
    ):
        monkeypatch.delenv(name, raising=False)
