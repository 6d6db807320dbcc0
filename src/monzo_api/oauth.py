"""
OAuth2 authorization-code flow for Monzo.

1. Send the user to build_authorization_url(state) (or use
   create_authorization_request() to get a fresh state with the URL).
2. Monzo redirects back to the redirect URI with ``code`` and ``state``.
   Check the state matches before continuing.
3. exchange_authorization_code(code) returns an authenticated MonzoClient.
"""

import logging
import secrets
from dataclasses import dataclass
from urllib.parse import urlencode

from .client import TOKEN_ENDPOINT, MonzoClient
from .config import MonzoConfig
from .credentials import AppCredentials, UserCredentials
from .transport import Transport

logger = logging.getLogger(__name__)

STATE_PREFIX = "state"


def generate_state() -> str:
    """Unpredictable anti-CSRF state value."""
    return f"{STATE_PREFIX}_{secrets.token_hex(16)}"


@dataclass(frozen=True)
class AuthorizationRequest:
    """A freshly generated state and the authorization URL that carries it."""

    state: str
    url: str


class MonzoOAuthClient:
    """Client holding app credentials only, used to obtain a user token."""

    def __init__(
        self,
        app: AppCredentials,
        config: MonzoConfig | None = None,
        transport: Transport | None = None,
    ):
        self.app = app
        self.config = config or (transport.config if transport else MonzoConfig())
        self.transport = transport or Transport(self.config)

    def build_authorization_url(self, state: str) -> str:
        """URL to send the user to, carrying the given state."""
        if not state:
            raise ValueError("state must be a non-empty string")
        query = urlencode(
            {
                "client_id": self.app.client_id,
                "redirect_uri": self.app.redirect_uri,
                "response_type": "code",
                "state": state,
            }
        )
        return f"{self.config.auth_url.rstrip('/')}?{query}"

    def create_authorization_request(self) -> AuthorizationRequest:
        """Generate a new state and the matching authorization URL.

        The caller must keep the state and compare it with the one Monzo
        sends back to the redirect URI.
        """
        state = generate_state()
        return AuthorizationRequest(state=state, url=self.build_authorization_url(state))

    def get_oauth_url(self, state: str | None = None) -> str | AuthorizationRequest:
        """URL string when a state is given, AuthorizationRequest otherwise."""
        if state is not None:
            return self.build_authorization_url(state)
        return self.create_authorization_request()

    def exchange_authorization_code(self, code: str) -> MonzoClient:
        """
        Exchange the code from the redirect for an access token.

        Returns:
            MonzoClient for the user, holding the app credentials so it
            can refresh()

        Raises:
            MonzoAPIError: The token endpoint rejected the code or
                returned no access token
        """
        data = self.transport.request(
            "POST",
            TOKEN_ENDPOINT,
            data={
                "grant_type": "authorization_code",
                "client_id": self.app.client_id,
                "client_secret": self.app.client_secret,
                "redirect_uri": self.app.redirect_uri,
                "code": code,
            },
            require=("access_token",),
        )
        credentials = UserCredentials.from_api_response(data, self.app)
        logger.info("Obtained access token for user %s", credentials.user_id or "unknown")
        return MonzoClient(credentials, app=self.app, config=self.config, transport=self.transport)
