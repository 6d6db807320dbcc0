"""
App and user credentials.

App credentials identify the OAuth client registered in the Monzo developer
portal. User credentials are what the token endpoint hands back after an
authorization code exchange or a refresh. Both are immutable: a refresh
produces a new UserCredentials value.
"""

from dataclasses import asdict, dataclass


@dataclass(frozen=True)
class AppCredentials:
    """OAuth client credentials."""

    client_id: str
    client_secret: str
    redirect_uri: str


@dataclass(frozen=True)
class UserCredentials:
    """Access token (and friends) for a single Monzo user."""

    access_token: str
    client_id: str = ""
    user_id: str = ""
    token_type: str = "Bearer"
    expires_in: int | None = None
    # Only confidential clients receive a refresh token
    refresh_token: str | None = None
    # Retained from the app credentials when merged after an exchange
    client_secret: str | None = None
    redirect_uri: str | None = None

    @classmethod
    def from_api_response(
        cls, data: dict, app: AppCredentials | None = None
    ) -> "UserCredentials":
        """
        Build credentials from a /oauth2/token response.

        The response body is merged with the app credentials, the body
        winning on conflicting keys.
        """
        merged: dict = {}
        if app is not None:
            merged.update(asdict(app))
        merged.update(data)

        expires_in = merged.get("expires_in")
        return cls(
            access_token=merged["access_token"],
            client_id=merged.get("client_id", ""),
            user_id=merged.get("user_id", ""),
            token_type=merged.get("token_type") or "Bearer",
            expires_in=int(expires_in) if expires_in is not None else None,
            refresh_token=merged.get("refresh_token"),
            client_secret=merged.get("client_secret"),
            redirect_uri=merged.get("redirect_uri"),
        )

    @property
    def authorization_header(self) -> str:
        """Value for the Authorization header."""
        return f"{self.token_type} {self.access_token}"

    def to_dict(self) -> dict:
        """Wire shape, without unset optional fields."""
        return {k: v for k, v in asdict(self).items() if v is not None}

    def __repr__(self) -> str:
        # Never print the tokens or the secret
        return (
            f"UserCredentials(user_id={self.user_id!r}, client_id={self.client_id!r}, "
            f"token_type={self.token_type!r}, expires_in={self.expires_in!r})"
        )
