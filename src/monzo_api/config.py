"""
Configuration management.

Settings come from a YAML file, with environment variables taking
precedence. The library itself never needs a config file: the clients
accept a MonzoConfig directly and fall back to its defaults. The file is
used by the command line tool, which also writes tokens back into it.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from .credentials import AppCredentials, UserCredentials

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.monzo.com"
DEFAULT_AUTH_URL = "https://auth.monzo.com"
DEFAULT_TIMEOUT = 30


class ConfigValidationError(Exception):
    """Raised when configuration validation fails."""

    pass


@dataclass(frozen=True)
class MonzoConfig:
    """Where and how to reach the API.

    - base_url: API root for all endpoint calls
    - auth_url: Page the user is sent to for OAuth authorization
    - timeout: Request timeout in seconds, applied to every call
    """

    base_url: str = DEFAULT_API_URL
    auth_url: str = DEFAULT_AUTH_URL
    timeout: float = DEFAULT_TIMEOUT


@dataclass
class AppConfig:
    """OAuth client registered at developers.monzo.com."""

    client_id: str = ""
    client_secret: str = ""
    redirect_uri: str = ""


@dataclass
class TokenConfig:
    """Stored user token, if any."""

    access_token: str = ""
    refresh_token: str = ""
    user_id: str = ""


@dataclass
class Config:
    """Application configuration."""

    monzo: MonzoConfig = field(default_factory=MonzoConfig)
    app: AppConfig = field(default_factory=AppConfig)
    token: TokenConfig = field(default_factory=TokenConfig)

    def validate(self, require_token: bool = False) -> list[str]:
        """Validate configuration completeness.

        Args:
            require_token: Also require a stored access token

        Returns:
            List of validation errors (empty if valid)
        """
        errors: list[str] = []

        if not self.monzo.base_url:
            errors.append("monzo.base_url is required")
        if self.monzo.timeout <= 0:
            errors.append("monzo.timeout must be positive")

        if not self.app.client_id:
            errors.append("app.client_id is required")
        if not self.app.redirect_uri:
            errors.append("app.redirect_uri is required")

        if require_token and not self.token.access_token:
            errors.append("token.access_token is required (run 'exchange' first)")

        return errors

    def app_credentials(self) -> AppCredentials | None:
        """App credentials, or None when no client is configured."""
        if not self.app.client_id:
            return None
        return AppCredentials(
            client_id=self.app.client_id,
            client_secret=self.app.client_secret,
            redirect_uri=self.app.redirect_uri,
        )

    def user_credentials(self) -> UserCredentials | None:
        """Stored user credentials, or None when there is no access token."""
        if not self.token.access_token:
            return None
        return UserCredentials(
            access_token=self.token.access_token,
            refresh_token=self.token.refresh_token or None,
            user_id=self.token.user_id,
            client_id=self.app.client_id,
        )


def _read_yaml(config_path: Path) -> dict:
    if config_path.exists():
        with open(config_path) as f:
            return yaml.safe_load(f) or {}
    return {}


def load_config(config_path: Path) -> Config:
    """
    Load configuration from YAML file.

    Environment variables can override config values:
    - MONZO_API_URL
    - MONZO_AUTH_URL
    - MONZO_TIMEOUT (seconds)
    - MONZO_CLIENT_ID
    - MONZO_CLIENT_SECRET
    - MONZO_REDIRECT_URI
    - MONZO_ACCESS_TOKEN
    - MONZO_REFRESH_TOKEN
    - MONZO_USER_ID
    """
    data = _read_yaml(config_path)

    monzo_data = data.get("monzo") or {}
    timeout = monzo_data.get("timeout", DEFAULT_TIMEOUT)
    timeout_env = os.environ.get("MONZO_TIMEOUT", "")
    if timeout_env:
        try:
            timeout = float(timeout_env)
        except ValueError:
            raise ConfigValidationError(f"MONZO_TIMEOUT is not a number: {timeout_env!r}") from None

    monzo = MonzoConfig(
        base_url=os.environ.get("MONZO_API_URL", monzo_data.get("base_url", DEFAULT_API_URL)),
        auth_url=os.environ.get("MONZO_AUTH_URL", monzo_data.get("auth_url", DEFAULT_AUTH_URL)),
        timeout=float(timeout),
    )

    app_data = data.get("app") or {}
    app = AppConfig(
        client_id=os.environ.get("MONZO_CLIENT_ID", app_data.get("client_id", "")),
        client_secret=os.environ.get("MONZO_CLIENT_SECRET", app_data.get("client_secret", "")),
        redirect_uri=os.environ.get("MONZO_REDIRECT_URI", app_data.get("redirect_uri", "")),
    )

    token_data = data.get("token") or {}
    token = TokenConfig(
        access_token=os.environ.get("MONZO_ACCESS_TOKEN", token_data.get("access_token") or ""),
        refresh_token=os.environ.get("MONZO_REFRESH_TOKEN", token_data.get("refresh_token") or ""),
        user_id=os.environ.get("MONZO_USER_ID", token_data.get("user_id") or ""),
    )

    return Config(monzo=monzo, app=app, token=token)


def save_token(config_path: Path, credentials: UserCredentials) -> None:
    """Write the token section of the config file, keeping everything else."""
    data = _read_yaml(config_path)
    data["token"] = {
        "access_token": credentials.access_token,
        "refresh_token": credentials.refresh_token,
        "user_id": credentials.user_id,
    }

    config_path.parent.mkdir(parents=True, exist_ok=True)
    with open(config_path, "w") as f:
        yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)
    logger.info("Saved token for %s to %s", credentials.user_id or "unknown user", config_path)


def create_default_config(config_path: Path) -> None:
    """Create a default configuration file."""
    default_config = """# Monzo API client configuration
#
# Environment variables (MONZO_CLIENT_ID, MONZO_ACCESS_TOKEN, ...) take
# precedence over the values below.

monzo:
  base_url: "https://api.monzo.com"
  auth_url: "https://auth.monzo.com"
  timeout: 30                              # Request timeout in seconds

# OAuth client from https://developers.monzo.com
app:
  client_id: "oauth2client_YOUR_CLIENT_ID"
  client_secret: "YOUR_CLIENT_SECRET"
  redirect_uri: "http://localhost:8080/oauth/callback"

# Filled in by 'monzo-api exchange --save' and 'monzo-api refresh --save'
token:
  access_token: null
  refresh_token: null
  user_id: null
"""

    config_path.parent.mkdir(parents=True, exist_ok=True)
    with open(config_path, "w") as f:
        f.write(default_config)
