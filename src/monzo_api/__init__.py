"""
Monzo API Client.

Provides:
- OAuth2 authorization URL and code exchange (MonzoOAuthClient)
- Accounts, balance, pots, transactions, feed items, attachments,
  receipts and webhooks (MonzoClient)
- Token refresh for confidential clients
- Monzo id prefix validation

Every call is a single HTTP request. Nothing is retried, cached or stored.
"""

from .client import MonzoClient
from .config import MonzoConfig
from .credentials import AppCredentials, UserCredentials
from .errors import (
    InvalidIdError,
    MonzoAPIError,
    MonzoConnectionError,
    MonzoCredentialsError,
    MonzoError,
)
from .ids import ID_PREFIXES, Id, assert_id, cast_id, validate_id
from .oauth import AuthorizationRequest, MonzoOAuthClient

__version__ = "0.1.0"

__all__ = [
    "MonzoClient",
    "MonzoOAuthClient",
    "AuthorizationRequest",
    "MonzoConfig",
    "AppCredentials",
    "UserCredentials",
    "MonzoError",
    "MonzoAPIError",
    "MonzoConnectionError",
    "MonzoCredentialsError",
    "InvalidIdError",
    "ID_PREFIXES",
    "Id",
    "validate_id",
    "assert_id",
    "cast_id",
]
