"""
Authenticated Monzo API client.
"""

import logging
from datetime import datetime, timezone
from urllib.parse import quote

from .config import MonzoConfig
from .credentials import AppCredentials, UserCredentials
from .errors import MonzoCredentialsError
from .models import (
    Account,
    AccountType,
    Attachment,
    AttachmentUpload,
    Balance,
    FeedItem,
    Pot,
    Receipt,
    Transaction,
    Webhook,
    WhoAmI,
)
from .transport import Transport

logger = logging.getLogger(__name__)

TOKEN_ENDPOINT = "/oauth2/token"


def _segment(value: str) -> str:
    """Percent-encode an id for use as a single path segment."""
    return quote(value, safe="")


def _cursor(value: str | datetime | None) -> str | None:
    """Render a since/before cursor: RFC 3339 timestamp or an object id."""
    if value is None or isinstance(value, str):
        return value
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def _pagination(
    limit: int | None, since: str | datetime | None, before: str | datetime | None
) -> dict:
    return {"limit": limit, "since": _cursor(since), "before": _cursor(before)}


class MonzoClient:
    """
    Client for the Monzo API on behalf of one user.

    Every method issues exactly one HTTP request. Nothing is retried or
    cached; errors surface as MonzoAPIError / MonzoConnectionError.

    Amounts are integers in minor units (pennies for GBP).
    """

    def __init__(
        self,
        credentials: UserCredentials,
        app: AppCredentials | None = None,
        config: MonzoConfig | None = None,
        transport: Transport | None = None,
    ):
        """
        Initialize Monzo client.

        Args:
            credentials: User access token and metadata
            app: OAuth client credentials, needed only for refresh()
            config: API location and timeout
            transport: Shared transport (created from config if omitted)
        """
        self.credentials = credentials
        self.app = app
        self.config = config or (transport.config if transport else MonzoConfig())
        self.transport = transport or Transport(self.config)

    def __enter__(self) -> "MonzoClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self.transport.close()

    def with_credentials(self, credentials: UserCredentials) -> "MonzoClient":
        """Return a client for new credentials (e.g. after refresh()), sharing the transport."""
        return MonzoClient(credentials, app=self.app, config=self.config, transport=self.transport)

    def _request(self, method: str, endpoint: str, **kwargs):
        return self.transport.request(
            method,
            endpoint,
            authorization=self.credentials.authorization_header,
            **kwargs,
        )

    # ------------------------------------------------------------------
    # Authentication
    # ------------------------------------------------------------------

    def whoami(self) -> WhoAmI:
        """Information about the current access token."""
        return WhoAmI.from_api_response(self._request("GET", "/ping/whoami"))

    def logout(self) -> None:
        """Invalidate the access token."""
        self._request("POST", "/ping/logout")
        logger.info("Logged out user %s", self.credentials.user_id or "unknown")

    def refresh(self) -> UserCredentials:
        """
        Exchange the refresh token for a new access token.

        Returns:
            New credentials; this client keeps the old ones

        Raises:
            MonzoCredentialsError: No app credentials or no refresh token.
                Raised before any request is made.
        """
        if self.app is None:
            raise MonzoCredentialsError("App credentials are required to refresh a token")
        if not self.credentials.refresh_token:
            raise MonzoCredentialsError("No refresh token available (non-confidential client?)")

        data = self.transport.request(
            "POST",
            TOKEN_ENDPOINT,
            data={
                "grant_type": "refresh_token",
                "client_id": self.app.client_id,
                "client_secret": self.app.client_secret,
                "refresh_token": self.credentials.refresh_token,
            },
            require=("access_token",),
        )
        logger.info("Refreshed access token for user %s", data.get("user_id", "unknown"))
        return UserCredentials.from_api_response(data, self.app)

    # ------------------------------------------------------------------
    # Accounts, balance, pots
    # ------------------------------------------------------------------

    def accounts(
        self,
        account_type: AccountType | str | None = None,
        limit: int | None = None,
        since: str | datetime | None = None,
        before: str | datetime | None = None,
    ) -> list[Account]:
        """List the user's accounts, optionally filtered by type."""
        if isinstance(account_type, AccountType):
            account_type = account_type.value
        params = {"account_type": account_type, **_pagination(limit, since, before)}
        accounts = self._request("GET", "/accounts", params=params, unwrap="accounts")
        return [Account.from_api_response(a) for a in accounts]

    def balance(self, account_id: str) -> Balance:
        return Balance.from_api_response(
            self._request("GET", "/balance", params={"account_id": account_id})
        )

    def pots(self, current_account_id: str) -> list[Pot]:
        """List pots belonging to a current account, including deleted ones."""
        pots = self._request(
            "GET", "/pots", params={"current_account_id": current_account_id}, unwrap="pots"
        )
        return [Pot.from_api_response(p) for p in pots]

    def deposit_into_pot(
        self, pot_id: str, source_account_id: str, amount: int, dedupe_id: str
    ) -> Pot:
        """
        Move money from a current account into a pot.

        Args:
            pot_id: Pot to deposit into
            source_account_id: Account the money comes from
            amount: Amount in minor units
            dedupe_id: Caller-chosen idempotency key. Reuse the same value
                when retrying so the deposit is applied at most once.

        Returns:
            The updated pot
        """
        if not dedupe_id:
            raise ValueError("dedupe_id is required")
        data = self._request(
            "PUT",
            f"/pots/{_segment(pot_id)}/deposit",
            data={
                "source_account_id": source_account_id,
                "amount": amount,
                "dedupe_id": dedupe_id,
            },
        )
        return Pot.from_api_response(data)

    def withdraw_from_pot(
        self, pot_id: str, destination_account_id: str, amount: int, dedupe_id: str
    ) -> Pot:
        """Move money from a pot back to a current account. See deposit_into_pot()."""
        if not dedupe_id:
            raise ValueError("dedupe_id is required")
        data = self._request(
            "PUT",
            f"/pots/{_segment(pot_id)}/withdraw",
            data={
                "destination_account_id": destination_account_id,
                "amount": amount,
                "dedupe_id": dedupe_id,
            },
        )
        return Pot.from_api_response(data)

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------

    def transaction(self, transaction_id: str, expand_merchant: bool = False) -> Transaction:
        params = {"expand[]": "merchant"} if expand_merchant else None
        data = self._request(
            "GET",
            f"/transactions/{_segment(transaction_id)}",
            params=params,
            unwrap="transaction",
        )
        return Transaction.from_api_response(data)

    def transactions(
        self,
        account_id: str,
        expand_merchant: bool = False,
        limit: int | None = None,
        since: str | datetime | None = None,
        before: str | datetime | None = None,
    ) -> list[Transaction]:
        """
        List transactions for an account.

        Monzo only returns transactions older than 90 days within the first
        five minutes after authentication.

        Args:
            account_id: Account to list
            expand_merchant: Return Merchant records instead of merchant ids
            limit: Page size (Monzo caps this at 100)
            since: RFC 3339 timestamp or transaction id to start after
            before: RFC 3339 timestamp to stop at
        """
        params = {"account_id": account_id, **_pagination(limit, since, before)}
        if expand_merchant:
            params["expand[]"] = "merchant"
        data = self._request("GET", "/transactions", params=params, unwrap="transactions")
        return [Transaction.from_api_response(t) for t in data]

    def annotate_transaction(self, transaction_id: str, metadata: dict[str, str]) -> Transaction:
        """
        Store key/value metadata on a transaction.

        An empty string value deletes the key.
        """
        form = {f"metadata[{key}]": value for key, value in metadata.items()}
        data = self._request(
            "PATCH",
            f"/transactions/{_segment(transaction_id)}",
            data=form,
            unwrap="transaction",
        )
        return Transaction.from_api_response(data)

    # ------------------------------------------------------------------
    # Feed
    # ------------------------------------------------------------------

    def create_feed_item(self, account_id: str, item: FeedItem) -> None:
        """Post a basic item to the account's feed."""
        self._request("POST", "/feed", data=item.to_form(account_id))

    # ------------------------------------------------------------------
    # Attachments
    # ------------------------------------------------------------------

    def upload_attachment(
        self, file_name: str, file_type: str, content_length: int
    ) -> AttachmentUpload:
        """
        Obtain a temporary URL to upload an image to.

        The file bytes must then be PUT to ``upload_url`` by the caller, and
        ``file_url`` passed to register_attachment().
        """
        data = self._request(
            "POST",
            "/attachment/upload",
            data={
                "file_name": file_name,
                "file_type": file_type,
                "content_length": content_length,
            },
        )
        return AttachmentUpload.from_api_response(data)

    def register_attachment(self, external_id: str, file_url: str, file_type: str) -> Attachment:
        """Attach an uploaded (or externally hosted) image to a transaction."""
        data = self._request(
            "POST",
            "/attachment/register",
            data={"external_id": external_id, "file_url": file_url, "file_type": file_type},
            unwrap="attachment",
        )
        return Attachment.from_api_response(data)

    def deregister_attachment(self, attachment_id: str) -> None:
        self._request("POST", "/attachment/deregister", data={"id": attachment_id})

    # ------------------------------------------------------------------
    # Receipts
    # ------------------------------------------------------------------

    def create_receipt(self, receipt: Receipt) -> None:
        """Create or replace the receipt with receipt.external_id."""
        self._request("PUT", "/transaction-receipts", json_data=receipt.to_payload())

    def receipt(self, external_id: str) -> Receipt:
        data = self._request(
            "GET", "/transaction-receipts", params={"external_id": external_id}, unwrap="receipt"
        )
        return Receipt.from_api_response(data)

    def delete_receipt(self, external_id: str) -> None:
        self._request("DELETE", "/transaction-receipts", params={"external_id": external_id})

    # ------------------------------------------------------------------
    # Webhooks
    # ------------------------------------------------------------------

    def register_webhook(self, account_id: str, url: str) -> Webhook:
        """Ask Monzo to POST transaction events for an account to url."""
        data = self._request(
            "POST", "/webhooks", data={"account_id": account_id, "url": url}, unwrap="webhook"
        )
        return Webhook.from_api_response(data)

    def webhooks(self, account_id: str) -> list[Webhook]:
        data = self._request(
            "GET", "/webhooks", params={"account_id": account_id}, unwrap="webhooks"
        )
        return [Webhook.from_api_response(w) for w in data]

    def delete_webhook(self, webhook_id: str) -> None:
        self._request("DELETE", f"/webhooks/{_segment(webhook_id)}")
