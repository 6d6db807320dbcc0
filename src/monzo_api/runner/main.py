"""
CLI main entry point.
"""

import argparse
import logging
import sys
from pathlib import Path

from ..client import MonzoClient
from ..config import Config, create_default_config, load_config, save_token
from ..errors import MonzoError
from ..oauth import MonzoOAuthClient

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def create_cli() -> argparse.ArgumentParser:
    """Create CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="monzo-api",
        description="Talk to the Monzo API from the command line",
    )

    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=Path("config.yaml"),
        help="Path to config file (default: config.yaml)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    subparsers.add_parser("init-config", help="Write a default config file")

    # OAuth
    auth_parser = subparsers.add_parser("auth-url", help="Print the OAuth authorization URL")
    auth_parser.add_argument(
        "--state",
        type=str,
        default=None,
        help="State value to embed (default: generate one)",
    )

    exchange_parser = subparsers.add_parser(
        "exchange", help="Exchange an authorization code for an access token"
    )
    exchange_parser.add_argument("code", type=str, help="Code from the OAuth redirect")
    exchange_parser.add_argument(
        "--save",
        action="store_true",
        help="Write the token into the config file",
    )

    refresh_parser = subparsers.add_parser("refresh", help="Refresh the stored access token")
    refresh_parser.add_argument(
        "--save",
        action="store_true",
        help="Write the new token into the config file",
    )

    subparsers.add_parser("whoami", help="Show who the stored token belongs to")

    # Read-only resources
    accounts_parser = subparsers.add_parser("accounts", help="List accounts")
    accounts_parser.add_argument(
        "--type",
        dest="account_type",
        type=str,
        default=None,
        help="Filter by account type (e.g. uk_retail, uk_retail_joint)",
    )

    balance_parser = subparsers.add_parser("balance", help="Show an account balance")
    balance_parser.add_argument("account_id", type=str)

    pots_parser = subparsers.add_parser("pots", help="List pots of an account")
    pots_parser.add_argument("account_id", type=str)

    tx_parser = subparsers.add_parser("transactions", help="List transactions of an account")
    tx_parser.add_argument("account_id", type=str)
    tx_parser.add_argument(
        "--limit",
        type=int,
        default=20,
        help="Maximum transactions to list (default: 20)",
    )
    tx_parser.add_argument("--since", type=str, default=None, help="RFC 3339 timestamp or tx id")
    tx_parser.add_argument("--before", type=str, default=None, help="RFC 3339 timestamp")
    tx_parser.add_argument(
        "--expand-merchant",
        action="store_true",
        help="Include merchant details",
    )

    webhooks_parser = subparsers.add_parser("webhooks", help="List webhooks of an account")
    webhooks_parser.add_argument("account_id", type=str)

    return parser


def _format_amount(amount: int, currency) -> str:
    """Minor units to "12.34 GBP"."""
    currency = getattr(currency, "value", currency)
    sign = "-" if amount < 0 else ""
    return f"{sign}{abs(amount) / 100:.2f} {currency}"


def _oauth_client(config: Config) -> MonzoOAuthClient | None:
    app = config.app_credentials()
    if app is None:
        print("❌ app.client_id is not configured")
        return None
    return MonzoOAuthClient(app, config=config.monzo)


def _client(config: Config) -> MonzoClient | None:
    credentials = config.user_credentials()
    if credentials is None:
        print("❌ No access token configured. Run 'exchange' first.")
        return None
    return MonzoClient(credentials, app=config.app_credentials(), config=config.monzo)


def cmd_init_config(config_path: Path) -> int:
    """Write a default config file."""
    if config_path.exists():
        print(f"❌ {config_path} already exists")
        return 1
    create_default_config(config_path)
    print(f"✓ Wrote default config to {config_path}")
    return 0


def cmd_auth_url(config: Config, state: str | None) -> int:
    """Print the authorization URL."""
    oauth = _oauth_client(config)
    if oauth is None:
        return 1

    if state is None:
        request = oauth.create_authorization_request()
        print(f"State: {request.state}")
        print(request.url)
    else:
        print(oauth.build_authorization_url(state))
    return 0


def cmd_exchange(config: Config, config_path: Path, code: str, save: bool) -> int:
    """Exchange an authorization code."""
    oauth = _oauth_client(config)
    if oauth is None:
        return 1

    client = oauth.exchange_authorization_code(code)
    print(f"✓ Authorized user {client.credentials.user_id}")

    if save:
        save_token(config_path, client.credentials)
        print(f"  Token saved to {config_path}")
    else:
        print(f"  Access token: {client.credentials.access_token}")
    return 0


def cmd_refresh(config: Config, config_path: Path, save: bool) -> int:
    """Refresh the stored token."""
    client = _client(config)
    if client is None:
        return 1

    credentials = client.refresh()
    print(f"✓ Refreshed token for user {credentials.user_id}")

    if save:
        save_token(config_path, credentials)
        print(f"  Token saved to {config_path}")
    else:
        print(f"  Access token: {credentials.access_token}")
    return 0


def cmd_whoami(config: Config) -> int:
    client = _client(config)
    if client is None:
        return 1

    info = client.whoami()
    print(f"  Authenticated: {info.authenticated}")
    print(f"  User:          {info.user_id}")
    print(f"  Client:        {info.client_id}")
    return 0


def cmd_accounts(config: Config, account_type: str | None) -> int:
    """List accounts."""
    client = _client(config)
    if client is None:
        return 1

    accounts = client.accounts(account_type=account_type)
    for account in accounts:
        closed = " (closed)" if account.closed else ""
        print(f"  🏦 [{account.id}] {account.description} {account.type}{closed}")

    print(f"\n✓ Found {len(accounts)} account(s)")
    return 0


def cmd_balance(config: Config, account_id: str) -> int:
    client = _client(config)
    if client is None:
        return 1

    balance = client.balance(account_id)
    print(f"  Balance:       {_format_amount(balance.balance, balance.currency)}")
    print(f"  Total balance: {_format_amount(balance.total_balance, balance.currency)}")
    print(f"  Spent today:   {_format_amount(balance.spend_today, balance.currency)}")
    return 0


def cmd_pots(config: Config, account_id: str) -> int:
    """List pots, skipping deleted ones."""
    client = _client(config)
    if client is None:
        return 1

    pots = [p for p in client.pots(account_id) if not p.deleted]
    for pot in pots:
        print(f"  🍯 [{pot.id}] {pot.name}: {_format_amount(pot.balance, pot.currency)}")

    print(f"\n✓ Found {len(pots)} pot(s)")
    return 0


def cmd_transactions(
    config: Config,
    account_id: str,
    limit: int,
    since: str | None,
    before: str | None,
    expand_merchant: bool,
) -> int:
    """List transactions."""
    client = _client(config)
    if client is None:
        return 1

    transactions = client.transactions(
        account_id,
        expand_merchant=expand_merchant,
        limit=limit,
        since=since,
        before=before,
    )
    for tx in transactions:
        name = tx.merchant.name if hasattr(tx.merchant, "name") else tx.description
        flag = " ⏳" if tx.is_pending else ""
        print(f"  {tx.created[:10]}  {_format_amount(tx.amount, tx.currency):>14}  {name}{flag}")

    print(f"\n✓ Found {len(transactions)} transaction(s)")
    return 0


def cmd_webhooks(config: Config, account_id: str) -> int:
    client = _client(config)
    if client is None:
        return 1

    webhooks = client.webhooks(account_id)
    for webhook in webhooks:
        print(f"  🔗 [{webhook.id}] {webhook.url}")

    print(f"\n✓ Found {len(webhooks)} webhook(s)")
    return 0


def main(args: list[str] | None = None) -> int:
    """Main entry point."""
    parser = create_cli()
    parsed = parser.parse_args(args)

    setup_logging(parsed.verbose)

    if not parsed.command:
        parser.print_help()
        return 1

    if parsed.command == "init-config":
        return cmd_init_config(parsed.config)

    # Load config
    try:
        config = load_config(parsed.config)
    except Exception as e:
        print(f"❌ Failed to load config: {e}")
        return 1

    # Route to command
    try:
        if parsed.command == "auth-url":
            return cmd_auth_url(config, parsed.state)
        elif parsed.command == "exchange":
            return cmd_exchange(config, parsed.config, parsed.code, parsed.save)
        elif parsed.command == "refresh":
            return cmd_refresh(config, parsed.config, parsed.save)
        elif parsed.command == "whoami":
            return cmd_whoami(config)
        elif parsed.command == "accounts":
            return cmd_accounts(config, parsed.account_type)
        elif parsed.command == "balance":
            return cmd_balance(config, parsed.account_id)
        elif parsed.command == "pots":
            return cmd_pots(config, parsed.account_id)
        elif parsed.command == "transactions":
            return cmd_transactions(
                config,
                parsed.account_id,
                limit=parsed.limit,
                since=parsed.since,
                before=parsed.before,
                expand_merchant=parsed.expand_merchant,
            )
        elif parsed.command == "webhooks":
            return cmd_webhooks(config, parsed.account_id)
        else:
            parser.print_help()
            return 1
    except MonzoError as e:
        logger.debug("Command %s failed", parsed.command, exc_info=True)
        print(f"❌ {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
