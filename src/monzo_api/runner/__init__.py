"""
CLI runner module.

Provides commands:
- init-config: Write a default config file
- auth-url / exchange / refresh: OAuth token handling
- whoami, accounts, balance, pots, transactions, webhooks: Read-only queries
"""

from .main import create_cli, main

__all__ = [
    "create_cli",
    "main",
]
