"""
Configuration module for the domain authentication checker.

Loads settings from environment variables with sensible defaults.
"""

import os


class Config:
    """Base configuration shared by all environments."""

    # Security
    SECRET_KEY: str = os.environ.get("SECRET_KEY", "dev-secret-change-me")

    # DNS resolution. An empty resolver list falls back to public resolvers.
    DNS_RESOLVERS: str = os.environ.get("DNS_RESOLVERS", "")
    DNS_TIMEOUT_SECONDS: float = float(os.environ.get("DNS_TIMEOUT_SECONDS", "5.0"))

    # Selector used by the API when the caller does not pass one
    DEFAULT_DKIM_SELECTOR: str = os.environ.get("DEFAULT_DKIM_SELECTOR", "mail")
