"""
Application configuration.

Loads settings from environment variables and .env file.
All configuration is centralized here; no scattered magic strings.
"""

from decimal import Decimal
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment.

    Attributes:
        project_name: Display name for the API.
        version: Current API version string.
        debug: Enable debug mode. Must be False in production.
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR).
        rate_limit_default: Default rate limit for all endpoints.
        rate_limit_auth: Rate limit for login and registration.
        database_url: SQLAlchemy URL of the relational store.
        cron_secret: Bearer secret required by batch-job endpoints.
        initial_virtual_balance: Paper-trading balance of a fresh account.
        trial_days: Length of the premium trial for new accounts.
        session_ttl_hours: Lifetime of a login session token.
        password_reset_url: Page that receives the reset token as ``?token=``.
        password_reset_ttl_minutes: Validity of a password reset link.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    project_name: str = "CriptoPlay"
    version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"
    rate_limit_default: str = "60/minute"
    rate_limit_auth: str = "10/minute"

    database_url: str = "sqlite:///./criptoplay.db"
    cron_secret: Optional[str] = None

    initial_virtual_balance: Decimal = Decimal("10000")
    trial_days: int = 7
    session_ttl_hours: int = 24 * 7

    # Exchange price APIs, tried in order
    binance_spot_endpoints: list[str] = [
        "https://api.binance.com",
        "https://api1.binance.com",
        "https://api2.binance.com",
        "https://api3.binance.com",
        "https://api.binance.me",
        "https://api-gcp.binance.com",
    ]
    binance_futures_endpoints: list[str] = [
        "https://fapi.binance.com",
        "https://fapi1.binance.com",
        "https://fapi2.binance.com",
        "https://fapi3.binance.com",
    ]
    mercado_bitcoin_url: str = "https://www.mercadobitcoin.net/api"
    bitget_url: str = "https://api.bitget.com"
    price_timeout_seconds: float = 10.0

    # Transactional email (Resend-compatible HTTP API)
    email_api_url: str = "https://api.resend.com/emails"
    email_api_key: Optional[str] = None
    email_sender: str = "CriptoPlay <alertas@criptoplay.com.br>"
    password_reset_url: str = "http://localhost:3000/auth/redefinir-senha"
    password_reset_ttl_minutes: int = 60

    scheduler_enabled: bool = False
    liquidation_interval_minutes: int = 1
    trade_exits_interval_minutes: int = 1
    alerts_interval_minutes: int = 5

    def get_database_url(self) -> str:
        """Return the effective database URL."""
        return self.database_url


settings = Settings()
