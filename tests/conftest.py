"""
Shared fixtures.

Every test database is an in-memory SQLite engine with the full schema.
Exchange prices and outgoing emails are replaced by in-memory fakes, so
no test touches the network.
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Optional

import pytest
from fastapi.testclient import TestClient

from app.domain.accounts.entities import PasswordResetMessage, SubscriptionStatus, User
from app.domain.accounts.ports import AccountNotifier
from app.domain.alerts.entities import PriceAlertMessage
from app.domain.alerts.ports import AlertNotifier
from app.domain.errors import NotificationError
from app.domain.trading.errors import PriceUnavailableError
from app.domain.trading.ports import PriceFeed
from app.infrastructure.accounts.user_repository import UserRepositoryAdapter
from app.infrastructure.database import build_engine, init_schema
from app.interfaces.dependencies import (
    get_account_notifier,
    get_cron_secret,
    get_engine,
    get_notifier,
    get_price_feed,
)
from app.main import app
from app.shared.security.passwords import hash_password
from app.shared.security.rate_limiting import limiter

CRON_SECRET = "test-cron-secret"
PASSWORD = "s3cret-pass"


class FakePriceFeed(PriceFeed):
    """Serves prices from dicts; unknown symbols raise PriceUnavailableError."""

    def __init__(self, spot=None, futures=None) -> None:
        self.spot: dict[str, Decimal] = dict(spot or {})
        self.futures: dict[str, Decimal] = dict(futures or {})
        self.spot_calls: list[str] = []

    def get_spot_price(self, symbol: str) -> Decimal:
        self.spot_calls.append(symbol)
        if symbol not in self.spot:
            raise PriceUnavailableError(symbol, "not quoted")
        return self.spot[symbol]

    def get_futures_price(self, symbol: str) -> Decimal:
        if symbol not in self.futures:
            raise PriceUnavailableError(symbol, "not quoted")
        return self.futures[symbol]


class FakeNotifier(AlertNotifier, AccountNotifier):
    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.sent: list[PriceAlertMessage] = []
        self.password_resets: list[PasswordResetMessage] = []

    def send_price_alert(self, message: PriceAlertMessage) -> None:
        if self.fail:
            raise NotificationError("email", "provider down")
        self.sent.append(message)

    def send_password_reset(self, message: PasswordResetMessage) -> None:
        if self.fail:
            raise NotificationError("email", "provider down")
        self.password_resets.append(message)


def make_user(
    engine,
    email: str = "ana@example.com",
    username: Optional[str] = "ana",
    balance: Decimal = Decimal("10000"),
    premium: bool = True,
    **overrides,
) -> User:
    """Persist a user. ``premium`` gives a running trial."""
    now = datetime.now(timezone.utc)
    fields = dict(
        email=email,
        username=username,
        password_hash=hash_password(PASSWORD),
        created_at=now - timedelta(days=30),
        trial_ends_at=now + timedelta(days=3) if premium else now - timedelta(days=1),
        subscription_status=SubscriptionStatus.NONE,
        virtual_balance=balance,
        monthly_starting_balance=balance,
    )
    fields.update(overrides)
    user = User(**fields)
    UserRepositoryAdapter(engine).add(user)
    return user


@pytest.fixture
def engine():
    engine = build_engine("sqlite://")
    init_schema(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def price_feed() -> FakePriceFeed:
    return FakePriceFeed(
        spot={"BTCUSDT": Decimal("50000"), "ETHBRL": Decimal("15000")},
        futures={"BTCUSDT": Decimal("50000")},
    )


@pytest.fixture
def notifier() -> FakeNotifier:
    return FakeNotifier()


@pytest.fixture
def client(engine, price_feed, notifier):
    app.dependency_overrides[get_engine] = lambda: engine
    app.dependency_overrides[get_price_feed] = lambda: price_feed
    app.dependency_overrides[get_notifier] = lambda: notifier
    app.dependency_overrides[get_account_notifier] = lambda: notifier
    app.dependency_overrides[get_cron_secret] = lambda: CRON_SECRET
    limiter.enabled = False
    yield TestClient(app)
    app.dependency_overrides.clear()
    limiter.enabled = True


def login(client: TestClient, email: str = "ana@example.com") -> dict[str, str]:
    """Log in through the API and return the Authorization header."""
    resp = client.post("/api/v1/auth/login", json={"email": email, "password": PASSWORD})
    assert resp.status_code == 200, resp.text
    return {"Authorization": f"Bearer {resp.json()['access_token']}"}


@pytest.fixture
def user(engine) -> User:
    return make_user(engine)


@pytest.fixture
def auth_headers(client, user) -> dict[str, str]:
    return login(client, user.email)


@pytest.fixture
def cron_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {CRON_SECRET}"}
