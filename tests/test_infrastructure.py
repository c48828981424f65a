"""
Tests for the HTTP adapters and the batch scheduler.

HTTP calls go through ``httpx.MockTransport``; nothing leaves the process.
"""

import json
from dataclasses import dataclass
from decimal import Decimal

import httpx
import pytest

from app.domain.accounts.entities import PasswordResetMessage
from app.domain.alerts.entities import PriceAlertMessage, PriceOperator
from app.domain.errors import NotificationError
from app.domain.trading.errors import PriceUnavailableError
from app.infrastructure.email_notifier import (
    EmailNotifier,
    render_password_reset,
    render_price_alert,
)
from app.infrastructure.scheduler import (
    ALERTS_JOB,
    LIQUIDATION_JOB,
    MONTHLY_RESET_JOB,
    TRADE_EXITS_JOB,
    BatchScheduler,
    TaskStatus,
)
from app.infrastructure.trading.binance_price_feed import BinancePriceFeed

PRIMARY = "https://api.binance.com"
MIRROR = "https://api1.binance.com"
FUTURES = "https://fapi.binance.com"
MERCADO = "https://www.mercadobitcoin.net/api"
BITGET = "https://api.bitget.com"


def _feed(handler) -> BinancePriceFeed:
    return BinancePriceFeed(
        spot_endpoints=[PRIMARY, MIRROR],
        futures_endpoints=[FUTURES],
        mercado_bitcoin_url=MERCADO,
        bitget_url=BITGET,
        client=httpx.Client(transport=httpx.MockTransport(handler)),
    )


def _binance_down(request: httpx.Request):
    """Every Binance host answers 500; returns None for other hosts."""
    if "binance" in request.url.host:
        return httpx.Response(500)
    return None


# ══════════════════════════════════════════════════════════════════════
# Price feed
# ══════════════════════════════════════════════════════════════════════


class TestBinancePriceFeed:
    def test_primary_endpoint(self) -> None:
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request.url)
            return httpx.Response(200, json={"symbol": "BTCUSDT", "price": "64000.12"})

        price = _feed(handler).get_spot_price("btcusdt")

        assert price == Decimal("64000.12")
        assert seen[0].host == "api.binance.com"
        assert seen[0].path == "/api/v3/ticker/price"
        assert seen[0].params["symbol"] == "BTCUSDT"

    def test_restricted_location_moves_to_next_endpoint(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.host == "api.binance.com":
                return httpx.Response(451)
            return httpx.Response(200, json={"price": "100"})

        assert _feed(handler).get_spot_price("ETHUSDT") == Decimal("100")

    def test_transport_error_moves_to_next_endpoint(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.host == "api.binance.com":
                raise httpx.ConnectError("refused", request=request)
            return httpx.Response(200, json={"price": "7"})

        assert _feed(handler).get_spot_price("XRPUSDT") == Decimal("7")

    def test_brl_pairs_fall_back_to_mercado_bitcoin(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            down = _binance_down(request)
            if down is not None:
                return down
            assert request.url.path == "/api/BTC/ticker/"
            return httpx.Response(200, json={"ticker": {"last": "350000.5"}})

        assert _feed(handler).get_spot_price("BTCBRL") == Decimal("350000.5")

    def test_bitget_is_the_last_resort(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            down = _binance_down(request)
            if down is not None:
                return down
            assert request.url.host == "api.bitget.com"
            return httpx.Response(
                200, json={"code": "00000", "data": [{"lastPr": "150.25"}]}
            )

        assert _feed(handler).get_spot_price("SOLUSDT") == Decimal("150.25")

    @pytest.mark.parametrize("payload", [{"price": "0"}, {"price": "abc"}, {}])
    def test_invalid_tickers_are_rejected(self, payload) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if "binance" in request.url.host:
                return httpx.Response(200, json=payload)
            return httpx.Response(404)

        with pytest.raises(PriceUnavailableError):
            _feed(handler).get_spot_price("BTCUSDT")

    def test_all_sources_down(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if "bitget" in request.url.host:
                return httpx.Response(200, json={"code": "40034", "data": []})
            return httpx.Response(503)

        with pytest.raises(PriceUnavailableError):
            _feed(handler).get_spot_price("BTCBRL")

    def test_futures_use_only_fapi(self) -> None:
        hosts = []

        def handler(request: httpx.Request) -> httpx.Response:
            hosts.append(request.url.host)
            if request.url.host == "fapi.binance.com":
                assert request.url.path == "/fapi/v1/ticker/price"
                return httpx.Response(200, json={"price": "64100"})
            return httpx.Response(500)

        feed = _feed(handler)
        assert feed.get_futures_price("BTCUSDT") == Decimal("64100")
        assert hosts == ["fapi.binance.com"]

        with pytest.raises(PriceUnavailableError):
            _feed(lambda request: httpx.Response(500)).get_futures_price("BTCUSDT")

    def test_blank_symbol(self) -> None:
        with pytest.raises(PriceUnavailableError):
            _feed(lambda request: httpx.Response(200)).get_spot_price("  ")


# ══════════════════════════════════════════════════════════════════════
# Email notifier
# ══════════════════════════════════════════════════════════════════════


MESSAGE = PriceAlertMessage(
    to="ana@example.com",
    user_name="Ana",
    symbol="BTCUSDT",
    price=Decimal("50100.5"),
    target_price=Decimal("50000"),
    operator=PriceOperator.GREATER_THAN,
)

RESET = PasswordResetMessage(
    to="ana@example.com",
    user_name="Ana",
    reset_link="https://criptoplay.example/auth/redefinir-senha?token=abc123",
    expires_in_minutes=60,
)


class TestEmailNotifier:
    def test_render(self) -> None:
        subject, body = render_price_alert(MESSAGE)
        assert subject == "Alerta de preço: BTCUSDT"
        assert "Olá, Ana!" in body
        assert "subiu acima de 50,000" in body
        assert "50,100.5" in body

    def test_posts_to_email_api(self) -> None:
        captured = []

        def handler(request: httpx.Request) -> httpx.Response:
            captured.append(request)
            return httpx.Response(200, json={"id": "msg_1"})

        notifier = EmailNotifier(
            api_url="https://api.resend.com/emails",
            api_key="re_test",
            sender="alerts@example.com",
            client=httpx.Client(transport=httpx.MockTransport(handler)),
        )
        notifier.send_price_alert(MESSAGE)

        request = captured[0]
        assert request.headers["Authorization"] == "Bearer re_test"
        payload = json.loads(request.content)
        assert payload["to"] == ["ana@example.com"]
        assert payload["from"] == "alerts@example.com"
        assert payload["subject"] == "Alerta de preço: BTCUSDT"

    def test_provider_error(self) -> None:
        notifier = EmailNotifier(
            api_url="https://api.resend.com/emails",
            api_key="re_test",
            sender="alerts@example.com",
            client=httpx.Client(
                transport=httpx.MockTransport(lambda request: httpx.Response(500))
            ),
        )
        with pytest.raises(NotificationError):
            notifier.send_price_alert(MESSAGE)

    def test_missing_key(self) -> None:
        notifier = EmailNotifier(
            api_url="https://api.resend.com/emails", api_key=None, sender="x@example.com"
        )
        with pytest.raises(NotificationError):
            notifier.send_price_alert(MESSAGE)

    def test_render_password_reset(self) -> None:
        subject, body = render_password_reset(RESET)
        assert subject == "Redefina sua senha da CriptoPlay"
        assert "Olá, Ana!" in body
        assert "em até 60 minutos" in body
        assert RESET.reset_link in body

    def test_sends_password_reset(self) -> None:
        captured = []

        def handler(request: httpx.Request) -> httpx.Response:
            captured.append(json.loads(request.content))
            return httpx.Response(200, json={"id": "msg_2"})

        notifier = EmailNotifier(
            api_url="https://api.resend.com/emails",
            api_key="re_test",
            sender="alerts@example.com",
            client=httpx.Client(transport=httpx.MockTransport(handler)),
        )
        notifier.send_password_reset(RESET)

        assert captured[0]["to"] == ["ana@example.com"]
        assert "token=abc123" in captured[0]["text"]


# ══════════════════════════════════════════════════════════════════════
# Scheduler
# ══════════════════════════════════════════════════════════════════════


@dataclass
class _Summary:
    checked: int


def _boom():
    raise RuntimeError("database gone")


class TestBatchScheduler:
    def test_run_now_records_details(self) -> None:
        scheduler = BatchScheduler({LIQUIDATION_JOB: lambda: _Summary(checked=3)})

        result = scheduler.run_now(LIQUIDATION_JOB)

        assert result.status is TaskStatus.COMPLETED
        assert result.details == {"checked": 3}
        assert scheduler.task_history == [result]

    def test_unknown_task(self) -> None:
        result = BatchScheduler({}).run_now("nope")
        assert result.status is TaskStatus.FAILED
        assert "Unknown task" in result.error

    def test_failures_are_captured(self) -> None:
        scheduler = BatchScheduler({ALERTS_JOB: _boom})
        result = scheduler.run_now(ALERTS_JOB)
        assert result.status is TaskStatus.FAILED
        assert result.error == "database gone"

    def test_history_is_bounded(self) -> None:
        scheduler = BatchScheduler({TRADE_EXITS_JOB: lambda: None}, max_history=2)
        for _ in range(5):
            scheduler.run_now(TRADE_EXITS_JOB)
        assert len(scheduler.task_history) == 2

    def test_start_registers_every_job(self) -> None:
        jobs = {
            name: (lambda: None)
            for name in (LIQUIDATION_JOB, TRADE_EXITS_JOB, ALERTS_JOB, MONTHLY_RESET_JOB)
        }
        scheduler = BatchScheduler(jobs)
        assert scheduler.get_status()["running"] is False

        scheduler.start()
        try:
            registered = {j["id"] for j in scheduler.get_scheduled_jobs()}
            assert registered == set(jobs)
            assert scheduler.is_running
        finally:
            scheduler.stop()

        assert scheduler.get_scheduled_jobs() == []
