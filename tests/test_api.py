"""
Tests for the HTTP API.

Uses FastAPI's TestClient against the full application with the
database, price feed and notifier replaced by test fixtures.
"""

from datetime import datetime, timezone
from decimal import Decimal

from conftest import login, make_user

from app.infrastructure.scheduler import LIQUIDATION_JOB, BatchScheduler

API = "/api/v1"


# ══════════════════════════════════════════════════════════════════════
# Health and cross-cutting behavior
# ══════════════════════════════════════════════════════════════════════


class TestHealth:
    def test_health(self, client) -> None:
        resp = client.get(f"{API}/health")
        assert resp.status_code == 200
        assert resp.json()["status"] == "ok"

    def test_security_headers(self, client) -> None:
        resp = client.get(f"{API}/health")
        assert resp.headers["X-Content-Type-Options"] == "nosniff"
        assert resp.headers["X-Frame-Options"] == "DENY"

    def test_validation_errors_are_422(self, client, auth_headers) -> None:
        resp = client.post(
            f"{API}/simulator/trades",
            json={"symbol": "BTC-USDT", "quantity": "0", "type": "BUY"},
            headers=auth_headers,
        )
        assert resp.status_code == 422


# ══════════════════════════════════════════════════════════════════════
# Accounts
# ══════════════════════════════════════════════════════════════════════


class TestAuth:
    def test_register_login_profile_logout(self, client) -> None:
        resp = client.post(
            f"{API}/auth/register",
            json={"email": "Zoe@Example.com", "username": "zoe", "password": "long-enough"},
        )
        assert resp.status_code == 201
        assert resp.json()["email"] == "zoe@example.com"
        assert resp.json()["has_premium_access"] is True

        token = client.post(
            f"{API}/auth/login",
            json={"email": "zoe@example.com", "password": "long-enough"},
        ).json()["access_token"]
        headers = {"Authorization": f"Bearer {token}"}

        profile = client.get(f"{API}/users/me", headers=headers)
        assert profile.status_code == 200
        assert Decimal(profile.json()["virtual_balance"]) == Decimal("10000")

        assert client.post(f"{API}/auth/logout", headers=headers).status_code == 204
        assert client.get(f"{API}/users/me", headers=headers).status_code == 401

    def test_duplicate_registration_is_409(self, client, user) -> None:
        resp = client.post(
            f"{API}/auth/register",
            json={"email": user.email, "username": "other", "password": "long-enough"},
        )
        assert resp.status_code == 409
        assert resp.json()["error"] == "Conflict"

    def test_bad_credentials_are_401(self, client, user) -> None:
        resp = client.post(
            f"{API}/auth/login", json={"email": user.email, "password": "wrong-pass"}
        )
        assert resp.status_code == 401
        assert resp.headers["WWW-Authenticate"] == "Bearer"

    def test_missing_token_is_401(self, client) -> None:
        assert client.get(f"{API}/users/me").status_code == 401

    def test_subscription_endpoints(self, client, auth_headers) -> None:
        info = client.get(f"{API}/users/me/subscription", headers=auth_headers).json()
        assert info["has_premium_access"] is True
        assert info["has_subscription_access"] is False

        resp = client.post(f"{API}/users/me/subscription/cancel", headers=auth_headers)
        assert resp.status_code == 400

    def test_username_and_visibility(self, client, auth_headers) -> None:
        resp = client.put(
            f"{API}/users/me/username", json={"username": "ana_2"}, headers=auth_headers
        )
        assert resp.json()["username"] == "ana_2"

        resp = client.put(
            f"{API}/users/me/ranking-visibility",
            json={"visible": False},
            headers=auth_headers,
        )
        assert resp.status_code == 204

    def test_change_password(self, client, user, auth_headers) -> None:
        resp = client.put(
            f"{API}/users/me/password",
            json={"current_password": "wrong", "new_password": "another-pass"},
            headers=auth_headers,
        )
        assert resp.status_code == 401

    def test_password_reset_flow(self, client, user, auth_headers, notifier) -> None:
        unknown = client.post(
            f"{API}/auth/password-reset", json={"email": "ghost@example.com"}
        )
        resp = client.post(f"{API}/auth/password-reset", json={"email": user.email})
        assert resp.status_code == 202
        assert resp.json() == unknown.json()
        assert len(notifier.password_resets) == 1

        token = notifier.password_resets[0].reset_link.split("token=")[1]
        resp = client.post(
            f"{API}/auth/password-reset/confirm",
            json={"token": token, "new_password": "fresh-password"},
        )
        assert resp.status_code == 204
        assert client.get(f"{API}/users/me", headers=auth_headers).status_code == 401

        again = client.post(
            f"{API}/auth/password-reset/confirm",
            json={"token": token, "new_password": "fresh-password"},
        )
        assert again.status_code == 400
        resp = client.post(
            f"{API}/auth/login", json={"email": user.email, "password": "fresh-password"}
        )
        assert resp.status_code == 200


class TestPaymentWebhook:
    def test_requires_secret(self, client, user) -> None:
        resp = client.post(
            f"{API}/webhooks/payment",
            json={"email": user.email, "status": "authorized"},
        )
        assert resp.status_code == 401

    def test_updates_subscription(self, client, user, cron_headers) -> None:
        resp = client.post(
            f"{API}/webhooks/payment",
            json={"email": user.email, "status": "lifetime"},
            headers=cron_headers,
        )
        assert resp.status_code == 200
        assert resp.json()["status"] == "lifetime"
        assert resp.json()["has_subscription_access"] is True

    def test_unknown_email_is_404(self, client, cron_headers) -> None:
        resp = client.post(
            f"{API}/webhooks/payment",
            json={"email": "ghost@example.com", "status": "authorized"},
            headers=cron_headers,
        )
        assert resp.status_code == 404


# ══════════════════════════════════════════════════════════════════════
# Premium guard
# ══════════════════════════════════════════════════════════════════════


class TestPremiumGuard:
    def test_expired_trial_is_403_everywhere(self, client, engine) -> None:
        make_user(engine, email="free@example.com", username="free", premium=False)
        headers = login(client, "free@example.com")

        for path in (
            "/simulator/trades",
            "/futures/positions",
            "/reports/stats",
            "/alerts",
        ):
            resp = client.get(f"{API}{path}", headers=headers)
            assert resp.status_code == 403, path
            assert resp.json()["error"] == "Forbidden"

    def test_budget_needs_only_login(self, client, engine) -> None:
        make_user(engine, email="free@example.com", username="free", premium=False)
        headers = login(client, "free@example.com")
        assert client.get(f"{API}/budget/categories", headers=headers).status_code == 200


# ══════════════════════════════════════════════════════════════════════
# Simulator, futures, reports
# ══════════════════════════════════════════════════════════════════════


class TestSimulatorApi:
    def test_trade_lifecycle(self, client, auth_headers, price_feed) -> None:
        resp = client.post(
            f"{API}/simulator/trades",
            json={"symbol": "btcusdt", "quantity": "0.1", "type": "BUY"},
            headers=auth_headers,
        )
        assert resp.status_code == 201
        trade = resp.json()
        assert trade["symbol"] == "BTCUSDT"
        assert Decimal(trade["entry_price"]) == Decimal("50000")

        price_feed.spot["BTCUSDT"] = Decimal("51000")
        resp = client.post(
            f"{API}/simulator/trades/{trade['id']}/close", headers=auth_headers
        )
        assert resp.status_code == 200
        assert Decimal(resp.json()["pnl"]) == Decimal("100")

        again = client.post(
            f"{API}/simulator/trades/{trade['id']}/close", headers=auth_headers
        )
        assert again.status_code == 400

        listed = client.get(f"{API}/simulator/trades", headers=auth_headers).json()
        assert [t["status"] for t in listed] == ["CLOSED"]

    def test_close_by_symbol_and_journal(self, client, auth_headers) -> None:
        body = {"symbol": "BTCUSDT", "quantity": "0.01", "type": "SELL"}
        trade_id = client.post(
            f"{API}/simulator/trades", json=body, headers=auth_headers
        ).json()["id"]

        resp = client.put(
            f"{API}/simulator/trades/{trade_id}/journal",
            json={"notes": "fade the pump", "emotion": "calm"},
            headers=auth_headers,
        )
        assert resp.json()["notes"] == "fade the pump"

        resp = client.post(
            f"{API}/simulator/positions/close",
            json={"symbol": "BTCUSDT"},
            headers=auth_headers,
        )
        assert resp.status_code == 200
        assert resp.json()["closed"] == 1

    def test_unquoted_symbol_is_502(self, client, auth_headers) -> None:
        resp = client.post(
            f"{API}/simulator/trades",
            json={"symbol": "DOGEUSDT", "quantity": "1", "type": "BUY"},
            headers=auth_headers,
        )
        assert resp.status_code == 502

    def test_insufficient_balance_is_400(self, client, auth_headers) -> None:
        resp = client.post(
            f"{API}/simulator/trades",
            json={"symbol": "BTCUSDT", "quantity": "1", "type": "BUY"},
            headers=auth_headers,
        )
        assert resp.status_code == 400

    def test_foreign_trade_is_403(self, client, engine, auth_headers) -> None:
        make_user(engine, email="bo@example.com", username="bo")
        other = login(client, "bo@example.com")
        trade_id = client.post(
            f"{API}/simulator/trades",
            json={"symbol": "BTCUSDT", "quantity": "0.01", "type": "BUY"},
            headers=auth_headers,
        ).json()["id"]

        resp = client.post(f"{API}/simulator/trades/{trade_id}/close", headers=other)
        assert resp.status_code == 403


class TestFuturesApi:
    def test_open_list_close(self, client, auth_headers) -> None:
        body = {
            "symbol": "BTCUSDT",
            "side": "LONG",
            "quantity": "0.1",
            "leverage": 10,
            "entry_price": "50000",
        }
        first = client.post(f"{API}/futures/positions", json=body, headers=auth_headers)
        client.post(f"{API}/futures/positions", json=body, headers=auth_headers)
        assert first.status_code == 201
        assert Decimal(first.json()["margin"]) == Decimal("500")

        merged = client.get(f"{API}/futures/positions", headers=auth_headers).json()
        assert len(merged) == 1
        assert len(merged[0]["ids"]) == 2

        resp = client.post(
            f"{API}/futures/positions/close",
            json={"position_id": first.json()["id"], "exit_price": "52000"},
            headers=auth_headers,
        )
        assert resp.json()["status"] == "CLOSED"

        history = client.get(f"{API}/futures/positions/history", headers=auth_headers)
        assert [p["id"] for p in history.json()] == [first.json()["id"]]

        profile = client.get(f"{API}/users/me", headers=auth_headers).json()
        assert Decimal(profile["virtual_balance"]) == Decimal("9700")

    def test_leverage_bounds(self, client, auth_headers) -> None:
        body = {
            "symbol": "BTCUSDT",
            "side": "SHORT",
            "quantity": "0.1",
            "leverage": 200,
            "entry_price": "50000",
        }
        resp = client.post(f"{API}/futures/positions", json=body, headers=auth_headers)
        assert resp.status_code == 422

    def test_unknown_position_is_404(self, client, auth_headers) -> None:
        resp = client.post(
            f"{API}/futures/positions/close",
            json={"position_id": "00000000-0000-0000-0000-000000000000", "exit_price": "1"},
            headers=auth_headers,
        )
        assert resp.status_code == 404


class TestReportsApi:
    def test_stats_with_only_wins_report_null_ratios(
        self, client, auth_headers, price_feed
    ) -> None:
        trade_id = client.post(
            f"{API}/simulator/trades",
            json={"symbol": "BTCUSDT", "quantity": "0.1", "type": "BUY"},
            headers=auth_headers,
        ).json()["id"]
        price_feed.spot["BTCUSDT"] = Decimal("51000")
        client.post(f"{API}/simulator/trades/{trade_id}/close", headers=auth_headers)

        stats = client.get(
            f"{API}/reports/stats", params={"market": "spot"}, headers=auth_headers
        ).json()

        assert stats["total_trades"] == 1
        assert stats["win_rate"] == 100.0
        assert stats["profit_factor"] is None
        assert stats["payoff"] is None

    def test_movements_and_chart(self, client, auth_headers) -> None:
        resp = client.post(
            f"{API}/reports/movements",
            json={"amount": "1000", "type": "DEPOSIT"},
            headers=auth_headers,
        )
        assert resp.status_code == 201
        assert len(client.get(f"{API}/reports/movements", headers=auth_headers).json()) == 1

        chart = client.get(
            f"{API}/reports/portfolio-chart",
            params={"granularity": "weekly", "usdt_to_brl_rate": "5"},
            headers=auth_headers,
        ).json()
        assert chart[0]["date"] == "Início"
        assert Decimal(chart[-1]["portfolio"]) == Decimal("11000")

    def test_movement_offset_is_kept_as_instant(self, client, auth_headers) -> None:
        resp = client.post(
            f"{API}/reports/movements",
            json={"amount": "50", "type": "DEPOSIT", "date": "2024-01-31T23:00:00-03:00"},
            headers=auth_headers,
        )
        assert resp.status_code == 201

        listed = client.get(f"{API}/reports/movements", headers=auth_headers).json()
        moment = datetime.fromisoformat(listed[0]["date"].replace("Z", "+00:00"))
        assert moment == datetime(2024, 2, 1, 2, 0, tzinfo=timezone.utc)


# ══════════════════════════════════════════════════════════════════════
# Ranking, alerts, budget
# ══════════════════════════════════════════════════════════════════════


class TestRankingApi:
    def test_public_leaderboard(self, client, user) -> None:
        resp = client.get(f"{API}/ranking/leaderboard", params={"sort": "profit"})
        assert resp.status_code == 200
        body = resp.json()
        assert body["traders"][0]["nickname"] == "ana"
        assert body["current_user"] is None
        assert body["metrics"]["total_traders"] == 1

    def test_signed_in_user_is_highlighted(self, client, auth_headers) -> None:
        body = client.get(f"{API}/ranking/leaderboard", headers=auth_headers).json()
        assert body["current_user"]["is_current_user"] is True

    def test_invalid_period_is_422(self, client) -> None:
        resp = client.get(f"{API}/ranking/leaderboard", params={"period": "1y"})
        assert resp.status_code == 422

    def test_hall_of_fame_empty(self, client) -> None:
        assert client.get(f"{API}/ranking/hall-of-fame").json() == []


class TestAlertsApi:
    def test_alert_lifecycle(self, client, auth_headers, cron_headers, notifier) -> None:
        resp = client.post(
            f"{API}/alerts",
            json={"symbol": "BTCUSDT", "target_price": "49000", "operator": "gt"},
            headers=auth_headers,
        )
        assert resp.status_code == 201
        alert_id = resp.json()["id"]
        assert resp.json()["status"] == "ACTIVE"

        run = client.get(f"{API}/cron/process-alerts", headers=cron_headers).json()
        assert run["triggered"] == 1
        assert len(notifier.sent) == 1

        pending = client.get(f"{API}/alerts/notifications", headers=auth_headers).json()
        assert [a["id"] for a in pending] == [alert_id]

        resp = client.post(f"{API}/alerts/{alert_id}/acknowledge", headers=auth_headers)
        assert resp.json()["status"] == "ACKNOWLEDGED"

        resp = client.patch(
            f"{API}/alerts/{alert_id}",
            json={"status": "ACTIVE", "target_price": "55000"},
            headers=auth_headers,
        )
        assert resp.json()["status"] == "ACTIVE"
        assert resp.json()["config"]["target_price"] == "55000"

        assert client.delete(f"{API}/alerts/{alert_id}", headers=auth_headers).status_code == 204
        assert client.get(f"{API}/alerts", headers=auth_headers).json() == []

    def test_acknowledge_active_alert_is_400(self, client, auth_headers) -> None:
        alert_id = client.post(
            f"{API}/alerts",
            json={"symbol": "BTCUSDT", "target_price": "1", "operator": "lt"},
            headers=auth_headers,
        ).json()["id"]

        resp = client.post(f"{API}/alerts/{alert_id}/acknowledge", headers=auth_headers)
        assert resp.status_code == 400


class TestBudgetApi:
    def test_budget_flow(self, client, auth_headers) -> None:
        defaults = client.get(f"{API}/budget/categories", headers=auth_headers).json()
        assert len(defaults) == 5

        salary = client.post(
            f"{API}/budget/categories",
            json={"name": "Salário", "type": "INCOME"},
            headers=auth_headers,
        ).json()
        expense_id = defaults[0]["id"]

        for category_id, amount in ((salary["id"], "4000"), (expense_id, "1500")):
            resp = client.put(
                f"{API}/budget/2024/items",
                json={"category_id": category_id, "month": 3, "amount": amount},
                headers=auth_headers,
            )
            assert resp.status_code == 200

        items = client.get(f"{API}/budget/2024/items", headers=auth_headers).json()
        assert len(items) == 2

        summary = client.get(f"{API}/budget/2024/summary", headers=auth_headers).json()
        assert len(summary) == 12
        assert Decimal(summary[2]["balance"]) == Decimal("2500")

        resp = client.delete(f"{API}/budget/categories/{expense_id}", headers=auth_headers)
        assert resp.status_code == 204

    def test_duplicate_category_names_are_409(self, client, auth_headers) -> None:
        payload = {"name": "Salário", "type": "INCOME"}
        first = client.post(f"{API}/budget/categories", json=payload, headers=auth_headers)
        assert first.status_code == 201

        second = client.post(f"{API}/budget/categories", json=payload, headers=auth_headers)
        assert second.status_code == 409
        assert second.json()["error"] == "Conflict"

        other = client.post(
            f"{API}/budget/categories",
            json={"name": "Bônus", "type": "INCOME"},
            headers=auth_headers,
        ).json()
        resp = client.put(
            f"{API}/budget/categories/{other['id']}", json=payload, headers=auth_headers
        )
        assert resp.status_code == 409

    def test_invalid_month_is_422(self, client, auth_headers) -> None:
        resp = client.put(
            f"{API}/budget/2024/items",
            json={
                "category_id": "00000000-0000-0000-0000-000000000000",
                "month": 13,
                "amount": "1",
            },
            headers=auth_headers,
        )
        assert resp.status_code == 422


# ══════════════════════════════════════════════════════════════════════
# Batch endpoints
# ══════════════════════════════════════════════════════════════════════


class TestCronApi:
    def test_requires_secret(self, client) -> None:
        assert client.get(f"{API}/cron/liquidate").status_code == 401
        resp = client.get(
            f"{API}/cron/liquidate", headers={"Authorization": "Bearer wrong"}
        )
        assert resp.status_code == 401

    def test_liquidation_sweep(self, client, auth_headers, cron_headers, price_feed) -> None:
        client.post(
            f"{API}/futures/positions",
            json={
                "symbol": "BTCUSDT",
                "side": "LONG",
                "quantity": "0.1",
                "leverage": 10,
                "entry_price": "50000",
            },
            headers=auth_headers,
        )
        price_feed.futures["BTCUSDT"] = Decimal("40000")

        body = client.get(f"{API}/cron/liquidate", headers=cron_headers).json()

        assert body["job"] == "liquidate"
        assert body["liquidated"] == 1

    def test_process_trades(self, client, cron_headers) -> None:
        body = client.get(f"{API}/cron/process-trades", headers=cron_headers).json()
        assert body["processed"] == 0
        assert body["errors"] == []

    def test_monthly_reset_runs_once(self, client, user, cron_headers) -> None:
        first = client.get(f"{API}/cron/monthly-reset", headers=cron_headers)
        assert first.status_code == 200
        assert first.json()["ranked_users"] == 1

        second = client.get(f"{API}/cron/monthly-reset", headers=cron_headers)
        assert second.status_code == 409

    def test_scheduler_status(self, client, cron_headers, monkeypatch) -> None:
        assert client.get(f"{API}/cron/scheduler/status").status_code == 401

        idle = client.get(f"{API}/cron/scheduler/status", headers=cron_headers).json()
        assert idle == {"running": False, "jobs": [], "recent_tasks": []}

        scheduler = BatchScheduler({LIQUIDATION_JOB: lambda: None})
        scheduler.run_now(LIQUIDATION_JOB)
        monkeypatch.setattr(client.app.state, "scheduler", scheduler, raising=False)

        body = client.get(f"{API}/cron/scheduler/status", headers=cron_headers).json()
        assert body["running"] is False
        assert [t["task"] for t in body["recent_tasks"]] == [LIQUIDATION_JOB]
        assert body["recent_tasks"][0]["status"] == "completed"
