"""
Relational schema and engine factory.

All tables live in one SQLAlchemy ``MetaData``. Repositories in the
bounded-context packages build Core statements against these tables.
Money columns are ``Numeric``; UUIDs are stored as 36-char strings;
timestamps are stored in UTC.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    MetaData,
    Numeric,
    String,
    Table,
    Text,
    UniqueConstraint,
    create_engine,
)
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)

MONEY = Numeric(28, 10)
ID = String(36)

metadata = MetaData()

users = Table(
    "users",
    metadata,
    Column("id", ID, primary_key=True),
    Column("email", String(320), nullable=False, unique=True),
    Column("username", String(30), unique=True),
    Column("name", String(120)),
    Column("password_hash", String(255), nullable=False),
    Column("is_admin", Boolean, nullable=False, default=False),
    Column("subscription_status", String(20), nullable=False, default="none"),
    Column("trial_ends_at", DateTime(timezone=True)),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("virtual_balance", MONEY, nullable=False),
    Column("monthly_starting_balance", MONEY, nullable=False),
    Column("bankruptcy_expiry", DateTime(timezone=True)),
    Column("ranking_visible", Boolean, nullable=False, default=True),
    Column("password_reset_token", String(64), unique=True),
    Column("password_reset_expires", DateTime(timezone=True)),
)

sessions = Table(
    "sessions",
    metadata,
    Column("token", String(128), primary_key=True),
    Column("user_id", ID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("expires_at", DateTime(timezone=True), nullable=False),
)

trades = Table(
    "trades",
    metadata,
    Column("id", ID, primary_key=True),
    Column("user_id", ID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True),
    Column("symbol", String(30), nullable=False),
    Column("type", String(4), nullable=False),
    Column("status", String(10), nullable=False, index=True),
    Column("market_type", String(20), nullable=False),
    Column("quantity", MONEY, nullable=False),
    Column("entry_price", MONEY, nullable=False),
    Column("entry_date", DateTime(timezone=True), nullable=False),
    Column("exit_price", MONEY),
    Column("exit_date", DateTime(timezone=True)),
    Column("pnl", MONEY),
    Column("stop_loss", MONEY),
    Column("take_profit", MONEY),
    Column("notes", Text),
    Column("strategy", String(120)),
    Column("emotion", String(60)),
)

futures_positions = Table(
    "futures_positions",
    metadata,
    Column("id", ID, primary_key=True),
    Column("user_id", ID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True),
    Column("symbol", String(30), nullable=False),
    Column("side", String(5), nullable=False),
    Column("quantity", MONEY, nullable=False),
    Column("leverage", Integer, nullable=False),
    Column("entry_price", MONEY, nullable=False),
    Column("margin", MONEY, nullable=False),
    Column("liquidation_price", MONEY, nullable=False),
    Column("stop_loss", MONEY),
    Column("take_profit", MONEY),
    Column("status", String(12), nullable=False, index=True),
    Column("pnl", MONEY),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("closed_at", DateTime(timezone=True)),
    Column("notes", Text),
    Column("strategy", String(120)),
    Column("emotion", String(60)),
)

capital_movements = Table(
    "capital_movements",
    metadata,
    Column("id", ID, primary_key=True),
    Column("user_id", ID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True),
    Column("amount", MONEY, nullable=False),
    Column("type", String(10), nullable=False),
    Column("date", DateTime(timezone=True), nullable=False),
)

monthly_rankings = Table(
    "monthly_rankings",
    metadata,
    Column("id", ID, primary_key=True),
    Column("user_id", ID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
    Column("month", Integer, nullable=False),
    Column("year", Integer, nullable=False),
    Column("starting_balance", MONEY, nullable=False),
    Column("final_balance", MONEY, nullable=False),
    Column("roi_percentage", Numeric(20, 6), nullable=False),
    Column("rank_position", Integer, nullable=False),
    UniqueConstraint("user_id", "year", "month", name="uix_ranking_user_month"),
)

alerts = Table(
    "alerts",
    metadata,
    Column("id", ID, primary_key=True),
    Column("user_id", ID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True),
    Column("type", String(10), nullable=False),
    Column("status", String(15), nullable=False, index=True),
    Column("config", JSON, nullable=False),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("triggered_at", DateTime(timezone=True)),
)

budget_categories = Table(
    "budget_categories",
    metadata,
    Column("id", ID, primary_key=True),
    Column("user_id", ID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True),
    Column("name", String(120), nullable=False),
    Column("type", String(10), nullable=False),
    UniqueConstraint("user_id", "name", name="uix_category_user_name"),
)

budgets = Table(
    "budgets",
    metadata,
    Column("id", ID, primary_key=True),
    Column("user_id", ID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
    Column("year", Integer, nullable=False),
    UniqueConstraint("user_id", "year", name="uix_budget_user_year"),
)

budget_items = Table(
    "budget_items",
    metadata,
    Column("id", ID, primary_key=True),
    Column("budget_id", ID, ForeignKey("budgets.id", ondelete="CASCADE"), nullable=False),
    Column(
        "category_id",
        ID,
        ForeignKey("budget_categories.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("month", Integer, nullable=False),
    Column("amount", MONEY, nullable=False),
    UniqueConstraint("budget_id", "category_id", "month", name="uix_item_budget_cat_month"),
)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Normalize a timestamp to an aware UTC datetime.

    Naive values are taken as UTC; aware values are converted.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def build_engine(url: str) -> Engine:
    """Build a SQLAlchemy engine for ``url``.

    In-memory SQLite shares a single connection so every session sees
    the same database.
    """
    if url.startswith("sqlite"):
        kwargs: dict = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in url or url in ("sqlite://", "sqlite+pysqlite://"):
            kwargs["poolclass"] = StaticPool
        return create_engine(url, **kwargs)
    return create_engine(url, pool_pre_ping=True)


def init_schema(engine: Engine) -> None:
    """Create all tables that do not exist yet."""
    metadata.create_all(engine)
    logger.info("Database schema ready (%d tables)", len(metadata.tables))
