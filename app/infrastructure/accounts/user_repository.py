"""
Adapter: User account persistence.

Implements UserRepository port on top of the ``users`` table.
"""

import logging
from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.engine import Engine, RowMapping

from app.domain.accounts.entities import SubscriptionStatus, User
from app.domain.accounts.ports import UserRepository
from app.infrastructure.database import as_utc, users

logger = logging.getLogger(__name__)


def _row_to_user(row: RowMapping) -> User:
    return User(
        id=UUID(row["id"]),
        email=row["email"],
        username=row["username"],
        name=row["name"],
        password_hash=row["password_hash"],
        is_admin=bool(row["is_admin"]),
        subscription_status=SubscriptionStatus(row["subscription_status"]),
        trial_ends_at=as_utc(row["trial_ends_at"]),
        created_at=as_utc(row["created_at"]),
        virtual_balance=Decimal(row["virtual_balance"]),
        monthly_starting_balance=Decimal(row["monthly_starting_balance"]),
        bankruptcy_expiry=as_utc(row["bankruptcy_expiry"]),
        ranking_visible=bool(row["ranking_visible"]),
    )


class UserRepositoryAdapter(UserRepository):
    """SQLAlchemy adapter for user accounts."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def add(self, user: User) -> None:
        with self._engine.begin() as conn:
            conn.execute(
                users.insert().values(
                    id=str(user.id),
                    email=user.email.lower(),
                    username=user.username,
                    name=user.name,
                    password_hash=user.password_hash,
                    is_admin=user.is_admin,
                    subscription_status=user.subscription_status.value,
                    trial_ends_at=user.trial_ends_at,
                    created_at=user.created_at,
                    virtual_balance=user.virtual_balance,
                    monthly_starting_balance=user.monthly_starting_balance,
                    bankruptcy_expiry=user.bankruptcy_expiry,
                    ranking_visible=user.ranking_visible,
                )
            )
        logger.debug("Saved user id=%s", user.id)

    def _fetch_one(self, stmt) -> Optional[User]:
        with self._engine.connect() as conn:
            row = conn.execute(stmt).mappings().first()
        return _row_to_user(row) if row else None

    def get_by_id(self, user_id: UUID) -> Optional[User]:
        return self._fetch_one(select(users).where(users.c.id == str(user_id)))

    def get_by_email(self, email: str) -> Optional[User]:
        return self._fetch_one(
            select(users).where(func.lower(users.c.email) == email.lower())
        )

    def get_by_username(self, username: str) -> Optional[User]:
        return self._fetch_one(select(users).where(users.c.username == username))

    def list_all(self) -> list[User]:
        with self._engine.connect() as conn:
            rows = conn.execute(select(users).order_by(users.c.created_at)).mappings().all()
        return [_row_to_user(r) for r in rows]

    def _update(self, user_id: UUID, **values) -> None:
        with self._engine.begin() as conn:
            conn.execute(update(users).where(users.c.id == str(user_id)).values(**values))

    def update_password(self, user_id: UUID, password_hash: str) -> None:
        self._update(user_id, password_hash=password_hash)

    def update_username(self, user_id: UUID, username: str) -> None:
        self._update(user_id, username=username)

    def set_ranking_visibility(self, user_id: UUID, visible: bool) -> None:
        self._update(user_id, ranking_visible=visible)

    def set_subscription_status(
        self, user_id: UUID, status: SubscriptionStatus
    ) -> None:
        self._update(user_id, subscription_status=status.value)

    def reset_wallet(self, user_id: UUID, balance: Decimal) -> None:
        self._update(
            user_id,
            virtual_balance=balance,
            monthly_starting_balance=balance,
            bankruptcy_expiry=None,
        )

    def set_password_reset(
        self, user_id: UUID, token_hash: str, expires_at: datetime
    ) -> None:
        self._update(
            user_id,
            password_reset_token=token_hash,
            password_reset_expires=as_utc(expires_at),
        )

    def get_by_reset_token(self, token_hash: str, now: datetime) -> Optional[User]:
        return self._fetch_one(
            select(users)
            .where(users.c.password_reset_token == token_hash)
            .where(users.c.password_reset_expires > as_utc(now))
        )

    def complete_password_reset(self, user_id: UUID, password_hash: str) -> None:
        self._update(
            user_id,
            password_hash=password_hash,
            password_reset_token=None,
            password_reset_expires=None,
        )
