"""
Adapter: Login session persistence.

Implements SessionRepository port on top of the ``sessions`` table.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.engine import Engine

from app.domain.accounts.entities import Session
from app.domain.accounts.ports import SessionRepository
from app.infrastructure.database import as_utc, sessions


class SessionRepositoryAdapter(SessionRepository):
    """SQLAlchemy adapter for login sessions."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def add(self, session: Session) -> None:
        with self._engine.begin() as conn:
            conn.execute(
                sessions.insert().values(
                    token=session.token,
                    user_id=str(session.user_id),
                    created_at=session.created_at,
                    expires_at=session.expires_at,
                )
            )

    def get(self, token: str) -> Optional[Session]:
        with self._engine.connect() as conn:
            row = conn.execute(
                select(sessions).where(sessions.c.token == token)
            ).mappings().first()
        if not row:
            return None
        return Session(
            token=row["token"],
            user_id=UUID(row["user_id"]),
            expires_at=as_utc(row["expires_at"]),
            created_at=as_utc(row["created_at"]),
        )

    def delete(self, token: str) -> None:
        with self._engine.begin() as conn:
            conn.execute(delete(sessions).where(sessions.c.token == token))

    def delete_for_user(self, user_id: UUID) -> int:
        with self._engine.begin() as conn:
            result = conn.execute(
                delete(sessions).where(sessions.c.user_id == str(user_id))
            )
        return result.rowcount

    def delete_expired(self, now: datetime) -> int:
        with self._engine.begin() as conn:
            result = conn.execute(delete(sessions).where(sessions.c.expires_at <= now))
        return result.rowcount
