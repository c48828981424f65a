"""
Adapter: Alert persistence.

Implements AlertRepository port. The type-specific settings are kept
in a JSON column.
"""

from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.engine import Engine, RowMapping

from app.domain.alerts.entities import Alert, AlertStatus, AlertType
from app.domain.alerts.ports import AlertRepository
from app.infrastructure.database import alerts, as_utc


def _row_to_alert(row: RowMapping) -> Alert:
    return Alert(
        id=UUID(row["id"]),
        user_id=UUID(row["user_id"]),
        type=AlertType(row["type"]),
        status=AlertStatus(row["status"]),
        config=dict(row["config"] or {}),
        created_at=as_utc(row["created_at"]),
        triggered_at=as_utc(row["triggered_at"]),
    )


class AlertRepositoryAdapter(AlertRepository):
    """SQLAlchemy adapter for the ``alerts`` table."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def add(self, alert: Alert) -> None:
        with self._engine.begin() as conn:
            conn.execute(
                alerts.insert().values(
                    id=str(alert.id),
                    user_id=str(alert.user_id),
                    type=alert.type.value,
                    status=alert.status.value,
                    config=alert.config,
                    created_at=alert.created_at,
                    triggered_at=alert.triggered_at,
                )
            )

    def _fetch(self, stmt) -> list[Alert]:
        with self._engine.connect() as conn:
            rows = conn.execute(stmt).mappings().all()
        return [_row_to_alert(r) for r in rows]

    def get(self, alert_id: UUID) -> Optional[Alert]:
        found = self._fetch(select(alerts).where(alerts.c.id == str(alert_id)))
        return found[0] if found else None

    def list_for_user(
        self, user_id: UUID, status: Optional[AlertStatus] = None
    ) -> list[Alert]:
        stmt = (
            select(alerts)
            .where(alerts.c.user_id == str(user_id))
            .where(alerts.c.status != AlertStatus.DELETED.value)
        )
        if status is not None:
            stmt = stmt.where(alerts.c.status == status.value)
        return self._fetch(stmt.order_by(alerts.c.created_at.desc()))

    def list_active(self, alert_type: Optional[AlertType] = None) -> list[Alert]:
        stmt = select(alerts).where(alerts.c.status == AlertStatus.ACTIVE.value)
        if alert_type is not None:
            stmt = stmt.where(alerts.c.type == alert_type.value)
        return self._fetch(stmt.order_by(alerts.c.created_at))

    def update_config(self, alert_id: UUID, config: dict[str, Any]) -> None:
        with self._engine.begin() as conn:
            conn.execute(
                update(alerts).where(alerts.c.id == str(alert_id)).values(config=config)
            )

    def set_status(
        self,
        alert_ids: list[UUID],
        status: AlertStatus,
        triggered_at: Optional[datetime] = None,
    ) -> int:
        if not alert_ids:
            return 0
        with self._engine.begin() as conn:
            result = conn.execute(
                update(alerts)
                .where(alerts.c.id.in_([str(i) for i in alert_ids]))
                .values(status=status.value, triggered_at=triggered_at)
            )
        return result.rowcount
