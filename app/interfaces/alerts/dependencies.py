"""
Dependency injection for the alerts bounded context.
"""

from fastapi import Depends
from sqlalchemy.engine import Engine

from app.application.alerts.manage_alerts import (
    AcknowledgeAlertUseCase,
    CreatePriceAlertUseCase,
    DeleteAlertUseCase,
    ListAlertsUseCase,
    ListNotificationsUseCase,
    UpdateAlertUseCase,
)
from app.infrastructure.alerts.alert_repository import AlertRepositoryAdapter
from app.interfaces.dependencies import get_engine


def get_create_alert_use_case(
    engine: Engine = Depends(get_engine),
) -> CreatePriceAlertUseCase:
    return CreatePriceAlertUseCase(alert_repo=AlertRepositoryAdapter(engine))


def get_list_alerts_use_case(engine: Engine = Depends(get_engine)) -> ListAlertsUseCase:
    return ListAlertsUseCase(alert_repo=AlertRepositoryAdapter(engine))


def get_list_notifications_use_case(
    engine: Engine = Depends(get_engine),
) -> ListNotificationsUseCase:
    return ListNotificationsUseCase(alert_repo=AlertRepositoryAdapter(engine))


def get_update_alert_use_case(engine: Engine = Depends(get_engine)) -> UpdateAlertUseCase:
    return UpdateAlertUseCase(alert_repo=AlertRepositoryAdapter(engine))


def get_delete_alert_use_case(engine: Engine = Depends(get_engine)) -> DeleteAlertUseCase:
    return DeleteAlertUseCase(alert_repo=AlertRepositoryAdapter(engine))


def get_acknowledge_alert_use_case(
    engine: Engine = Depends(get_engine),
) -> AcknowledgeAlertUseCase:
    return AcknowledgeAlertUseCase(alert_repo=AlertRepositoryAdapter(engine))
