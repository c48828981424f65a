"""
FastAPI router for price alerts. Premium feature.

All routes delegate to use cases. No business logic here.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Response, status

from app.application.alerts.dtos import CreatePriceAlertCommand, UpdateAlertCommand
from app.application.alerts.manage_alerts import (
    AcknowledgeAlertUseCase,
    CreatePriceAlertUseCase,
    DeleteAlertUseCase,
    ListAlertsUseCase,
    ListNotificationsUseCase,
    UpdateAlertUseCase,
)
from app.domain.accounts.entities import User
from app.interfaces.alerts.dependencies import (
    get_acknowledge_alert_use_case,
    get_create_alert_use_case,
    get_delete_alert_use_case,
    get_list_alerts_use_case,
    get_list_notifications_use_case,
    get_update_alert_use_case,
)
from app.interfaces.alerts.schemas import (
    AlertResponse,
    CreatePriceAlertRequest,
    UpdateAlertRequest,
)
from app.interfaces.dependencies import require_premium
from app.interfaces.trading.schemas import ErrorResponse

alerts_user = require_premium("alerts")

router = APIRouter(prefix="/alerts", tags=["alerts"])

ERRORS = {
    400: {"model": ErrorResponse},
    403: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
}


@router.post(
    "",
    response_model=AlertResponse,
    status_code=status.HTTP_201_CREATED,
    responses=ERRORS,
    summary="Create a price alert",
)
def create_alert(
    request: CreatePriceAlertRequest,
    user: User = Depends(alerts_user),
    use_case: CreatePriceAlertUseCase = Depends(get_create_alert_use_case),
) -> AlertResponse:
    alert = use_case.execute(
        CreatePriceAlertCommand(
            user_id=user.id,
            symbol=request.symbol,
            target_price=request.target_price,
            operator=request.operator,
        )
    )
    return AlertResponse.model_validate(alert)


@router.get("", response_model=list[AlertResponse], summary="List alerts")
def list_alerts(
    user: User = Depends(alerts_user),
    use_case: ListAlertsUseCase = Depends(get_list_alerts_use_case),
) -> list[AlertResponse]:
    return [AlertResponse.model_validate(a) for a in use_case.execute(user.id)]


@router.get(
    "/notifications",
    response_model=list[AlertResponse],
    summary="Triggered alerts not yet acknowledged",
)
def list_notifications(
    user: User = Depends(alerts_user),
    use_case: ListNotificationsUseCase = Depends(get_list_notifications_use_case),
) -> list[AlertResponse]:
    return [AlertResponse.model_validate(a) for a in use_case.execute(user.id)]


@router.patch(
    "/{alert_id}",
    response_model=AlertResponse,
    responses=ERRORS,
    summary="Change the target, operator or re-arm an alert",
)
def update_alert(
    alert_id: UUID,
    request: UpdateAlertRequest,
    user: User = Depends(alerts_user),
    use_case: UpdateAlertUseCase = Depends(get_update_alert_use_case),
) -> AlertResponse:
    alert = use_case.execute(
        UpdateAlertCommand(
            user_id=user.id,
            alert_id=alert_id,
            target_price=request.target_price,
            operator=request.operator,
            status=request.status,
        )
    )
    return AlertResponse.model_validate(alert)


@router.delete(
    "/{alert_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses=ERRORS,
    summary="Delete an alert",
)
def delete_alert(
    alert_id: UUID,
    user: User = Depends(alerts_user),
    use_case: DeleteAlertUseCase = Depends(get_delete_alert_use_case),
) -> Response:
    use_case.execute(user.id, alert_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{alert_id}/acknowledge",
    response_model=AlertResponse,
    responses=ERRORS,
    summary="Mark a triggered alert as seen",
)
def acknowledge_alert(
    alert_id: UUID,
    user: User = Depends(alerts_user),
    use_case: AcknowledgeAlertUseCase = Depends(get_acknowledge_alert_use_case),
) -> AlertResponse:
    return AlertResponse.model_validate(use_case.execute(user.id, alert_id))
