"""
FastAPI routers for accounts: authentication, profile and subscription.

All routes delegate to use cases. No business logic here.
Error mapping is handled by centralized error handlers.
"""

from fastapi import APIRouter, Depends, Request, Response, status

from app.application.accounts.dtos import (
    ChangePasswordCommand,
    LoginCommand,
    PaymentEventCommand,
    RegisterUserCommand,
    ResetPasswordCommand,
    UpdateUsernameCommand,
)
from app.application.accounts.password_reset import (
    RequestPasswordResetUseCase,
    ResetPasswordUseCase,
)
from app.application.accounts.profile import (
    ChangePasswordUseCase,
    GetProfileUseCase,
    SetRankingVisibilityUseCase,
    UpdateUsernameUseCase,
)
from app.application.accounts.register_user import RegisterUserUseCase
from app.application.accounts.sessions import LoginUseCase, LogoutUseCase
from app.application.accounts.subscription import (
    ApplyPaymentEventUseCase,
    CancelSubscriptionUseCase,
    GetSubscriptionUseCase,
)
from app.domain.accounts.entities import User
from app.interfaces.accounts.dependencies import (
    get_cancel_subscription_use_case,
    get_change_password_use_case,
    get_login_use_case,
    get_logout_use_case,
    get_payment_event_use_case,
    get_profile_use_case,
    get_ranking_visibility_use_case,
    get_register_user_use_case,
    get_request_password_reset_use_case,
    get_reset_password_use_case,
    get_subscription_use_case,
    get_update_username_use_case,
)
from app.interfaces.accounts.schemas import (
    ChangePasswordRequest,
    LoginRequest,
    MessageResponse,
    PasswordResetConfirmRequest,
    PasswordResetRequest,
    PaymentEventRequest,
    RankingVisibilityRequest,
    RegisterRequest,
    SubscriptionResponse,
    TokenResponse,
    UpdateUsernameRequest,
    UserProfileResponse,
)
from app.interfaces.dependencies import (
    get_bearer_token,
    get_current_user,
    verify_cron_secret,
)
from app.shared.security.rate_limiting import AUTH_RATE_LIMIT, limiter

auth_router = APIRouter(prefix="/auth", tags=["auth"])
users_router = APIRouter(prefix="/users/me", tags=["users"])
webhooks_router = APIRouter(prefix="/webhooks", tags=["webhooks"])

PASSWORD_RESET_MESSAGE = (
    "Se uma conta com este e-mail existir, um link de redefinição será enviado."
)


@auth_router.post(
    "/register",
    response_model=UserProfileResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create an account",
)
@limiter.limit(AUTH_RATE_LIMIT)
def register(
    request: Request,
    body: RegisterRequest,
    use_case: RegisterUserUseCase = Depends(get_register_user_use_case),
) -> UserProfileResponse:
    profile = use_case.execute(
        RegisterUserCommand(
            email=body.email,
            username=body.username,
            password=body.password,
            name=body.name,
        )
    )
    return UserProfileResponse.model_validate(profile)


@auth_router.post("/login", response_model=TokenResponse, summary="Open a session")
@limiter.limit(AUTH_RATE_LIMIT)
def login(
    request: Request,
    body: LoginRequest,
    use_case: LoginUseCase = Depends(get_login_use_case),
) -> TokenResponse:
    result = use_case.execute(LoginCommand(email=body.email, password=body.password))
    return TokenResponse(
        access_token=result.token,
        expires_at=result.expires_at,
        user=UserProfileResponse.model_validate(result.user),
    )


@auth_router.post(
    "/logout", status_code=status.HTTP_204_NO_CONTENT, summary="Revoke the session"
)
def logout(
    token: str = Depends(get_bearer_token),
    use_case: LogoutUseCase = Depends(get_logout_use_case),
) -> Response:
    use_case.execute(token)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@auth_router.post(
    "/password-reset",
    response_model=MessageResponse,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Email a password reset link",
    description="Answers the same way whether or not the email has an account.",
)
@limiter.limit(AUTH_RATE_LIMIT)
def request_password_reset(
    request: Request,
    body: PasswordResetRequest,
    use_case: RequestPasswordResetUseCase = Depends(get_request_password_reset_use_case),
) -> MessageResponse:
    use_case.execute(body.email)
    return MessageResponse(message=PASSWORD_RESET_MESSAGE)


@auth_router.post(
    "/password-reset/confirm",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Set a new password with a reset token",
)
@limiter.limit(AUTH_RATE_LIMIT)
def confirm_password_reset(
    request: Request,
    body: PasswordResetConfirmRequest,
    use_case: ResetPasswordUseCase = Depends(get_reset_password_use_case),
) -> Response:
    use_case.execute(ResetPasswordCommand(token=body.token, new_password=body.new_password))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@users_router.get("", response_model=UserProfileResponse, summary="Current profile")
def get_profile(
    user: User = Depends(get_current_user),
    use_case: GetProfileUseCase = Depends(get_profile_use_case),
) -> UserProfileResponse:
    return UserProfileResponse.model_validate(use_case.execute(user.id))


@users_router.put(
    "/password", status_code=status.HTTP_204_NO_CONTENT, summary="Change password"
)
def change_password(
    body: ChangePasswordRequest,
    user: User = Depends(get_current_user),
    use_case: ChangePasswordUseCase = Depends(get_change_password_use_case),
) -> Response:
    use_case.execute(
        ChangePasswordCommand(
            user_id=user.id,
            current_password=body.current_password,
            new_password=body.new_password,
        )
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@users_router.put(
    "/username", response_model=UserProfileResponse, summary="Change username"
)
def update_username(
    body: UpdateUsernameRequest,
    user: User = Depends(get_current_user),
    use_case: UpdateUsernameUseCase = Depends(get_update_username_use_case),
) -> UserProfileResponse:
    profile = use_case.execute(UpdateUsernameCommand(user_id=user.id, username=body.username))
    return UserProfileResponse.model_validate(profile)


@users_router.put(
    "/ranking-visibility",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Show or hide the user on the leaderboard",
)
def set_ranking_visibility(
    body: RankingVisibilityRequest,
    user: User = Depends(get_current_user),
    use_case: SetRankingVisibilityUseCase = Depends(get_ranking_visibility_use_case),
) -> Response:
    use_case.execute(user.id, body.visible)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@users_router.get(
    "/subscription", response_model=SubscriptionResponse, summary="Subscription status"
)
def get_subscription(
    user: User = Depends(get_current_user),
    use_case: GetSubscriptionUseCase = Depends(get_subscription_use_case),
) -> SubscriptionResponse:
    return SubscriptionResponse.model_validate(use_case.execute(user.id))


@users_router.post(
    "/subscription/cancel",
    response_model=SubscriptionResponse,
    summary="Cancel the recurring subscription",
)
def cancel_subscription(
    user: User = Depends(get_current_user),
    use_case: CancelSubscriptionUseCase = Depends(get_cancel_subscription_use_case),
) -> SubscriptionResponse:
    return SubscriptionResponse.model_validate(use_case.execute(user.id))


@webhooks_router.post(
    "/payment",
    response_model=SubscriptionResponse,
    dependencies=[Depends(verify_cron_secret)],
    summary="Apply a payment status change",
)
def payment_event(
    body: PaymentEventRequest,
    use_case: ApplyPaymentEventUseCase = Depends(get_payment_event_use_case),
) -> SubscriptionResponse:
    info = use_case.execute(PaymentEventCommand(email=body.email, status=body.status))
    return SubscriptionResponse.model_validate(info)
