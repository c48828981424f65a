"""
Adapter: Transactional email through an HTTP email API.

Implements the AlertNotifier and AccountNotifier ports by POSTing
plain-text messages to a Resend-compatible ``/emails`` endpoint.
"""

import logging
from decimal import Decimal
from typing import Optional

import httpx

from app.domain.accounts.entities import PasswordResetMessage
from app.domain.accounts.ports import AccountNotifier
from app.domain.alerts.entities import PriceAlertMessage, PriceOperator
from app.domain.alerts.ports import AlertNotifier
from app.domain.errors import NotificationError

logger = logging.getLogger(__name__)

CHANNEL = "email"


def _format_price(value: Decimal) -> str:
    return f"{value:,.8f}".rstrip("0").rstrip(".")


def render_price_alert(message: PriceAlertMessage) -> tuple[str, str]:
    """Return (subject, body) of a triggered price alert email."""
    direction = "subiu acima de" if message.operator is PriceOperator.GREATER_THAN else "caiu abaixo de"
    subject = f"Alerta de preço: {message.symbol}"
    body = (
        f"Olá, {message.user_name}!\n\n"
        f"O preço de {message.symbol} {direction} {_format_price(message.target_price)}.\n"
        f"Preço atual: {_format_price(message.price)}.\n\n"
        "Este alerta foi desativado. Você pode reativá-lo no painel de alertas.\n"
    )
    return subject, body


def render_password_reset(message: PasswordResetMessage) -> tuple[str, str]:
    subject = "Redefina sua senha da CriptoPlay"
    body = (
        f"Olá, {message.user_name}!\n\n"
        "Recebemos um pedido para redefinir a senha da sua conta.\n"
        f"Use o link abaixo em até {message.expires_in_minutes} minutos:\n\n"
        f"{message.reset_link}\n\n"
        "Se você não fez esse pedido, ignore este e-mail. Sua senha continua a mesma.\n"
    )
    return subject, body


class EmailNotifier(AlertNotifier, AccountNotifier):
    """Send alert and account emails.

    Args:
        api_url: Full URL of the email send endpoint.
        api_key: Bearer key of the email API. When missing, sending fails
            with NotificationError.
        sender: ``From`` address.
        timeout: HTTP timeout in seconds.
        client: Optional preconfigured ``httpx.Client``.
    """

    def __init__(
        self,
        api_url: str,
        api_key: Optional[str],
        sender: str,
        timeout: float = 10.0,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self._api_url = api_url
        self._api_key = api_key
        self._sender = sender
        self._client = client or httpx.Client(timeout=timeout)

    def send_price_alert(self, message: PriceAlertMessage) -> None:
        subject, body = render_price_alert(message)
        self._send(message.to, subject, body)
        logger.info("Price alert email sent for %s", message.symbol)

    def send_password_reset(self, message: PasswordResetMessage) -> None:
        subject, body = render_password_reset(message)
        self._send(message.to, subject, body)
        logger.info("Password reset email sent")

    def _send(self, to: str, subject: str, body: str) -> None:
        if not self._api_key:
            raise NotificationError(CHANNEL, "email API key is not configured")

        payload = {
            "from": self._sender,
            "to": [to],
            "subject": subject,
            "text": body,
        }
        try:
            resp = self._client.post(
                self._api_url,
                json=payload,
                headers={"Authorization": f"Bearer {self._api_key}"},
            )
            resp.raise_for_status()
        except httpx.HTTPError as exc:
            logger.error("Email API call failed (%s): %s", subject, exc)
            raise NotificationError(CHANNEL, str(exc)) from exc
