"""Outbound e-mail through the SendGrid HTTP API."""
import html
import logging
from typing import Protocol

import requests

from recruit_api.config import (
    EMAIL_FROM_ADDRESS,
    EMAIL_FROM_NAME,
    EMAIL_TIMEOUT_SECONDS,
    SENDGRID_API_KEY,
    SENDGRID_API_URL,
)
from recruit_api.utils.cpf import mask_email

log = logging.getLogger(__name__)


class EmailSender(Protocol):
    def send(self, to: str, subject: str, html_body: str) -> bool: ...

    def send_auth_token(self, to: str, name: str, code: str, expiration_minutes: int) -> bool: ...


def build_auth_token_body(name: str, code: str, expiration_minutes: int) -> str:
    """Plain HTML body for the login code e-mail."""
    return (
        f"<p>Olá, {html.escape(name)}!</p>"
        f"<p>Seu código de verificação é: <strong>{html.escape(code)}</strong></p>"
        f"<p>O código expira em {expiration_minutes} minutos.</p>"
        "<p>Se você não solicitou este código, ignore esta mensagem.</p>"
    )


class SendGridEmailSender:
    """
    Sends mail through SendGrid.

    Without an API key nothing is sent and the message is only logged, so
    local environments can go through the login flow.
    """

    def __init__(
        self,
        api_key: str | None = SENDGRID_API_KEY,
        api_url: str = SENDGRID_API_URL,
        from_address: str = EMAIL_FROM_ADDRESS,
        from_name: str = EMAIL_FROM_NAME,
        timeout: int = EMAIL_TIMEOUT_SECONDS,
    ) -> None:
        self.api_key = api_key
        self.api_url = api_url
        self.from_address = from_address
        self.from_name = from_name
        self.timeout = timeout

    def send(self, to: str, subject: str, html_body: str) -> bool:
        if not self.api_key:
            log.info("SendGrid API key is missing; e-mail to %s not sent", mask_email(to))
            return True

        payload = {
            "personalizations": [{"to": [{"email": to}]}],
            "from": {"email": self.from_address, "name": self.from_name},
            "subject": subject,
            "content": [{"type": "text/html", "value": html_body}],
        }
        try:
            response = requests.post(
                self.api_url,
                json=payload,
                headers={"Authorization": f"Bearer {self.api_key}"},
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.RequestException as exc:
            log.warning("Failed to send e-mail to %s: %s", mask_email(to), exc)
            return False

        log.info("Sent e-mail '%s' to %s", subject, mask_email(to))
        return True

    def send_auth_token(self, to: str, name: str, code: str, expiration_minutes: int) -> bool:
        return self.send(
            to,
            "Seu código de verificação",
            build_auth_token_body(name, code, expiration_minutes),
        )
