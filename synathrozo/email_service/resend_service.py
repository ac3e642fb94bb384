import logging
from typing import Protocol

import httpx

from synathrozo.dispatch.dtos import NotificationPayload
from synathrozo.email_service.base import EmailServiceBase
from synathrozo.email_service.templates import EmailTemplates
from synathrozo.results import DeliveryError

logger = logging.getLogger(__name__)

RESEND_EMAILS_URL = "https://api.resend.com/emails"


class ResendEmailConfig(Protocol):
    resend_api_key: str
    emails_from: str


class ResendEmailService(EmailServiceBase):
    def __init__(
        self,
        config: ResendEmailConfig,
        http_client_class: type[httpx.AsyncClient] = httpx.AsyncClient,
    ):
        self._config = config
        self._http_client_class = http_client_class

    async def _send(
        self,
        to_address: str,
        subject: str,
        html_body: str,
        text_body: str,
    ) -> str | None:
        """Send email via Resend and return the Resend email id."""
        if not self._config.resend_api_key:
            raise DeliveryError("RESEND_API_KEY is not configured")

        async with self._http_client_class() as client:
            response = await client.post(
                RESEND_EMAILS_URL,
                headers={
                    "Authorization": f"Bearer {self._config.resend_api_key}",
                    "Content-Type": "application/json",
                },
                json={
                    "from": self._config.emails_from,
                    "to": [to_address],
                    "subject": subject,
                    "html": html_body,
                    "text": text_body,
                },
            )

        try:
            response_data = response.json()
        except ValueError:
            response_data = {}

        if response.status_code >= 400:
            message = response_data.get("message") or "Failed to send email"
            logger.error(f"Resend rejected email to {to_address}: {message}")
            raise DeliveryError(message)

        resend_email_id = response_data.get("id")
        logger.info(f"Sent email {resend_email_id} to {to_address}")
        return resend_email_id

    async def send_invitation(self, payload: NotificationPayload) -> str | None:
        subject, html_body, text_body = EmailTemplates.render(payload)
        return await self._send(
            to_address=payload.to,
            subject=subject,
            html_body=html_body,
            text_body=text_body,
        )
