import logging
from typing import Protocol

import httpx

from synathrozo.dispatch.dtos import DeliveryResponse, NotificationPayload
from synathrozo.results import DeliveryError

logger = logging.getLogger(__name__)


class DeliveryConfig(Protocol):
    delivery_url: str
    delivery_api_key: str


class DeliveryClient(Protocol):
    async def deliver(self, payload: NotificationPayload) -> str | None:
        """Send one notification and return the provider's message id."""
        ...

    async def is_reachable(self) -> bool: ...


class HttpDeliveryClient:
    """Posts notifications to the email function over HTTP."""

    def __init__(
        self,
        config: DeliveryConfig,
        http_client_class: type[httpx.AsyncClient] = httpx.AsyncClient,
    ):
        self._config = config
        self._http_client_class = http_client_class

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self._config.delivery_api_key:
            headers["Authorization"] = f"Bearer {self._config.delivery_api_key}"
        return headers

    async def deliver(self, payload: NotificationPayload) -> str | None:
        async with self._http_client_class() as client:
            response = await client.post(
                self._config.delivery_url,
                headers=self._headers(),
                json=payload.model_dump(mode="json", by_alias=True),
            )
            try:
                data = DeliveryResponse.model_validate(response.json())
            except ValueError:
                raise DeliveryError(f"Unexpected response from email service ({response.status_code})")

        if not data.success:
            raise DeliveryError(data.error or "Failed to send email")
        return data.id

    async def is_reachable(self) -> bool:
        try:
            async with self._http_client_class() as client:
                response = await client.options(self._config.delivery_url, headers=self._headers())
        except httpx.HTTPError as e:
            logger.warning(f"Email service unreachable: {e}")
            return False
        return response.is_success
