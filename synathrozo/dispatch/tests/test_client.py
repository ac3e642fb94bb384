"""Unit tests for HttpDeliveryClient, mocking the HTTP client."""

import httpx
import pytest

from synathrozo.dispatch.client import HttpDeliveryClient
from synathrozo.dispatch.dtos import NotificationPayload, RegistryLink
from synathrozo.results import DeliveryError

DELIVERY_URL = "https://functions.example.com/send-invitation-email"


class MockResponse:
    def __init__(self, *, json_data=None, status_code=200):
        self._json_data = json_data
        self.status_code = status_code

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300

    def json(self):
        if self._json_data is None:
            raise ValueError("No JSON body")
        return self._json_data


class MockHttpClient:
    """
    Replaces httpx.AsyncClient as the http_client_class.

    The client calls self._http_client_class() and uses the result as an
    async context manager, so __call__ returns self.
    """

    def __init__(self, response: MockResponse | None = None, error: Exception | None = None):
        self.post_calls: list[dict] = []
        self.options_calls: list[dict] = []
        self._response = response or MockResponse(json_data={"success": True, "id": "re_1"})
        self._error = error

    async def post(self, url: str, **kwargs) -> MockResponse:
        self.post_calls.append({"url": url, **kwargs})
        return self._response

    async def options(self, url: str, **kwargs) -> MockResponse:
        self.options_calls.append({"url": url, **kwargs})
        if self._error:
            raise self._error
        return self._response

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        pass

    def __call__(self):
        return self


class MockConfig:
    delivery_url = DELIVERY_URL
    delivery_api_key = "anon-key"


PAYLOAD = NotificationPayload(
    to="ana@example.com",
    guest_name="Ana",
    event_title="Anna & Ben",
    event_date="2026-06-06T18:00:00+00:00",
    rsvp_link="https://invites.example.com/rsvp.html?token=abc",
    is_confirmation=True,
    registry_links=[RegistryLink(name="Gifts", url="https://gifts.example.com")],
)


async def test_deliver_posts_camel_case_payload():
    http = MockHttpClient()
    client = HttpDeliveryClient(config=MockConfig(), http_client_class=http)

    message_id = await client.deliver(PAYLOAD)

    assert message_id == "re_1"
    call = http.post_calls[0]
    assert call["url"] == DELIVERY_URL
    assert call["headers"]["Authorization"] == "Bearer anon-key"
    assert call["json"]["eventTitle"] == "Anna & Ben"
    assert call["json"]["rsvpLink"] == "https://invites.example.com/rsvp.html?token=abc"
    assert call["json"]["isConfirmation"] is True
    assert call["json"]["registryLinks"] == [{"name": "Gifts", "url": "https://gifts.example.com"}]


async def test_deliver_reports_service_error():
    http = MockHttpClient(
        MockResponse(json_data={"success": False, "error": "Domain not verified"}, status_code=400)
    )
    client = HttpDeliveryClient(config=MockConfig(), http_client_class=http)

    with pytest.raises(DeliveryError, match="Domain not verified"):
        await client.deliver(PAYLOAD)


async def test_deliver_error_without_message():
    http = MockHttpClient(MockResponse(json_data={"success": False}, status_code=400))
    client = HttpDeliveryClient(config=MockConfig(), http_client_class=http)

    with pytest.raises(DeliveryError, match="Failed to send email"):
        await client.deliver(PAYLOAD)


async def test_deliver_unexpected_response():
    http = MockHttpClient(MockResponse(status_code=502))
    client = HttpDeliveryClient(config=MockConfig(), http_client_class=http)

    with pytest.raises(DeliveryError, match=r"Unexpected response from email service \(502\)"):
        await client.deliver(PAYLOAD)


async def test_is_reachable():
    http = MockHttpClient(MockResponse(json_data={}, status_code=200))
    client = HttpDeliveryClient(config=MockConfig(), http_client_class=http)

    assert await client.is_reachable() is True
    assert http.options_calls[0]["url"] == DELIVERY_URL


async def test_is_not_reachable_on_connection_error():
    http = MockHttpClient(error=httpx.ConnectError("Connection refused"))
    client = HttpDeliveryClient(config=MockConfig(), http_client_class=http)

    assert await client.is_reachable() is False


async def test_is_not_reachable_on_error_status():
    http = MockHttpClient(MockResponse(json_data={}, status_code=404))
    client = HttpDeliveryClient(config=MockConfig(), http_client_class=http)

    assert await client.is_reachable() is False
