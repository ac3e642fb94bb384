import pytest

from synathrozo.urls import EVENT_INVITATIONS_URL, EVENTS_URL, RSVP_OPENED_URL, RSVP_URL


@pytest.fixture
async def invitation(client, owner_headers):
    event = await client.post(
        EVENTS_URL,
        json={
            "title": "Garden Party",
            "event_date": "2026-06-06T18:00:00Z",
            "registry_links": [{"name": "Gifts", "url": "https://gifts.example.com/list"}],
        },
        headers=owner_headers,
    )
    created = await client.post(
        EVENT_INVITATIONS_URL.format(event_id=event.json()["id"]),
        json={"emails": ["ana@example.com"]},
        headers=owner_headers,
    )
    return created.json()[0]


async def test_get_rsvp(client, invitation):
    response = await client.get(RSVP_URL.format(token=invitation["token"]))

    assert response.status_code == 200
    data = response.json()
    assert data["invitation"]["status"] == "pending"
    assert data["event"]["title"] == "Garden Party"


async def test_get_rsvp_invalid_token(client):
    response = await client.get(RSVP_URL.format(token="invalid-token"))

    assert response.status_code == 404
    assert response.json()["detail"] == "Invitation not found"


async def test_mark_opened_is_idempotent(client, invitation):
    url = RSVP_OPENED_URL.format(token=invitation["token"])

    first = await client.post(url)
    second = await client.post(url)

    assert first.json()["status"] == "opened"
    assert second.json()["opened_at"] == first.json()["opened_at"]


async def test_accept_sends_confirmation(client, invitation, delivery_client):
    response = await client.post(
        RSVP_URL.format(token=invitation["token"]),
        json={"attending": True, "name": "Ana", "guest_count": 2},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["message"] == "Thank you for confirming your attendance!"
    assert data["confirmation_sent"] is True
    assert data["invitation"]["status"] == "accepted"
    assert data["invitation"]["guest_count"] == 2

    confirmation = delivery_client.sent[0]
    assert confirmation.is_confirmation is True
    assert confirmation.to == "ana@example.com"
    assert confirmation.registry_links[0].name == "Gifts"

    stored = await client.get(RSVP_URL.format(token=invitation["token"]))
    assert stored.json()["invitation"]["sent_at"] is not None


async def test_decline(client, invitation, delivery_client):
    response = await client.post(
        RSVP_URL.format(token=invitation["token"]),
        json={"attending": False, "guest_count": 3},
    )

    data = response.json()
    assert data["message"] == "We're sorry you can't make it. Your response has been recorded."
    assert data["invitation"]["status"] == "declined"
    assert data["invitation"]["guest_count"] == 0
    assert data["confirmation_sent"] is False
    assert delivery_client.sent == []


async def test_answer_can_be_changed(client, invitation):
    url = RSVP_URL.format(token=invitation["token"])
    await client.post(url, json={"attending": False})

    response = await client.post(url, json={"attending": True})

    assert response.json()["invitation"]["status"] == "accepted"
    assert response.json()["invitation"]["guest_count"] == 1


async def test_failed_confirmation_still_records_answer(client, invitation, delivery_client):
    delivery_client.failures["ana@example.com"] = "Mailbox full"

    response = await client.post(RSVP_URL.format(token=invitation["token"]), json={"attending": True})

    assert response.status_code == 200
    assert response.json()["invitation"]["status"] == "accepted"
    assert response.json()["confirmation_sent"] is False


async def test_rsvp_validation(client, invitation):
    response = await client.post(
        RSVP_URL.format(token=invitation["token"]),
        json={"attending": True, "guest_count": -1},
    )

    assert response.status_code == 422


async def test_rsvp_invalid_token(client):
    response = await client.post(RSVP_URL.format(token="invalid-token"), json={"attending": True})

    assert response.status_code == 404


@pytest.mark.parametrize("email", ["", "   "])
async def test_blank_email_keeps_stored_address(client, invitation, email):
    response = await client.post(
        RSVP_URL.format(token=invitation["token"]),
        json={"attending": True, "name": "Ana", "email": email},
    )

    assert response.status_code == 200
    assert response.json()["invitation"]["email"] == "ana@example.com"

    stored = await client.get(RSVP_URL.format(token=invitation["token"]))
    assert stored.json()["invitation"]["email"] == "ana@example.com"
    assert stored.json()["invitation"]["status"] == "accepted"


async def test_invalid_email_is_rejected(client, invitation):
    response = await client.post(
        RSVP_URL.format(token=invitation["token"]),
        json={"attending": True, "email": "not-an-email"},
    )

    assert response.status_code == 422
