import pytest

from synathrozo.urls import (
    EVENT_INVITATION_SINGLE_URL,
    EVENT_INVITATION_STATS_URL,
    EVENT_INVITATIONS_URL,
    EVENTS_URL,
    INVITATION_URL,
    RSVP_URL,
)

OTHER_OWNER = {"X-User-Id": "22222222-2222-2222-2222-222222222222"}


@pytest.fixture
async def event_id(client, owner_headers):
    response = await client.post(
        EVENTS_URL,
        json={"title": "Garden Party", "event_date": "2026-06-06T18:00:00Z"},
        headers=owner_headers,
    )
    return response.json()["id"]


async def test_create_invitations(client, owner_headers, event_id):
    response = await client.post(
        EVENT_INVITATIONS_URL.format(event_id=event_id),
        json={"emails": ["Ana@Example.com", "ben@example.com"]},
        headers=owner_headers,
    )

    assert response.status_code == 201
    data = response.json()
    assert sorted(i["email"] for i in data) == ["ana@example.com", "ben@example.com"]
    assert {i["status"] for i in data} == {"pending"}


async def test_create_invitations_invalid_email(client, owner_headers, event_id):
    response = await client.post(
        EVENT_INVITATIONS_URL.format(event_id=event_id),
        json={"emails": ["not-an-email"]},
        headers=owner_headers,
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid email address: not-an-email"


async def test_create_invitations_for_foreign_event(client, event_id):
    response = await client.post(
        EVENT_INVITATIONS_URL.format(event_id=event_id),
        json={"emails": ["ana@example.com"]},
        headers=OTHER_OWNER,
    )

    assert response.status_code == 404


async def test_create_link_only_invitation(client, owner_headers, event_id):
    response = await client.post(
        EVENT_INVITATION_SINGLE_URL.format(event_id=event_id),
        json={"name": "Uncle Bob"},
        headers=owner_headers,
    )

    assert response.status_code == 201
    assert response.json()["email"] is None
    assert response.json()["name"] == "Uncle Bob"


async def test_list_and_stats(client, owner_headers, event_id):
    created = await client.post(
        EVENT_INVITATIONS_URL.format(event_id=event_id),
        json={"emails": ["ana@example.com", "ben@example.com", "cy@example.com"]},
        headers=owner_headers,
    )
    tokens = [i["token"] for i in created.json()]
    await client.post(RSVP_URL.format(token=tokens[0]), json={"attending": True, "guest_count": 2})
    await client.post(RSVP_URL.format(token=tokens[1]), json={"attending": False})

    listed = await client.get(EVENT_INVITATIONS_URL.format(event_id=event_id), headers=owner_headers)
    stats = await client.get(EVENT_INVITATION_STATS_URL.format(event_id=event_id), headers=owner_headers)

    assert len(listed.json()) == 3
    assert stats.status_code == 200
    assert stats.json() == {
        "total": 3,
        "pending": 1,
        "opened": 0,
        "accepted": 1,
        "declined": 1,
        "total_guests": 2,
    }


async def test_stats_requires_owner(client, event_id):
    response = await client.get(EVENT_INVITATION_STATS_URL.format(event_id=event_id))

    assert response.status_code == 401


async def test_delete_invitation(client, owner_headers, event_id):
    created = await client.post(
        EVENT_INVITATIONS_URL.format(event_id=event_id),
        json={"emails": ["ana@example.com"]},
        headers=owner_headers,
    )
    url = INVITATION_URL.format(invitation_id=created.json()[0]["id"])

    assert (await client.delete(url, headers=OTHER_OWNER)).status_code == 404
    assert (await client.delete(url, headers=owner_headers)).status_code == 204
    assert (await client.delete(url, headers=owner_headers)).status_code == 404
