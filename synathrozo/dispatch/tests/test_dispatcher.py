import asyncio
from zoneinfo import ZoneInfo

import pytest

from synathrozo.dispatch.dispatcher import NO_EMAIL, NO_EMAIL_ERROR, NotificationDispatcher
from synathrozo.dispatch.dtos import DispatchFailure, ProgressSnapshot
from synathrozo.events.dtos import RegistryLinkDTO
from synathrozo.invitations.tests.inmemory_models import (
    DispatchConfig,
    InMemoryDeliveryClient,
    InMemoryInvitationStore,
    RecordingSleep,
    create_test_event,
    create_test_invitation,
)
from synathrozo.results import ErrorKind


@pytest.fixture
def event():
    return create_test_event(
        location="Old Mill",
        registry_links=[RegistryLinkDTO(name="Gifts", url="https://gifts.example.com")],
    )


@pytest.fixture
def store(event):
    return InMemoryInvitationStore(events=[event])


@pytest.fixture
def sleep():
    return RecordingSleep()


def make_dispatcher(store, delivery=None, sleep=None):
    return NotificationDispatcher(
        delivery_client=delivery or InMemoryDeliveryClient(),
        invitation_store=store,
        config=DispatchConfig(),
        sleep=sleep or RecordingSleep(),
    )


def test_build_payload(store, event):
    invitation = create_test_invitation(event.id, token="tok-1", name="Ana")

    payload = make_dispatcher(store).build_payload(invitation, event)

    assert payload.to == "guest@example.com"
    assert payload.guest_name == "Ana"
    assert payload.event_title == event.title
    assert payload.event_date == "2026-06-06T18:00:00+00:00"
    assert payload.formatted_event_date == "Saturday, June 6, 2026 at 06:00 PM"
    assert payload.rsvp_link == "https://invites.example.com/rsvp.html?token=tok-1"
    assert payload.template_id == "shabby-chic"
    assert payload.is_confirmation is False
    assert payload.registry_links is None


def test_build_payload_in_caller_timezone(store, event):
    invitation = create_test_invitation(event.id)

    payload = make_dispatcher(store).build_payload(
        invitation, event, tz=ZoneInfo("America/Los_Angeles")
    )

    assert payload.formatted_event_date == "Saturday, June 6, 2026 at 11:00 AM"


def test_confirmation_payload_carries_registry(store, event):
    invitation = create_test_invitation(event.id)

    payload = make_dispatcher(store).build_payload(invitation, event, is_confirmation=True)

    assert payload.is_confirmation is True
    assert [link.name for link in payload.registry_links] == ["Gifts"]
    assert payload.model_dump(by_alias=True)["registryLinks"][0]["url"] == "https://gifts.example.com"


async def test_dispatch_one_marks_sent(store, event):
    invitation = store.add(create_test_invitation(event.id))
    delivery = InMemoryDeliveryClient()

    result = await make_dispatcher(store, delivery).dispatch_one(invitation, event)

    assert result.success
    assert result.data == "msg-1"
    assert store.sent_ids == [invitation.id]
    assert store.invitations[invitation.id].sent_at is not None


async def test_dispatch_one_confirmation_marks_sent(store, event):
    invitation = store.add(create_test_invitation(event.id))

    result = await make_dispatcher(store).dispatch_one(invitation, event, is_confirmation=True)

    assert result.success
    assert store.sent_ids == [invitation.id]
    assert store.invitations[invitation.id].sent_at is not None


async def test_dispatch_one_without_email(store, event):
    invitation = store.add(create_test_invitation(event.id, email=None))
    delivery = InMemoryDeliveryClient()

    result = await make_dispatcher(store, delivery).dispatch_one(invitation, event)

    assert not result.success
    assert result.kind == ErrorKind.VALIDATION
    assert result.error == NO_EMAIL_ERROR
    assert delivery.sent == []


async def test_dispatch_one_delivery_failure(store, event):
    invitation = store.add(create_test_invitation(event.id, email="bounce@example.com"))
    delivery = InMemoryDeliveryClient(failures={"bounce@example.com": "Mailbox full"})

    result = await make_dispatcher(store, delivery).dispatch_one(invitation, event)

    assert not result.success
    assert result.kind == ErrorKind.COLLABORATOR
    assert result.error == "Mailbox full"
    assert store.sent_ids == []


async def test_bulk_mixed_outcomes(store, event, sleep):
    no_email = store.add(create_test_invitation(event.id, email=None))
    failing = store.add(create_test_invitation(event.id, email="bounce@example.com"))
    working = store.add(create_test_invitation(event.id, email="ana@example.com"))
    delivery = InMemoryDeliveryClient(failures={"bounce@example.com": "Mailbox full"})
    dispatcher = make_dispatcher(store, delivery, sleep)

    bulk = dispatcher.dispatch_bulk([no_email, failing, working], event)
    snapshots = [snapshot async for snapshot in bulk]
    result = await bulk.result()

    assert result.success == 1
    assert result.failed == 2
    assert result.errors == [
        DispatchFailure(email=NO_EMAIL, error=NO_EMAIL_ERROR),
        DispatchFailure(email="bounce@example.com", error="Mailbox full"),
    ]
    assert snapshots == [
        ProgressSnapshot(current=1, total=3, success=0, failed=1),
        ProgressSnapshot(current=2, total=3, success=0, failed=2),
        ProgressSnapshot(current=3, total=3, success=1, failed=2),
    ]
    assert [payload.to for payload in delivery.sent] == ["bounce@example.com", "ana@example.com"]
    assert store.sent_ids == [working.id]
    # one pause between the two delivery calls
    assert sleep.calls == [0.2]


async def test_bulk_pauses_between_each_send(store, event, sleep):
    invitations = [
        store.add(create_test_invitation(event.id, email=f"guest{i}@example.com")) for i in range(4)
    ]

    result = await make_dispatcher(store, sleep=sleep).dispatch_bulk(invitations, event).result()

    assert result.success == 4
    assert result.errors == []
    assert sleep.calls == [0.2, 0.2, 0.2]


async def test_bulk_empty_list(store, event, sleep):
    bulk = make_dispatcher(store, sleep=sleep).dispatch_bulk([], event)

    assert [snapshot async for snapshot in bulk] == []
    result = await bulk.result()
    assert (result.success, result.failed) == (0, 0)
    assert sleep.calls == []


async def test_bulk_progress_is_one_shot(store, event):
    invitation = store.add(create_test_invitation(event.id))
    bulk = make_dispatcher(store).dispatch_bulk([invitation], event)

    first = [snapshot async for snapshot in bulk]
    second = [snapshot async for snapshot in bulk]

    assert len(first) == 1
    assert second == []


async def test_bulk_finishes_when_consumer_stops(store, event):
    invitations = [
        store.add(create_test_invitation(event.id, email=f"guest{i}@example.com")) for i in range(3)
    ]
    bulk = make_dispatcher(store).dispatch_bulk(invitations, event)

    async for snapshot in bulk:
        break

    result = await asyncio.wait_for(bulk.result(), timeout=1)
    assert result.success == 3
    assert len(store.sent_ids) == 3
