"""Notification dispatch.

Single sends go straight to the delivery client. Bulk sends walk the guest list
one invitation at a time with a fixed pause between delivery calls and expose
their progress as a one-shot async sequence of snapshots.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime, tzinfo
from typing import Protocol

from synathrozo.dispatch.client import DeliveryClient
from synathrozo.dispatch.dtos import (
    BulkDispatchResult,
    DispatchFailure,
    NotificationPayload,
    ProgressSnapshot,
    RegistryLink,
)
from synathrozo.events.dtos import DEFAULT_TEMPLATE_ID, EventDTO, format_event_date, resolve_timezone
from synathrozo.invitations.dtos import InvitationDTO
from synathrozo.invitations.links import RSVPLinkConfig, build_rsvp_link
from synathrozo.invitations.store import InvitationStore
from synathrozo.results import Result, ValidationError, returns_result

logger = logging.getLogger(__name__)

NO_EMAIL = "No email"
NO_EMAIL_ERROR = "No email address"

# Bulk sends still running; keeps a strong reference until each finishes.
_running_sends: set[asyncio.Task] = set()


class DispatcherConfig(RSVPLinkConfig, Protocol):
    bulk_send_delay_seconds: float
    display_timezone: str


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


class NotificationDispatcher:
    def __init__(
        self,
        delivery_client: DeliveryClient,
        invitation_store: InvitationStore,
        config: DispatcherConfig,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self._delivery = delivery_client
        self._store = invitation_store
        self._config = config
        self._sleep = sleep

    @property
    def delay_seconds(self) -> float:
        return self._config.bulk_send_delay_seconds

    def build_payload(
        self,
        invitation: InvitationDTO,
        event: EventDTO,
        is_confirmation: bool = False,
        tz: tzinfo | None = None,
    ) -> NotificationPayload:
        """Compose the notification for one invitation.

        The date is formatted here, in the caller's time zone, so the email
        shows the time the host intended regardless of where it is rendered.
        """
        tz = tz or resolve_timezone(self._config.display_timezone)
        registry_links = None
        if is_confirmation and event.registry_links:
            registry_links = [RegistryLink(name=link.name, url=link.url) for link in event.registry_links]

        return NotificationPayload(
            to=invitation.email,
            guest_name=invitation.name or None,
            event_title=event.title,
            event_date=_as_utc(event.event_date).isoformat(),
            formatted_event_date=format_event_date(event.event_date, tz),
            event_location=event.location or None,
            event_description=event.description or None,
            rsvp_link=build_rsvp_link(self._config, invitation.token),
            template_id=event.template or DEFAULT_TEMPLATE_ID,
            custom_image_url=event.custom_image_url or None,
            is_confirmation=is_confirmation,
            registry_links=registry_links,
        )

    @returns_result("Send invitation email")
    async def dispatch_one(
        self,
        invitation: InvitationDTO,
        event: EventDTO,
        is_confirmation: bool = False,
        tz: tzinfo | None = None,
    ) -> str | None:
        """Deliver one invitation or confirmation and stamp its sent time. Returns the message id."""
        if not invitation.email:
            raise ValidationError(NO_EMAIL_ERROR)

        payload = self.build_payload(invitation, event, is_confirmation=is_confirmation, tz=tz)
        message_id = await self._delivery.deliver(payload)

        sent = await self._store.mark_sent(invitation.id)
        if not sent.success:
            logger.warning("Invitation %s sent but sent_at not recorded: %s", invitation.id, sent.error)
        return message_id

    def dispatch_bulk(
        self,
        invitations: list[InvitationDTO],
        event: EventDTO,
        tz: tzinfo | None = None,
    ) -> "BulkDispatch":
        return BulkDispatch(self, list(invitations), event, tz)

    async def sleep(self) -> None:
        await self._sleep(self.delay_seconds)


class BulkDispatch:
    """A bulk send and its progress.

    Iterating yields one ``ProgressSnapshot`` per invitation and can only be
    done once. The send runs as its own task: it starts on first iteration (or
    on ``start()``/``result()``) and always runs to the end of the list, even
    if the caller stops iterating.
    """

    def __init__(
        self,
        dispatcher: NotificationDispatcher,
        invitations: list[InvitationDTO],
        event: EventDTO,
        tz: tzinfo | None = None,
    ):
        self._dispatcher = dispatcher
        self._invitations = invitations
        self._event = event
        self._tz = tz
        self._queue: asyncio.Queue[ProgressSnapshot | None] = asyncio.Queue()
        self._task: asyncio.Task[BulkDispatchResult] | None = None
        self._exhausted = False

    @property
    def total(self) -> int:
        return len(self._invitations)

    def start(self) -> "BulkDispatch":
        if self._task is None:
            self._task = asyncio.create_task(self._run())
            _running_sends.add(self._task)
            self._task.add_done_callback(_running_sends.discard)
        return self

    async def result(self) -> BulkDispatchResult:
        """Wait for the send to finish and return the totals."""
        self.start()
        return await self._task

    def __aiter__(self) -> "BulkDispatch":
        return self.start()

    async def __anext__(self) -> ProgressSnapshot:
        if self._exhausted:
            raise StopAsyncIteration
        snapshot = await self._queue.get()
        if snapshot is None:
            self._exhausted = True
            raise StopAsyncIteration
        return snapshot

    async def _run(self) -> BulkDispatchResult:
        results = BulkDispatchResult()
        attempted = False
        try:
            for current, invitation in enumerate(self._invitations, start=1):
                if not invitation.email:
                    results.failed += 1
                    results.errors.append(DispatchFailure(email=NO_EMAIL, error=NO_EMAIL_ERROR))
                else:
                    # Small delay between emails to avoid the provider's rate limit
                    if attempted:
                        await self._dispatcher.sleep()
                    attempted = True

                    outcome = await self._dispatcher.dispatch_one(invitation, self._event, tz=self._tz)
                    if outcome.success:
                        results.success += 1
                    else:
                        results.failed += 1
                        results.errors.append(
                            DispatchFailure(
                                email=invitation.email,
                                error=outcome.error or "Failed to send email",
                            )
                        )

                self._queue.put_nowait(
                    ProgressSnapshot(
                        current=current,
                        total=self.total,
                        success=results.success,
                        failed=results.failed,
                    )
                )
        finally:
            self._queue.put_nowait(None)

        logger.info(
            "Bulk send for event %s finished: %d sent, %d failed",
            self._event.id,
            results.success,
            results.failed,
        )
        return results
