import json
from dataclasses import asdict
from datetime import tzinfo
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import StreamingResponse
from pydantic import BaseModel

from synathrozo.auth import get_current_owner_id
from synathrozo.dependencies import (
    get_delivery_client,
    get_dispatcher,
    get_event_store,
    get_invitation_store,
    unwrap,
)
from synathrozo.dispatch.client import DeliveryClient
from synathrozo.dispatch.dispatcher import BulkDispatch, NotificationDispatcher
from synathrozo.events.dtos import resolve_timezone
from synathrozo.events.store import EventStore
from synathrozo.invitations.store import InvitationStore
from synathrozo.urls import EMAIL_STATUS_URL, EVENT_INVITATIONS_SEND_URL, INVITATION_SEND_URL

router = APIRouter()


class SendInvitationResponse(BaseModel):
    success: bool
    id: str | None = None


class EmailStatusResponse(BaseModel):
    configured: bool


def get_caller_timezone(tz: str | None = None) -> tzinfo | None:
    """Time zone of the caller (IANA name), used to pre-format event dates."""
    if not tz:
        return None
    try:
        return resolve_timezone(tz)
    except (KeyError, ValueError):
        raise HTTPException(status_code=400, detail=f"Unknown time zone: {tz}")


async def _progress_lines(bulk: BulkDispatch):
    async for snapshot in bulk:
        yield json.dumps({"type": "progress", **asdict(snapshot)}) + "\n"
    result = await bulk.result()
    yield json.dumps({"type": "result", **asdict(result)}) + "\n"


@router.post(EVENT_INVITATIONS_SEND_URL)
async def send_event_invitations(
    event_id: UUID,
    unsent_only: bool = False,
    owner_id: UUID | None = Depends(get_current_owner_id),
    caller_tz: tzinfo | None = Depends(get_caller_timezone),
    event_store: EventStore = Depends(get_event_store),
    invitation_store: InvitationStore = Depends(get_invitation_store),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
) -> StreamingResponse:
    """
    Email every invitation of an event, one after another.

    Streams newline-delimited JSON: one ``progress`` line per invitation and a
    final ``result`` line with the success and failure totals.
    """
    invitations = unwrap(await invitation_store.list_for_event(event_id, owner_id))
    event = unwrap(await event_store.get_by_id(event_id))
    if unsent_only:
        invitations = [invitation for invitation in invitations if invitation.sent_at is None]

    bulk = dispatcher.dispatch_bulk(invitations, event, tz=caller_tz).start()
    return StreamingResponse(_progress_lines(bulk), media_type="application/x-ndjson")


@router.post(INVITATION_SEND_URL, response_model=SendInvitationResponse)
async def send_invitation(
    invitation_id: UUID,
    confirmation: bool = False,
    owner_id: UUID | None = Depends(get_current_owner_id),
    caller_tz: tzinfo | None = Depends(get_caller_timezone),
    invitation_store: InvitationStore = Depends(get_invitation_store),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
) -> SendInvitationResponse:
    found = unwrap(await invitation_store.get_for_owner(invitation_id, owner_id))
    message_id = unwrap(
        await dispatcher.dispatch_one(
            found.invitation, found.event, is_confirmation=confirmation, tz=caller_tz
        )
    )
    return SendInvitationResponse(success=True, id=message_id)


@router.get(EMAIL_STATUS_URL, response_model=EmailStatusResponse)
async def email_status(
    delivery_client: DeliveryClient = Depends(get_delivery_client),
) -> EmailStatusResponse:
    """Whether the email function answers its reachability probe."""
    return EmailStatusResponse(configured=await delivery_client.is_reachable())
