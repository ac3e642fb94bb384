"""Guest-facing RSVP endpoints. The token in the URL is the only credential."""

import logging

from fastapi import APIRouter, Depends

from synathrozo.dependencies import get_dispatcher, get_invitation_store, unwrap
from synathrozo.dispatch.dispatcher import NotificationDispatcher
from synathrozo.invitations.dtos import InvitationStatus, RSVPSubmissionDTO
from synathrozo.invitations.schemas import (
    InvitationResponse,
    InvitationWithEventResponse,
    RSVPResponse,
    RSVPSubmit,
)
from synathrozo.invitations.store import InvitationStore
from synathrozo.urls import RSVP_OPENED_URL, RSVP_URL

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(RSVP_URL, response_model=InvitationWithEventResponse)
async def get_rsvp(
    token: str,
    store: InvitationStore = Depends(get_invitation_store),
) -> InvitationWithEventResponse:
    """Invitation and event details for rendering the RSVP page."""
    return InvitationWithEventResponse.from_dto(unwrap(await store.get_by_token(token)))


@router.post(RSVP_OPENED_URL, response_model=InvitationResponse)
async def mark_rsvp_opened(
    token: str,
    store: InvitationStore = Depends(get_invitation_store),
) -> InvitationResponse:
    """Tracking signal for a visited link. Only a pending invitation changes."""
    return InvitationResponse.from_dto(unwrap(await store.mark_opened(token)))


@router.post(RSVP_URL, response_model=RSVPResponse)
async def submit_rsvp(
    token: str,
    rsvp_data: RSVPSubmit,
    store: InvitationStore = Depends(get_invitation_store),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
) -> RSVPResponse:
    """
    Record the guest's answer.
    Accepting guests with an email address get a confirmation with the registry links.
    """
    current = unwrap(await store.get_by_token(token))
    invitation = unwrap(
        await store.respond(
            token,
            RSVPSubmissionDTO(
                attending=rsvp_data.attending,
                name=rsvp_data.name,
                phone=rsvp_data.phone,
                email=rsvp_data.email,
                guest_count=rsvp_data.guest_count,
                message=rsvp_data.message,
            ),
        )
    )

    confirmation_sent = False
    if invitation.status == InvitationStatus.ACCEPTED and invitation.email:
        sent = await dispatcher.dispatch_one(invitation, current.event, is_confirmation=True)
        confirmation_sent = sent.success
        if not sent.success:
            logger.warning(f"Confirmation email for invitation {invitation.id} failed: {sent.error}")

    message = (
        "Thank you for confirming your attendance!"
        if rsvp_data.attending
        else "We're sorry you can't make it. Your response has been recorded."
    )
    return RSVPResponse(
        message=message,
        invitation=InvitationResponse.from_dto(invitation),
        confirmation_sent=confirmation_sent,
    )
