from dataclasses import asdict
from uuid import UUID

from fastapi import APIRouter, Depends, Response

from synathrozo.auth import get_current_owner_id
from synathrozo.dependencies import get_invitation_store, get_status_aggregator, unwrap
from synathrozo.invitations.schemas import (
    CreateInvitationRequest,
    CreateInvitationsRequest,
    InvitationResponse,
    InvitationStatsResponse,
)
from synathrozo.invitations.stats import StatusAggregator
from synathrozo.invitations.store import InvitationStore
from synathrozo.urls import (
    EVENT_INVITATION_SINGLE_URL,
    EVENT_INVITATION_STATS_URL,
    EVENT_INVITATIONS_URL,
    INVITATION_URL,
)

router = APIRouter()


@router.post(EVENT_INVITATIONS_URL, response_model=list[InvitationResponse], status_code=201)
async def create_invitations(
    event_id: UUID,
    request: CreateInvitationsRequest,
    owner_id: UUID | None = Depends(get_current_owner_id),
    store: InvitationStore = Depends(get_invitation_store),
) -> list[InvitationResponse]:
    """Create one pending invitation per email address."""
    invitations = unwrap(await store.create_batch(event_id, request.emails, owner_id))
    return [InvitationResponse.from_dto(invitation) for invitation in invitations]


@router.post(EVENT_INVITATION_SINGLE_URL, response_model=InvitationResponse, status_code=201)
async def create_invitation(
    event_id: UUID,
    request: CreateInvitationRequest,
    owner_id: UUID | None = Depends(get_current_owner_id),
    store: InvitationStore = Depends(get_invitation_store),
) -> InvitationResponse:
    """Create a single invitation. Without an email the host shares the link themselves."""
    invitation = unwrap(
        await store.create_single(event_id, request.email, owner_id, name=request.name)
    )
    return InvitationResponse.from_dto(invitation)


@router.get(EVENT_INVITATIONS_URL, response_model=list[InvitationResponse])
async def list_invitations(
    event_id: UUID,
    owner_id: UUID | None = Depends(get_current_owner_id),
    store: InvitationStore = Depends(get_invitation_store),
) -> list[InvitationResponse]:
    invitations = unwrap(await store.list_for_event(event_id, owner_id))
    return [InvitationResponse.from_dto(invitation) for invitation in invitations]


@router.get(EVENT_INVITATION_STATS_URL, response_model=InvitationStatsResponse)
async def get_invitation_stats(
    event_id: UUID,
    owner_id: UUID | None = Depends(get_current_owner_id),
    aggregator: StatusAggregator = Depends(get_status_aggregator),
) -> InvitationStatsResponse:
    stats = unwrap(await aggregator.summarize(event_id, owner_id))
    return InvitationStatsResponse(**asdict(stats))


@router.delete(INVITATION_URL, status_code=204)
async def delete_invitation(
    invitation_id: UUID,
    owner_id: UUID | None = Depends(get_current_owner_id),
    store: InvitationStore = Depends(get_invitation_store),
) -> Response:
    unwrap(await store.delete(invitation_id, owner_id))
    return Response(status_code=204)
