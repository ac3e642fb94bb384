"""Dependency providers. Override in tests via ``app.dependency_overrides``."""

from fastapi import Depends, HTTPException

from synathrozo.config.database import async_session_maker
from synathrozo.config.settings import settings
from synathrozo.dispatch.client import DeliveryClient, HttpDeliveryClient
from synathrozo.dispatch.dispatcher import NotificationDispatcher
from synathrozo.events.store import EventStore, SqlEventStore
from synathrozo.invitations.stats import StatusAggregator
from synathrozo.invitations.store import InvitationStore, SqlInvitationStore
from synathrozo.results import ErrorKind, Result

ERROR_STATUS_CODES = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.AUTHORIZATION: 401,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.COLLABORATOR: 502,
}


def unwrap(result: Result):
    """Return the data of a successful result or raise the matching HTTPException."""
    if not result.success:
        status_code = ERROR_STATUS_CODES.get(result.kind, 500)
        raise HTTPException(status_code=status_code, detail=result.error)
    return result.data


def get_event_store() -> EventStore:
    return SqlEventStore(session_maker=async_session_maker)


def get_invitation_store() -> InvitationStore:
    return SqlInvitationStore(session_maker=async_session_maker)


def get_delivery_client() -> DeliveryClient:
    return HttpDeliveryClient(config=settings)


def get_dispatcher(
    delivery_client: DeliveryClient = Depends(get_delivery_client),
    invitation_store: InvitationStore = Depends(get_invitation_store),
) -> NotificationDispatcher:
    return NotificationDispatcher(
        delivery_client=delivery_client,
        invitation_store=invitation_store,
        config=settings,
    )


def get_status_aggregator(
    invitation_store: InvitationStore = Depends(get_invitation_store),
) -> StatusAggregator:
    return StatusAggregator(invitation_store)
