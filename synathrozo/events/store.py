import logging
from abc import ABC, abstractmethod
from dataclasses import asdict
from datetime import UTC
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from synathrozo.auth import require_owner
from synathrozo.config.database import async_session_manager
from synathrozo.events.dtos import DEFAULT_TEMPLATE_ID, EventDTO, EventWriteDTO
from synathrozo.models.base import utc_now
from synathrozo.repository.orm_models import Event, Invitation
from synathrozo.results import NotFoundError, Result, ValidationError, returns_result

logger = logging.getLogger(__name__)


def _validate(data: EventWriteDTO) -> None:
    if not data.title or not data.title.strip():
        raise ValidationError("Event title is required")
    if data.event_date.tzinfo is None:
        raise ValidationError("Event date must include a time zone")


class EventStore(ABC):
    @abstractmethod
    async def create(self, data: EventWriteDTO, owner_id: UUID | None) -> Result[EventDTO]:
        raise NotImplementedError

    @abstractmethod
    async def list_for_owner(self, owner_id: UUID | None) -> Result[list[EventDTO]]:
        """Events of the owner, soonest first."""
        raise NotImplementedError

    @abstractmethod
    async def get_by_id(self, event_id: UUID) -> Result[EventDTO]:
        raise NotImplementedError

    @abstractmethod
    async def update(
        self, event_id: UUID, data: EventWriteDTO, owner_id: UUID | None
    ) -> Result[EventDTO]:
        raise NotImplementedError

    @abstractmethod
    async def delete(self, event_id: UUID, owner_id: UUID | None) -> Result[None]:
        """Delete an owned event together with its invitations."""
        raise NotImplementedError


class SqlEventStore(EventStore):
    """SQL implementation of the event store."""

    def __init__(self, session_maker: async_sessionmaker[AsyncSession]) -> None:
        self._session_maker = session_maker

    def _session(self):
        return async_session_manager(self._session_maker)

    async def _get_owned(self, session: AsyncSession, event_id: UUID, owner_id: UUID) -> Event:
        result = await session.execute(
            select(Event).where(Event.uuid == event_id).where(Event.user_id == owner_id)
        )
        event = result.scalar_one_or_none()
        if event is None:
            raise NotFoundError("Event not found")
        return event

    @returns_result("Create event")
    async def create(self, data: EventWriteDTO, owner_id: UUID | None) -> EventDTO:
        owner = require_owner(owner_id)
        _validate(data)

        event = Event(
            user_id=owner,
            title=data.title.strip(),
            description=data.description,
            event_date=data.event_date.astimezone(UTC),
            location=data.location,
            template=data.template or DEFAULT_TEMPLATE_ID,
            custom_image_url=data.custom_image_url,
            registry_links=[asdict(link) for link in data.registry_links]
            if data.registry_links
            else None,
        )
        async with self._session() as session:
            session.add(event)
            await session.flush()
            return EventDTO.from_event(event)

    @returns_result("Get events")
    async def list_for_owner(self, owner_id: UUID | None) -> list[EventDTO]:
        owner = require_owner(owner_id)
        async with self._session() as session:
            result = await session.execute(
                select(Event).where(Event.user_id == owner).order_by(Event.event_date.asc())
            )
            return [EventDTO.from_event(event) for event in result.scalars().all()]

    @returns_result("Get event")
    async def get_by_id(self, event_id: UUID) -> EventDTO:
        async with self._session() as session:
            event = await session.get(Event, event_id)
            if event is None:
                raise NotFoundError("Event not found")
            return EventDTO.from_event(event)

    @returns_result("Update event")
    async def update(self, event_id: UUID, data: EventWriteDTO, owner_id: UUID | None) -> EventDTO:
        owner = require_owner(owner_id)
        _validate(data)

        async with self._session() as session:
            event = await self._get_owned(session, event_id, owner)
            event.title = data.title.strip()
            event.description = data.description
            event.event_date = data.event_date.astimezone(UTC)
            event.location = data.location
            event.updated_at = utc_now()
            # Template, image and registry are only replaced when given
            if data.template:
                event.template = data.template
            if data.custom_image_url is not None:
                event.custom_image_url = data.custom_image_url or None
            if data.registry_links is not None:
                event.registry_links = [asdict(link) for link in data.registry_links] or None
            await session.flush()
            return EventDTO.from_event(event)

    @returns_result("Delete event")
    async def delete(self, event_id: UUID, owner_id: UUID | None) -> None:
        owner = require_owner(owner_id)
        async with self._session() as session:
            await self._get_owned(session, event_id, owner)
            await session.execute(
                delete(Invitation)
                .where(Invitation.event_id == event_id)
                .execution_options(synchronize_session=False)
            )
            await session.execute(
                delete(Event)
                .where(Event.uuid == event_id)
                .where(Event.user_id == owner)
                .execution_options(synchronize_session=False)
            )
            logger.info("Deleted event %s", event_id)
