"""Invitation store - maps lifecycle operations onto the relational store.

Every public operation returns a ``Result``. Host operations are scoped to the
owner of the parent event; guest operations only need the invitation token.
"""

import logging
from abc import ABC, abstractmethod
from datetime import UTC, datetime
from uuid import UUID

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import joinedload

from synathrozo.auth import require_owner
from synathrozo.config.database import async_session_manager
from synathrozo.events.dtos import EventDTO
from synathrozo.invitations import state_machine
from synathrozo.invitations.dtos import (
    InvitationDTO,
    InvitationStatus,
    InvitationWithEventDTO,
    RSVPSubmissionDTO,
)
from synathrozo.repository.orm_models import Event, Invitation
from synathrozo.results import NotFoundError, Result, ValidationError, returns_result
from synathrozo.validation import is_valid_email, normalize_emails

logger = logging.getLogger(__name__)


class InvitationStore(ABC):
    @abstractmethod
    async def create_batch(
        self, event_id: UUID, emails: list[str], owner_id: UUID | None
    ) -> Result[list[InvitationDTO]]:
        """Create one pending invitation per email address."""
        raise NotImplementedError

    @abstractmethod
    async def create_single(
        self,
        event_id: UUID,
        email: str | None,
        owner_id: UUID | None,
        name: str | None = None,
    ) -> Result[InvitationDTO]:
        """Create a pending invitation, optionally without an email (link only)."""
        raise NotImplementedError

    @abstractmethod
    async def list_for_event(
        self, event_id: UUID, owner_id: UUID | None
    ) -> Result[list[InvitationDTO]]:
        """Invitations of an owned event, newest first."""
        raise NotImplementedError

    @abstractmethod
    async def get_for_owner(
        self, invitation_id: UUID, owner_id: UUID | None
    ) -> Result[InvitationWithEventDTO]:
        raise NotImplementedError

    @abstractmethod
    async def get_by_token(self, token: str) -> Result[InvitationWithEventDTO]:
        """Public lookup by token, joined with the event fields needed to render it."""
        raise NotImplementedError

    @abstractmethod
    async def mark_opened(self, token: str) -> Result[InvitationDTO]:
        """Apply pending -> opened; any other state is returned unchanged."""
        raise NotImplementedError

    @abstractmethod
    async def respond(self, token: str, submission: RSVPSubmissionDTO) -> Result[InvitationDTO]:
        """Record a guest's answer. A later answer overwrites an earlier one."""
        raise NotImplementedError

    @abstractmethod
    async def mark_sent(self, invitation_id: UUID) -> Result[InvitationDTO]:
        raise NotImplementedError

    @abstractmethod
    async def delete(self, invitation_id: UUID, owner_id: UUID | None) -> Result[None]:
        raise NotImplementedError

    @abstractmethod
    async def list_statuses(
        self, event_id: UUID, owner_id: UUID | None
    ) -> Result[list[tuple[InvitationStatus, int | None]]]:
        """(status, guest_count) pairs for every invitation of an owned event."""
        raise NotImplementedError


class SqlInvitationStore(InvitationStore):
    """SQL implementation of the invitation store."""

    def __init__(self, session_maker: async_sessionmaker[AsyncSession]) -> None:
        self._session_maker = session_maker

    def _session(self):
        return async_session_manager(self._session_maker)

    async def _get_owned_event(self, session: AsyncSession, event_id: UUID, owner_id: UUID) -> Event:
        result = await session.execute(
            select(Event).where(Event.uuid == event_id).where(Event.user_id == owner_id)
        )
        event = result.scalar_one_or_none()
        if event is None:
            raise NotFoundError("Event not found")
        return event

    async def _get_by_token(self, session: AsyncSession, token: str) -> Invitation | None:
        result = await session.execute(
            select(Invitation).options(joinedload(Invitation.event)).where(Invitation.token == token)
        )
        return result.scalar_one_or_none()

    @returns_result("Create invitations")
    async def create_batch(
        self, event_id: UUID, emails: list[str], owner_id: UUID | None
    ) -> list[InvitationDTO]:
        owner = require_owner(owner_id)
        normalized = normalize_emails(emails)

        async with self._session() as session:
            await self._get_owned_event(session, event_id, owner)
            invitations = [
                Invitation(event_id=event_id, email=email, status=InvitationStatus.PENDING)
                for email in normalized
            ]
            session.add_all(invitations)
            await session.flush()
            return [InvitationDTO.from_invitation(invitation) for invitation in invitations]

    @returns_result("Create invitation")
    async def create_single(
        self,
        event_id: UUID,
        email: str | None,
        owner_id: UUID | None,
        name: str | None = None,
    ) -> InvitationDTO:
        owner = require_owner(owner_id)
        normalized = state_machine.normalize_email(email) if email and email.strip() else None
        if normalized and not is_valid_email(normalized):
            raise ValidationError(f"Invalid email address: {normalized}")

        async with self._session() as session:
            await self._get_owned_event(session, event_id, owner)
            invitation = Invitation(
                event_id=event_id,
                email=normalized,
                name=name or None,
                status=InvitationStatus.PENDING,
            )
            session.add(invitation)
            await session.flush()
            return InvitationDTO.from_invitation(invitation)

    @returns_result("Get invitations")
    async def list_for_event(self, event_id: UUID, owner_id: UUID | None) -> list[InvitationDTO]:
        owner = require_owner(owner_id)
        async with self._session() as session:
            await self._get_owned_event(session, event_id, owner)
            result = await session.execute(
                select(Invitation)
                .where(Invitation.event_id == event_id)
                .order_by(Invitation.created_at.desc())
            )
            return [InvitationDTO.from_invitation(row) for row in result.scalars().all()]

    @returns_result("Get invitation")
    async def get_for_owner(
        self, invitation_id: UUID, owner_id: UUID | None
    ) -> InvitationWithEventDTO:
        owner = require_owner(owner_id)
        async with self._session() as session:
            result = await session.execute(
                select(Invitation)
                .join(Event, Invitation.event_id == Event.uuid)
                .options(joinedload(Invitation.event))
                .where(Invitation.uuid == invitation_id)
                .where(Event.user_id == owner)
            )
            invitation = result.scalar_one_or_none()
            if invitation is None:
                raise NotFoundError("Invitation not found")
            return InvitationWithEventDTO(
                invitation=InvitationDTO.from_invitation(invitation),
                event=EventDTO.from_event(invitation.event),
            )

    @returns_result("Get invitation by token")
    async def get_by_token(self, token: str) -> InvitationWithEventDTO:
        async with self._session() as session:
            invitation = await self._get_by_token(session, token)
            if invitation is None:
                raise NotFoundError("Invitation not found")
            return InvitationWithEventDTO(
                invitation=InvitationDTO.from_invitation(invitation),
                event=EventDTO.from_event(invitation.event),
            )

    @returns_result("Mark opened")
    async def mark_opened(self, token: str) -> InvitationDTO:
        async with self._session() as session:
            # Conditional update: only a still-pending row changes, so a
            # repeated tracking signal cannot move the timestamp or status.
            result = await session.execute(
                update(Invitation)
                .where(Invitation.token == token)
                .where(Invitation.status == state_machine.OPEN_GUARD)
                .values(**state_machine.opened_values())
                .execution_options(synchronize_session=False)
            )
            invitation = await self._get_by_token(session, token)
            if invitation is None:
                raise NotFoundError("Invitation not found")
            if not result.rowcount:
                logger.debug("Invitation %s already %s", invitation.uuid, invitation.status.value)
            return InvitationDTO.from_invitation(invitation)

    @returns_result("RSVP respond")
    async def respond(self, token: str, submission: RSVPSubmissionDTO) -> InvitationDTO:
        if submission.guest_count is not None and submission.guest_count < 0:
            raise ValidationError("Guest count cannot be negative")
        if submission.email and not is_valid_email(submission.email.strip()):
            raise ValidationError(f"Invalid email address: {submission.email}")

        async with self._session() as session:
            invitation = await self._get_by_token(session, token)
            if invitation is None:
                raise NotFoundError("Invitation not found")
            if state_machine.is_resubmission(InvitationStatus(invitation.status)):
                logger.info("Overwriting earlier answer for invitation %s", invitation.uuid)

            for key, value in state_machine.response_values(submission).items():
                setattr(invitation, key, value)
            await session.flush()
            return InvitationDTO.from_invitation(invitation)

    @returns_result("Mark sent")
    async def mark_sent(self, invitation_id: UUID) -> InvitationDTO:
        async with self._session() as session:
            invitation = await session.get(Invitation, invitation_id)
            if invitation is None:
                raise NotFoundError("Invitation not found")
            invitation.sent_at = datetime.now(UTC)
            await session.flush()
            return InvitationDTO.from_invitation(invitation)

    @returns_result("Delete invitation")
    async def delete(self, invitation_id: UUID, owner_id: UUID | None) -> None:
        owner = require_owner(owner_id)
        async with self._session() as session:
            result = await session.execute(
                delete(Invitation)
                .where(Invitation.uuid == invitation_id)
                .where(Invitation.event_id.in_(select(Event.uuid).where(Event.user_id == owner)))
                .execution_options(synchronize_session=False)
            )
            if not result.rowcount:
                raise NotFoundError("Invitation not found")

    @returns_result("Get stats")
    async def list_statuses(
        self, event_id: UUID, owner_id: UUID | None
    ) -> list[tuple[InvitationStatus, int | None]]:
        owner = require_owner(owner_id)
        async with self._session() as session:
            await self._get_owned_event(session, event_id, owner)
            result = await session.execute(
                select(Invitation.status, Invitation.guest_count).where(
                    Invitation.event_id == event_id
                )
            )
            return [(InvitationStatus(status), guest_count) for status, guest_count in result.all()]
