from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING
from uuid import UUID

from synathrozo.events.dtos import EventDTO

if TYPE_CHECKING:
    from synathrozo.repository.orm_models import Invitation


class InvitationStatus(str, Enum):
    PENDING = "pending"
    OPENED = "opened"
    ACCEPTED = "accepted"
    DECLINED = "declined"


@dataclass(frozen=True)
class InvitationDTO:
    """DTO for invitation data."""

    id: UUID
    event_id: UUID
    token: str
    status: InvitationStatus
    email: str | None = None
    name: str | None = None
    phone: str | None = None
    guest_count: int | None = None
    message: str | None = None
    created_at: datetime | None = None
    sent_at: datetime | None = None
    opened_at: datetime | None = None
    responded_at: datetime | None = None

    @classmethod
    def from_invitation(cls, invitation: "Invitation") -> "InvitationDTO":
        return cls(
            id=invitation.uuid,
            event_id=invitation.event_id,
            token=invitation.token,
            status=InvitationStatus(invitation.status),
            email=invitation.email,
            name=invitation.name,
            phone=invitation.phone,
            guest_count=invitation.guest_count,
            message=invitation.message,
            created_at=invitation.created_at,
            sent_at=invitation.sent_at,
            opened_at=invitation.opened_at,
            responded_at=invitation.responded_at,
        )


@dataclass(frozen=True)
class InvitationWithEventDTO:
    """Invitation resolved by token, joined with the event it belongs to."""

    invitation: InvitationDTO
    event: EventDTO


@dataclass(frozen=True)
class RSVPSubmissionDTO:
    """A guest's answer to an invitation."""

    attending: bool
    name: str | None = None
    phone: str | None = None
    email: str | None = None
    guest_count: int | None = None
    message: str | None = None


@dataclass(frozen=True)
class InvitationStatsDTO:
    total: int = 0
    pending: int = 0
    opened: int = 0
    accepted: int = 0
    declined: int = 0
    total_guests: int = 0
