from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, field_validator

from synathrozo.events.router import EventResponse
from synathrozo.invitations.dtos import InvitationDTO, InvitationStatus, InvitationWithEventDTO


class CreateInvitationsRequest(BaseModel):
    emails: list[str] = Field(min_length=1)


class CreateInvitationRequest(BaseModel):
    email: str | None = None
    name: str | None = None


class InvitationResponse(BaseModel):
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
    def from_dto(cls, invitation: InvitationDTO) -> "InvitationResponse":
        return cls(
            id=invitation.id,
            event_id=invitation.event_id,
            token=invitation.token,
            status=invitation.status,
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


class InvitationWithEventResponse(BaseModel):
    invitation: InvitationResponse
    event: EventResponse

    @classmethod
    def from_dto(cls, data: InvitationWithEventDTO) -> "InvitationWithEventResponse":
        return cls(
            invitation=InvitationResponse.from_dto(data.invitation),
            event=EventResponse.from_dto(data.event),
        )


class InvitationStatsResponse(BaseModel):
    total: int
    pending: int
    opened: int
    accepted: int
    declined: int
    total_guests: int


class RSVPSubmit(BaseModel):
    attending: bool
    name: str | None = None
    phone: str | None = None
    email: EmailStr | None = None
    guest_count: int | None = Field(default=None, ge=0, le=100)
    message: str | None = Field(default=None, max_length=2000)

    @field_validator("email", mode="before")
    @classmethod
    def blank_email_is_none(cls, value):
        # A blank field keeps the address the host entered
        if isinstance(value, str) and not value.strip():
            return None
        return value


class RSVPResponse(BaseModel):
    message: str
    invitation: InvitationResponse
    confirmation_sent: bool = False
