from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import JSON, DateTime, Enum, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from synathrozo.config.table_names import TableNames
from synathrozo.events.dtos import DEFAULT_TEMPLATE_ID
from synathrozo.invitations.dtos import InvitationStatus
from synathrozo.models.base import Base, TimeStamp


def generate_token() -> str:
    return str(uuid4())


class Event(TimeStamp, Base):
    __tablename__ = TableNames.EVENTS.value

    # Owner identity as issued by the auth provider; there is no local users table
    user_id: Mapped[UUID] = mapped_column(nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    event_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    location: Mapped[str | None] = mapped_column(String(500), nullable=True)
    template: Mapped[str] = mapped_column(String(50), default=DEFAULT_TEMPLATE_ID, nullable=False)
    custom_image_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    registry_links: Mapped[list[dict] | None] = mapped_column(JSON, nullable=True)

    invitations: Mapped[list["Invitation"]] = relationship(
        "Invitation",
        back_populates="event",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<Event {self.title} on {self.event_date}>"


class Invitation(TimeStamp, Base):
    __tablename__ = TableNames.INVITATIONS.value

    event_id: Mapped[UUID] = mapped_column(
        ForeignKey(f"{TableNames.EVENTS.value}.uuid", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    event: Mapped[Event] = relationship("Event", back_populates="invitations")

    email: Mapped[str | None] = mapped_column(String(255), nullable=True, index=True)
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    # Capability token: the only credential a guest needs. Set once on insert.
    token: Mapped[str] = mapped_column(
        String(36), default=generate_token, nullable=False, unique=True, index=True
    )
    status: Mapped[InvitationStatus] = mapped_column(
        Enum(
            InvitationStatus,
            name="invitation_status_enum",
            values_callable=lambda x: [e.value for e in x],
        ),
        default=InvitationStatus.PENDING,
        nullable=False,
    )
    guest_count: Mapped[int | None] = mapped_column(Integer, nullable=True)
    message: Mapped[str | None] = mapped_column(Text, nullable=True)

    sent_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    opened_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    responded_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    def __repr__(self) -> str:
        return f"<Invitation {self.token} - {self.status.value}>"
