from dataclasses import dataclass, field
from datetime import UTC, datetime, tzinfo
from enum import Enum
from typing import TYPE_CHECKING
from uuid import UUID
from zoneinfo import ZoneInfo

if TYPE_CHECKING:
    from synathrozo.repository.orm_models import Event


class TemplateId(str, Enum):
    SHABBY_CHIC = "shabby-chic"
    MODERN_DARK = "modern-dark"
    GARDEN_PARTY = "garden-party"
    CLASSIC_FORMAL = "classic-formal"


DEFAULT_TEMPLATE_ID = TemplateId.SHABBY_CHIC.value


@dataclass(frozen=True)
class TemplatePreset:
    id: str
    name: str
    description: str
    preview: str
    colors: tuple[str, ...]


TEMPLATES: dict[str, TemplatePreset] = {
    TemplateId.SHABBY_CHIC.value: TemplatePreset(
        id=TemplateId.SHABBY_CHIC.value,
        name="Shabby Chic",
        description="Vintage floral design with pink stripes and elegant script fonts",
        preview="Soft pinks, florals, oval frames",
        colors=("#b87878", "#f8e8e8", "#fef9f6"),
    ),
    TemplateId.MODERN_DARK.value: TemplatePreset(
        id=TemplateId.MODERN_DARK.value,
        name="Modern Elegance",
        description="Sleek dark theme with gold accents and contemporary styling",
        preview="Dark background, gold details",
        colors=("#1a1a2e", "#d4af37", "#16213e"),
    ),
    TemplateId.GARDEN_PARTY.value: TemplatePreset(
        id=TemplateId.GARDEN_PARTY.value,
        name="Garden Party",
        description="Fresh green botanical design with nature-inspired elements",
        preview="Greens, botanicals, natural",
        colors=("#4a7c59", "#e8f5e9", "#2d5a3d"),
    ),
    TemplateId.CLASSIC_FORMAL.value: TemplatePreset(
        id=TemplateId.CLASSIC_FORMAL.value,
        name="Classic Formal",
        description="Timeless black and white design with traditional elegance",
        preview="Black, white, serif fonts",
        colors=("#2c2c2c", "#ffffff", "#666666"),
    ),
}


def get_template(template_id: str | None) -> TemplatePreset:
    """Look up a preset, falling back to shabby-chic for unknown ids."""
    return TEMPLATES.get(template_id or DEFAULT_TEMPLATE_ID, TEMPLATES[DEFAULT_TEMPLATE_ID])


def resolve_timezone(name: str | None) -> tzinfo:
    if not name or name.upper() in ("UTC", "ETC/UTC", "Z"):
        return UTC
    return ZoneInfo(name)


def format_event_date(value: datetime, tz: tzinfo = UTC) -> str:
    """Render a date the way guests read it, e.g. ``Saturday, June 6, 2026 at 06:00 PM``.

    Naive datetimes are treated as UTC.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    local = value.astimezone(tz)
    return f"{local:%A, %B} {local.day}, {local:%Y at %I:%M %p}"


@dataclass(frozen=True)
class RegistryLinkDTO:
    name: str
    url: str


@dataclass(frozen=True)
class EventDTO:
    """DTO for event data."""

    id: UUID
    user_id: UUID
    title: str
    event_date: datetime
    template: str = DEFAULT_TEMPLATE_ID
    description: str | None = None
    location: str | None = None
    custom_image_url: str | None = None
    registry_links: list[RegistryLinkDTO] = field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_event(cls, event: "Event") -> "EventDTO":
        return cls(
            id=event.uuid,
            user_id=event.user_id,
            title=event.title,
            event_date=event.event_date,
            template=get_template(event.template).id,
            description=event.description,
            location=event.location,
            custom_image_url=event.custom_image_url,
            registry_links=[RegistryLinkDTO(**link) for link in event.registry_links or []],
            created_at=event.created_at,
            updated_at=event.updated_at,
        )


@dataclass(frozen=True)
class EventWriteDTO:
    """Fields a host supplies when creating or updating an event."""

    title: str
    event_date: datetime
    description: str | None = None
    location: str | None = None
    template: str | None = None
    custom_image_url: str | None = None
    registry_links: list[RegistryLinkDTO] | None = None
