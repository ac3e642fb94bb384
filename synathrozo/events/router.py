from datetime import datetime
from uuid import UUID

from fastapi import APIRouter, Depends, Response
from pydantic import AwareDatetime, BaseModel, Field, HttpUrl

from synathrozo.auth import get_current_owner_id
from synathrozo.dependencies import get_event_store, unwrap
from synathrozo.events.dtos import TEMPLATES, EventDTO, EventWriteDTO, RegistryLinkDTO, TemplateId
from synathrozo.events.store import EventStore
from synathrozo.urls import EVENT_URL, EVENTS_URL, TEMPLATES_URL

router = APIRouter()


class RegistryLinkSchema(BaseModel):
    name: str = Field(min_length=1)
    url: HttpUrl


class EventRequest(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    event_date: AwareDatetime
    description: str | None = None
    location: str | None = None
    template: TemplateId | None = None
    custom_image_url: HttpUrl | None = None
    registry_links: list[RegistryLinkSchema] | None = None

    def to_dto(self) -> EventWriteDTO:
        return EventWriteDTO(
            title=self.title,
            event_date=self.event_date,
            description=self.description,
            location=self.location,
            template=self.template.value if self.template else None,
            custom_image_url=str(self.custom_image_url) if self.custom_image_url else None,
            registry_links=[
                RegistryLinkDTO(name=link.name, url=str(link.url)) for link in self.registry_links
            ]
            if self.registry_links is not None
            else None,
        )


class RegistryLinkResponse(BaseModel):
    name: str
    url: str


class EventResponse(BaseModel):
    id: UUID
    title: str
    event_date: datetime
    template: str
    description: str | None = None
    location: str | None = None
    custom_image_url: str | None = None
    registry_links: list[RegistryLinkResponse] = []

    @classmethod
    def from_dto(cls, event: EventDTO) -> "EventResponse":
        return cls(
            id=event.id,
            title=event.title,
            event_date=event.event_date,
            template=event.template,
            description=event.description,
            location=event.location,
            custom_image_url=event.custom_image_url,
            registry_links=[
                RegistryLinkResponse(name=link.name, url=link.url) for link in event.registry_links
            ],
        )


class TemplateResponse(BaseModel):
    id: str
    name: str
    description: str
    preview: str
    colors: list[str]


@router.get(TEMPLATES_URL, response_model=list[TemplateResponse])
async def list_templates() -> list[TemplateResponse]:
    """Invitation style presets a host can pick from."""
    return [
        TemplateResponse(
            id=preset.id,
            name=preset.name,
            description=preset.description,
            preview=preset.preview,
            colors=list(preset.colors),
        )
        for preset in TEMPLATES.values()
    ]


@router.post(EVENTS_URL, response_model=EventResponse, status_code=201)
async def create_event(
    request: EventRequest,
    owner_id: UUID | None = Depends(get_current_owner_id),
    store: EventStore = Depends(get_event_store),
) -> EventResponse:
    event = unwrap(await store.create(request.to_dto(), owner_id))
    return EventResponse.from_dto(event)


@router.get(EVENTS_URL, response_model=list[EventResponse])
async def list_events(
    owner_id: UUID | None = Depends(get_current_owner_id),
    store: EventStore = Depends(get_event_store),
) -> list[EventResponse]:
    events = unwrap(await store.list_for_owner(owner_id))
    return [EventResponse.from_dto(event) for event in events]


@router.get(EVENT_URL, response_model=EventResponse)
async def get_event(
    event_id: UUID,
    store: EventStore = Depends(get_event_store),
) -> EventResponse:
    return EventResponse.from_dto(unwrap(await store.get_by_id(event_id)))


@router.put(EVENT_URL, response_model=EventResponse)
async def update_event(
    event_id: UUID,
    request: EventRequest,
    owner_id: UUID | None = Depends(get_current_owner_id),
    store: EventStore = Depends(get_event_store),
) -> EventResponse:
    event = unwrap(await store.update(event_id, request.to_dto(), owner_id))
    return EventResponse.from_dto(event)


@router.delete(EVENT_URL, status_code=204)
async def delete_event(
    event_id: UUID,
    owner_id: UUID | None = Depends(get_current_owner_id),
    store: EventStore = Depends(get_event_store),
) -> Response:
    """Delete an event and all of its invitations."""
    unwrap(await store.delete(event_id, owner_id))
    return Response(status_code=204)
