from dataclasses import dataclass, field

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class RegistryLink(BaseModel):
    name: str
    url: str


class NotificationPayload(BaseModel):
    """Body posted to the email function (camelCase on the wire).

    Fields are optional here so the email function can report missing ones
    itself instead of failing model validation.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    to: str | None = None
    guest_name: str | None = None
    host_name: str | None = None
    event_title: str | None = None
    event_date: str | None = None
    formatted_event_date: str | None = None
    event_location: str | None = None
    event_description: str | None = None
    rsvp_link: str | None = None
    template_id: str | None = None
    custom_image_url: str | None = None
    is_confirmation: bool = False
    registry_links: list[RegistryLink] | None = None


class DeliveryResponse(BaseModel):
    success: bool
    id: str | None = None
    error: str | None = None


@dataclass(frozen=True)
class ProgressSnapshot:
    current: int
    total: int
    success: int
    failed: int


@dataclass(frozen=True)
class DispatchFailure:
    email: str
    error: str


@dataclass
class BulkDispatchResult:
    success: int = 0
    failed: int = 0
    errors: list[DispatchFailure] = field(default_factory=list)
