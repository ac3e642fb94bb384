import re
from typing import Protocol
from urllib.parse import urlencode

from synathrozo.invitations.dtos import InvitationStatus


class RSVPLinkConfig(Protocol):
    frontend_url: str
    rsvp_page_path: str


def build_rsvp_link(config: RSVPLinkConfig, token: str) -> str:
    """Public response page URL carrying the token as its only query parameter."""
    base_url = config.frontend_url.rstrip("/")
    page = config.rsvp_page_path.lstrip("/")
    return f"{base_url}/{page}?{urlencode({'token': token})}"


STATUS_LABELS = {
    InvitationStatus.PENDING: "Pending",
    InvitationStatus.OPENED: "Opened",
    InvitationStatus.ACCEPTED: "Attending",
    InvitationStatus.DECLINED: "Declined",
}


def status_label(status: InvitationStatus | str) -> str:
    try:
        return STATUS_LABELS[InvitationStatus(status)]
    except ValueError:
        return str(status)


def format_phone(phone: str | None) -> str:
    """Format ten-digit US numbers as (555) 123-4567; anything else is returned as given."""
    if not phone:
        return "-"
    digits = re.sub(r"\D", "", phone)
    if len(digits) == 10:
        return f"({digits[:3]}) {digits[3:6]}-{digits[6:]}"
    return phone
