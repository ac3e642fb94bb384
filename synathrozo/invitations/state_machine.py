"""Lifecycle of an invitation from creation to the guest's answer.

    pending --open--> opened
    pending | opened --respond--> accepted | declined

``opened`` may be skipped when a guest answers without a tracked visit. A
repeated answer overwrites the previous one (last write wins). The token is
never part of the values a transition writes.
"""

from datetime import UTC, datetime
from typing import Any

from synathrozo.invitations.dtos import InvitationStatus, RSVPSubmissionDTO

# Only a pending invitation may be marked opened; the store applies this as a
# condition on the update so a repeated tracking signal changes nothing.
OPEN_GUARD = InvitationStatus.PENDING

TRANSITIONS: dict[InvitationStatus, frozenset[InvitationStatus]] = {
    InvitationStatus.PENDING: frozenset(
        {InvitationStatus.OPENED, InvitationStatus.ACCEPTED, InvitationStatus.DECLINED}
    ),
    InvitationStatus.OPENED: frozenset({InvitationStatus.ACCEPTED, InvitationStatus.DECLINED}),
    InvitationStatus.ACCEPTED: frozenset(),
    InvitationStatus.DECLINED: frozenset(),
}

TERMINAL_STATES = frozenset(
    status for status, targets in TRANSITIONS.items() if not targets
)


def is_resubmission(current: InvitationStatus) -> bool:
    """True when an answer would overwrite an earlier accept or decline."""
    return current in TERMINAL_STATES


def response_status(attending: bool) -> InvitationStatus:
    return InvitationStatus.ACCEPTED if attending else InvitationStatus.DECLINED


def response_guest_count(submission: RSVPSubmissionDTO) -> int:
    if not submission.attending:
        return 0
    return submission.guest_count or 1


def opened_values(now: datetime | None = None) -> dict[str, Any]:
    return {
        "status": InvitationStatus.OPENED,
        "opened_at": now or datetime.now(UTC),
    }


def response_values(submission: RSVPSubmissionDTO, now: datetime | None = None) -> dict[str, Any]:
    """Column values written when a guest answers.

    The email is only overwritten when the guest supplied one.
    """
    values: dict[str, Any] = {
        "name": submission.name,
        "phone": submission.phone,
        "status": response_status(submission.attending),
        "guest_count": response_guest_count(submission),
        "message": submission.message or None,
        "responded_at": now or datetime.now(UTC),
    }
    if submission.email:
        values["email"] = normalize_email(submission.email)
    return values


def normalize_email(email: str) -> str:
    return email.strip().lower()
