from datetime import UTC, datetime

import pytest

from synathrozo.invitations import state_machine
from synathrozo.invitations.dtos import InvitationStatus, RSVPSubmissionDTO

NOW = datetime(2026, 5, 1, 12, 0, tzinfo=UTC)


@pytest.mark.parametrize(
    "status,expected",
    [
        (InvitationStatus.PENDING, True),
        (InvitationStatus.OPENED, False),
        (InvitationStatus.ACCEPTED, False),
        (InvitationStatus.DECLINED, False),
    ],
)
def test_only_pending_can_be_marked_opened(status, expected):
    assert (status == state_machine.OPEN_GUARD) is expected
    assert (InvitationStatus.OPENED in state_machine.TRANSITIONS[status]) is expected


def test_answered_states_are_terminal():
    assert state_machine.TERMINAL_STATES == {InvitationStatus.ACCEPTED, InvitationStatus.DECLINED}
    assert state_machine.is_resubmission(InvitationStatus.ACCEPTED)
    assert not state_machine.is_resubmission(InvitationStatus.OPENED)


def test_pending_can_skip_opened():
    assert InvitationStatus.ACCEPTED in state_machine.TRANSITIONS[InvitationStatus.PENDING]
    assert InvitationStatus.PENDING not in state_machine.TRANSITIONS[InvitationStatus.OPENED]


def test_opened_values():
    assert state_machine.opened_values(NOW) == {
        "status": InvitationStatus.OPENED,
        "opened_at": NOW,
    }


def test_accept_without_guest_count_defaults_to_one():
    values = state_machine.response_values(RSVPSubmissionDTO(attending=True, name="Ana"), NOW)

    assert values["status"] == InvitationStatus.ACCEPTED
    assert values["guest_count"] == 1
    assert values["responded_at"] == NOW
    assert "email" not in values


def test_accept_keeps_given_guest_count():
    values = state_machine.response_values(RSVPSubmissionDTO(attending=True, guest_count=3), NOW)

    assert values["guest_count"] == 3


def test_decline_forces_zero_guests():
    values = state_machine.response_values(
        RSVPSubmissionDTO(attending=False, guest_count=4, message=""), NOW
    )

    assert values["status"] == InvitationStatus.DECLINED
    assert values["guest_count"] == 0
    assert values["message"] is None


def test_supplied_email_is_normalized():
    values = state_machine.response_values(
        RSVPSubmissionDTO(attending=True, email="  Guest@Example.COM "), NOW
    )

    assert values["email"] == "guest@example.com"


def test_response_never_writes_token():
    values = state_machine.response_values(RSVPSubmissionDTO(attending=True), NOW)

    assert "token" not in values
