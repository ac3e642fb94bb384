from collections.abc import Iterable
from uuid import UUID

from synathrozo.invitations.dtos import InvitationStatsDTO, InvitationStatus
from synathrozo.invitations.store import InvitationStore
from synathrozo.results import Result


def tally(rows: Iterable[tuple[InvitationStatus, int | None]]) -> InvitationStatsDTO:
    """Count invitations per status and the confirmed headcount.

    Only accepted invitations contribute to ``total_guests``; a missing or zero
    guest count counts as one guest.
    """
    counts = {status: 0 for status in InvitationStatus}
    total_guests = 0
    for status, guest_count in rows:
        counts[status] += 1
        if status == InvitationStatus.ACCEPTED:
            total_guests += guest_count or 1
    return InvitationStatsDTO(
        total=sum(counts.values()),
        pending=counts[InvitationStatus.PENDING],
        opened=counts[InvitationStatus.OPENED],
        accepted=counts[InvitationStatus.ACCEPTED],
        declined=counts[InvitationStatus.DECLINED],
        total_guests=total_guests,
    )


class StatusAggregator:
    """Read-only summary of an event's invitations."""

    def __init__(self, invitation_store: InvitationStore) -> None:
        self._store = invitation_store

    async def summarize(self, event_id: UUID, owner_id: UUID | None) -> Result[InvitationStatsDTO]:
        rows = await self._store.list_statuses(event_id, owner_id)
        if not rows.success:
            return Result.fail(rows.error, rows.kind)
        return Result.ok(tally(rows.data))
