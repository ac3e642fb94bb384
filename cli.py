"""CLI commands for managing event invitations."""

import asyncio
from uuid import UUID

import typer
import uvicorn

from synathrozo.config.database import async_session_maker
from synathrozo.config.settings import settings
from synathrozo.dispatch.client import HttpDeliveryClient
from synathrozo.dispatch.dispatcher import NotificationDispatcher
from synathrozo.events.dtos import resolve_timezone
from synathrozo.events.store import SqlEventStore
from synathrozo.invitations.links import format_phone, status_label
from synathrozo.invitations.stats import StatusAggregator
from synathrozo.invitations.store import SqlInvitationStore

app = typer.Typer(help="CLI commands for event invitations")


def _fail(message: str) -> None:
    typer.secho(message, fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1)


@app.command()
def serve(reload: bool = False):
    """Run the API server."""
    uvicorn.run("synathrozo.main:app", host=settings.app_host, port=settings.app_port, reload=reload)


async def _send_invitations(event_id: UUID, owner_id: UUID, unsent_only: bool, tz: str | None):
    invitation_store = SqlInvitationStore(session_maker=async_session_maker)
    event_store = SqlEventStore(session_maker=async_session_maker)
    dispatcher = NotificationDispatcher(
        delivery_client=HttpDeliveryClient(config=settings),
        invitation_store=invitation_store,
        config=settings,
    )

    invitations = await invitation_store.list_for_event(event_id, owner_id)
    if not invitations.success:
        _fail(invitations.error)
    event = await event_store.get_by_id(event_id)
    if not event.success:
        _fail(event.error)

    to_send = invitations.data
    if unsent_only:
        to_send = [invitation for invitation in to_send if invitation.sent_at is None]

    bulk = dispatcher.dispatch_bulk(to_send, event.data, tz=resolve_timezone(tz) if tz else None)
    async for progress in bulk:
        typer.secho(
            f"[{progress.current}/{progress.total}] sent: {progress.success} failed: {progress.failed}",
            fg=typer.colors.BLUE,
        )
    return await bulk.result()


@app.command()
def send_invitations(
    event_id: UUID,
    owner: UUID = typer.Option(..., help="User id of the event owner"),
    unsent_only: bool = typer.Option(False, help="Skip invitations that were already sent"),
    tz: str = typer.Option(None, help="Time zone used to format the event date"),
):
    """Email every invitation of an event."""
    result = asyncio.run(_send_invitations(event_id, owner, unsent_only, tz))

    typer.secho(f"Sent: {result.success}", fg=typer.colors.GREEN)
    if result.failed:
        typer.secho(f"Failed: {result.failed}", fg=typer.colors.RED)
        for failure in result.errors:
            typer.secho(f"  {failure.email}: {failure.error}", fg=typer.colors.RED)


@app.command()
def list_invitations(
    event_id: UUID,
    owner: UUID = typer.Option(..., help="User id of the event owner"),
):
    """List the invitations of an event with their RSVP status."""
    store = SqlInvitationStore(session_maker=async_session_maker)
    result = asyncio.run(store.list_for_event(event_id, owner))
    if not result.success:
        _fail(result.error)

    for invitation in result.data:
        typer.echo(
            f"{invitation.email or '-':<40} {invitation.name or '-':<25} "
            f"{format_phone(invitation.phone):<16} {status_label(invitation.status):<10} "
            f"{invitation.guest_count if invitation.guest_count is not None else '-'}"
        )
    typer.secho(f"{len(result.data)} invitation(s)", fg=typer.colors.BLUE)


@app.command()
def stats(
    event_id: UUID,
    owner: UUID = typer.Option(..., help="User id of the event owner"),
):
    """Show RSVP totals for an event."""
    aggregator = StatusAggregator(SqlInvitationStore(session_maker=async_session_maker))
    result = asyncio.run(aggregator.summarize(event_id, owner))
    if not result.success:
        _fail(result.error)

    summary = result.data
    typer.secho(f"Total invitations: {summary.total}", fg=typer.colors.BLUE)
    typer.echo(f"Pending:   {summary.pending}")
    typer.echo(f"Opened:    {summary.opened}")
    typer.echo(f"Attending: {summary.accepted}")
    typer.echo(f"Declined:  {summary.declined}")
    typer.secho(f"Confirmed guests: {summary.total_guests}", fg=typer.colors.GREEN)


@app.command()
def check_email():
    """Check that the email function is reachable."""
    reachable = asyncio.run(HttpDeliveryClient(config=settings).is_reachable())
    if reachable:
        typer.secho(f"Email function reachable at {settings.delivery_url}", fg=typer.colors.GREEN)
    else:
        _fail(f"Email function not reachable at {settings.delivery_url}")


if __name__ == "__main__":
    app()
