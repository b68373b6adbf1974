"""Log posting commands."""

import logging
from datetime import datetime
from pathlib import Path
from typing import Annotated

import dateparser
import typer
from rich.console import Console

from gcweb.cli.utils.auth import with_client
from gcweb.cli.utils.options import AUTH_COOKIE_OPTION
from gcweb.models.enums import LogType, LogTypeTrackable
from gcweb.models.log import CacheLogSubmission, LogImage, LogWorkflowResult, TrackableAction, TrackableLogSubmission
from gcweb.services.geocaching import GeocachingService

console = Console()
logger = logging.getLogger(__name__)


def parse_timestamp(value: str | None) -> datetime:
    if value is None:
        return datetime.now()
    parsed = dateparser.parse(value)
    if parsed is None:
        console.print(f"[red]Invalid date format for --date: {value}[/red]")
        raise typer.Exit(1)
    return parsed


def parse_log_type(value: str, enum_type: type) -> LogType | LogTypeTrackable:
    try:
        return enum_type[value.upper().replace("-", "_")]
    except KeyError:
        valid = ", ".join(m.name.lower() for m in enum_type)
        raise typer.BadParameter(f"Unknown log type {value!r}; choose from: {valid}") from None


def parse_trackable_action(value: str) -> TrackableAction:
    """Parse ``"TB1234:dropped_off"``."""
    code, sep, action = value.partition(":")
    if not sep or not code:
        raise typer.BadParameter(f"Expected 'CODE:action', got {value!r}")
    return TrackableAction(trackable_code=code.strip(), action=parse_log_type(action.strip(), LogTypeTrackable))


def report(result: LogWorkflowResult, what: str) -> None:
    if result.ok:
        console.print(f"[green]✓ Posted {what}:[/green] {result.reference}")
        return

    console.print(f"[red]✗ {what.capitalize()} failed ({result.status.value}, {result.state.value})[/red]")
    if result.message:
        console.print(f"[dim]{result.message}[/dim]")
    if result.reference:
        # the log itself exists even if an attached image failed
        console.print(f"[yellow]Log reference:[/yellow] {result.reference}")
    raise typer.Exit(1)


def post_log(
    geocode: Annotated[str, typer.Argument(help="Geocode of the cache, e.g. GC12345")],
    log_type: Annotated[
        str,
        typer.Option("--type", "-t", help="Log type (e.g. found_it, didnt_find_it, note)"),
    ] = "found_it",
    text: Annotated[str, typer.Option("--text", "-m", help="Log text")] = "",
    date: Annotated[
        str | None,
        typer.Option("--date", help="Log date (e.g. '2024-05-01', 'yesterday'); defaults to now"),
    ] = None,
    favorite: Annotated[bool, typer.Option("--favorite", help="Award a favorite point")] = False,
    trackables: Annotated[
        list[str] | None,
        typer.Option("--trackable", help="Trackable action 'CODE:action', repeatable (e.g. TB123:dropped_off)"),
    ] = None,
    image: Annotated[
        Path | None,
        typer.Option("--image", "-i", exists=True, dir_okay=False, readable=True, help="JPEG image to attach"),
    ] = None,
    image_title: Annotated[str, typer.Option("--image-title", help="Title of the attached image")] = "",
    image_description: Annotated[
        str,
        typer.Option("--image-description", help="Description of the attached image"),
    ] = "",
    auth_cookie: AUTH_COOKIE_OPTION = None,
) -> None:
    """Post a log for a geocache, optionally with trackable actions and an image."""
    submission = CacheLogSubmission(
        geocode=geocode.upper(),
        log_type=parse_log_type(log_type, LogType),
        date=parse_timestamp(date),
        text=text,
        trackables=[parse_trackable_action(t) for t in trackables or []],
        add_to_favorites=favorite,
        images=[LogImage.from_file(image, image_title, image_description)] if image else [],
    )

    with with_client(auth_cookie) as client:
        with console.status(f"[bold blue]Posting log for {submission.geocode}...[/bold blue]", spinner="dots"):
            result = GeocachingService(client).post_log(submission)

    report(result, "log")


def post_trackable_log(
    trackable_code: Annotated[str, typer.Argument(help="Public trackable code, e.g. TB12345")],
    action: Annotated[
        str,
        typer.Option("--action", "-t", help="Trackable log type (e.g. discovered_it, grabbed_it, note)"),
    ] = "discovered_it",
    tracking_code: Annotated[
        str | None,
        typer.Option("--tracking-code", "-c", help="Secret tracking code printed on the item"),
    ] = None,
    text: Annotated[str, typer.Option("--text", "-m", help="Log text")] = "",
    date: Annotated[
        str | None,
        typer.Option("--date", help="Log date (e.g. '2024-05-01', 'yesterday'); defaults to now"),
    ] = None,
    auth_cookie: AUTH_COOKIE_OPTION = None,
) -> None:
    """Post a log for a trackable."""
    submission = TrackableLogSubmission(
        trackable_code=trackable_code.upper(),
        tracking_code=tracking_code,
        action=parse_log_type(action, LogTypeTrackable),
        date=parse_timestamp(date),
        text=text,
    )

    with with_client(auth_cookie) as client:
        result = GeocachingService(client).post_trackable_log(submission)

    report(result, "trackable log")
