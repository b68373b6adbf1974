"""Account lookup commands: trackable inventory, favorite points and the D/T matrix."""

import logging
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from gcweb.cli.utils.auth import with_client
from gcweb.cli.utils.options import AUTH_COOKIE_OPTION, OUTPUT_FORMAT_OPTION, OUTPUT_PATH_OPTION, OutputFormat
from gcweb.cli.utils.output import handle_csv_output, handle_json_output
from gcweb.models.results import ServiceResult
from gcweb.services.geocaching import GeocachingService

console = Console()
logger = logging.getLogger(__name__)


def _unwrap(result: ServiceResult, what: str):
    if not result.ok:
        console.print(f"[red]Failed to fetch {what}: {result.error}[/red]")
        raise typer.Exit(1)
    return result.value


def trackable_inventory(
    output_format: OUTPUT_FORMAT_OPTION = OutputFormat.TABLE,
    output: OUTPUT_PATH_OPTION = None,
    auth_cookie: AUTH_COOKIE_OPTION = None,
) -> None:
    """List the trackables in your inventory."""
    with with_client(auth_cookie) as client:
        entries = _unwrap(
            GeocachingService(client).fetch_trackable_inventory(show_progress=output_format == OutputFormat.TABLE),
            "trackable inventory",
        )

    if output_format == OutputFormat.JSON:
        handle_json_output(entries, output)
        return
    if output_format == OutputFormat.CSV:
        handle_csv_output(entries, output)
        return

    if not entries:
        console.print("[yellow]No trackables in inventory[/yellow]")
        return

    table = Table(title="Trackable Inventory")
    table.add_column("Code", style="cyan", no_wrap=True)
    table.add_column("Name")
    table.add_column("Tracking Number", style="dim")
    for entry in entries:
        table.add_row(entry.reference_code, entry.name or "", entry.tracking_number or "")
    console.print(table)
    console.print(f"\n[bold]Total trackables:[/bold] {len(entries)}")


def favorite_points(
    profile_code: Annotated[str, typer.Argument(help="Public profile code of the user, e.g. PR1234")],
    auth_cookie: AUTH_COOKIE_OPTION = None,
) -> None:
    """Show how many favorite points a user can still award."""
    with with_client(auth_cookie) as client:
        points = _unwrap(GeocachingService(client).fetch_favorite_point_budget(profile_code), "favorite points")

    console.print(f"[bold]Available favorite points:[/bold] {points}")


def dt_matrix(
    output_format: OUTPUT_FORMAT_OPTION = OutputFormat.TABLE,
    output: OUTPUT_PATH_OPTION = None,
    auth_cookie: AUTH_COOKIE_OPTION = None,
) -> None:
    """List the difficulty/terrain combinations you have not found yet."""
    with with_client(auth_cookie) as client:
        combis = _unwrap(
            GeocachingService(client).fetch_needed_difficulty_terrain_combinations(),
            "difficulty/terrain matrix",
        )

    rows = [{"difficulty": difficulty, "terrain": terrain} for difficulty, terrain in combis]
    if output_format == OutputFormat.JSON:
        handle_json_output(rows, output)
    elif output_format == OutputFormat.CSV:
        handle_csv_output(rows, output)
    elif not rows:
        console.print("[green]✓ All difficulty/terrain combinations found[/green]")
    else:
        table = Table(title="Missing D/T Combinations")
        table.add_column("Difficulty", justify="center")
        table.add_column("Terrain", justify="center")
        for row in rows:
            table.add_row(f"{row['difficulty']:g}", f"{row['terrain']:g}")
        console.print(table)
        console.print(f"\n[bold]Missing:[/bold] {len(rows)}")
