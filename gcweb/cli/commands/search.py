"""Search caches command implementation."""

import logging
from datetime import date
from typing import Annotated, Any

import dateparser
import typer
from rich.console import Console
from rich.table import Table

from gcweb.cli.utils.auth import with_client
from gcweb.cli.utils.options import AUTH_COOKIE_OPTION, OUTPUT_FORMAT_OPTION, OUTPUT_PATH_OPTION, OutputFormat
from gcweb.cli.utils.output import handle_csv_output, handle_json_output
from gcweb.core.constants import APIConstants, DisplayConstants
from gcweb.core.geo import Geopoint, Viewport
from gcweb.core.query import SearchQuery
from gcweb.models.cache import NormalizedCacheRecord
from gcweb.models.enums import CacheSize, CacheType, DisplaySort, SortType, TriState
from gcweb.models.results import SearchResult
from gcweb.services.geocaching import GeocachingService

console = Console()
logger = logging.getLogger(__name__)


def parse_point(value: str) -> Geopoint:
    """Parse ``"lat,lon"``."""
    try:
        lat, lon = (float(part) for part in value.split(","))
        return Geopoint(latitude=lat, longitude=lon)
    except ValueError as e:
        raise typer.BadParameter(f"Expected 'lat,lon', got {value!r}") from e


def parse_box(value: str) -> Viewport:
    """Parse two corners ``"lat1,lon1,lat2,lon2"``."""
    parts = value.split(",")
    if len(parts) != 4:
        raise typer.BadParameter(f"Expected 'lat1,lon1,lat2,lon2', got {value!r}")
    return Viewport.from_corners(parse_point(",".join(parts[:2])), parse_point(",".join(parts[2:])))


def parse_day(value: str | None, option: str) -> date | None:
    if value is None:
        return None
    parsed = dateparser.parse(value)
    if parsed is None:
        console.print(f"[red]Invalid date format for {option}: {value}[/red]")
        raise typer.Exit(1)
    return parsed.date()


def _enum_members(enum_type: type, names: list[str] | None, option: str) -> list:
    members = []
    for name in names or []:
        try:
            members.append(enum_type[name.upper().replace("-", "_")])
        except KeyError:
            valid = ", ".join(m.name.lower() for m in enum_type)
            raise typer.BadParameter(f"Unknown value {name!r} for {option}; choose from: {valid}") from None
    return members


def _shorten(text: str | None, limit: int) -> str:
    if not text:
        return ""
    return text if len(text) <= limit else f"{text[: limit - 1]}…"


def transform_cache_for_csv(cache: NormalizedCacheRecord) -> dict[str, Any]:
    """Flatten a cache record into a CSV row."""
    return {
        "geocode": cache.geocode,
        "name": cache.name,
        "type": cache.cache_type.name.lower(),
        "size": cache.size.value,
        "difficulty": cache.difficulty,
        "terrain": cache.terrain,
        "latitude": cache.coords.latitude if cache.coords else None,
        "longitude": cache.coords.longitude if cache.coords else None,
        "distance_km": round(cache.distance, 3) if cache.distance is not None else None,
        "found": cache.found.value,
        "dnf": cache.dnf,
        "favorite_points": cache.favorite_points,
        "disabled": cache.disabled,
        "archived": cache.archived,
        "owner": cache.owner_display_name,
        "location": cache.location,
        "attributes": cache.attributes,
        "rating": cache.rating,
        "votes": cache.votes,
    }


def handle_table_output(result: SearchResult) -> None:
    """Handle table format output."""
    table = Table(title="Geocaches", show_lines=False)

    table.add_column("Code", style="cyan", no_wrap=True)
    table.add_column("Name", min_width=20)
    table.add_column("Type", style="dim")
    table.add_column("Size", style="dim")
    table.add_column("D/T", justify="center")
    table.add_column("Fav", justify="right")
    table.add_column("Distance", justify="right")
    table.add_column("Owner", style="dim")
    table.add_column("Status", justify="center")

    for cache in result.caches:
        status = "archived" if cache.archived else "disabled" if cache.disabled else ""
        if cache.is_found:
            status = f"✓ {status}".strip()
        elif cache.dnf:
            status = f"dnf {status}".strip()

        table.add_row(
            cache.geocode,
            _shorten(cache.name, DisplayConstants.MAX_NAME_LENGTH),
            cache.cache_type.name.lower(),
            cache.size.value,
            f"{cache.difficulty:g}/{cache.terrain:g}",
            str(cache.favorite_points),
            f"{cache.distance:.2f} km" if cache.distance is not None else "",
            _shorten(cache.owner_display_name, DisplayConstants.MAX_OWNER_LENGTH),
            status,
        )

    console.print(table)
    console.print(f"\n[bold]Caches:[/bold] {len(result)} | [bold]Left to fetch:[/bold] {max(result.left_to_fetch, 0)}")


def search_caches(
    box: Annotated[
        str | None,
        typer.Option("--box", "-b", help="Search area as two corners 'lat1,lon1,lat2,lon2'"),
    ] = None,
    origin: Annotated[
        str | None,
        typer.Option("--origin", help="Reference point 'lat,lon' for distance sort"),
    ] = None,
    cache_types: Annotated[
        list[str] | None,
        typer.Option("--type", "-t", help="Cache type, repeatable (e.g. traditional, multi, mystery)"),
    ] = None,
    cache_sizes: Annotated[
        list[str] | None,
        typer.Option("--size", help="Container size, repeatable (e.g. micro, small, regular)"),
    ] = None,
    min_difficulty: Annotated[float | None, typer.Option("--min-difficulty", min=1.0, max=5.0)] = None,
    max_difficulty: Annotated[float | None, typer.Option("--max-difficulty", min=1.0, max=5.0)] = None,
    min_terrain: Annotated[float | None, typer.Option("--min-terrain", min=1.0, max=5.0)] = None,
    max_terrain: Annotated[float | None, typer.Option("--max-terrain", min=1.0, max=5.0)] = None,
    keywords: Annotated[
        str | None,
        typer.Option("--keywords", "-k", help="Words contained in the cache name"),
    ] = None,
    hidden_by: Annotated[str | None, typer.Option("--hidden-by", help="Exact owner name")] = None,
    found_by: Annotated[list[str] | None, typer.Option("--found-by", help="User name, repeatable")] = None,
    not_found_by: Annotated[list[str] | None, typer.Option("--not-found-by", help="User name, repeatable")] = None,
    hide_found: Annotated[bool, typer.Option("--hide-found", help="Hide caches you found")] = False,
    hide_own: Annotated[bool, typer.Option("--hide-own", help="Hide your own caches")] = False,
    min_favorite_points: Annotated[int, typer.Option("--min-favorites", min=0)] = 0,
    placed_after: Annotated[
        str | None,
        typer.Option("--placed-after", help="Placed after this date (e.g., '2024-01-01', '1 month ago')"),
    ] = None,
    placed_before: Annotated[
        str | None,
        typer.Option("--placed-before", help="Placed before this date (e.g., '2024-12-31', 'yesterday')"),
    ] = None,
    sort: Annotated[
        DisplaySort,
        typer.Option("--sort", "-s", help="Sort order", case_sensitive=False),
    ] = DisplaySort.DISTANCE,
    descending: Annotated[bool, typer.Option("--desc", help="Sort descending")] = False,
    take: Annotated[int, typer.Option("--take", min=1, help="Page size")] = int(APIConstants.DEFAULT_SEARCH_TAKE),
    skip: Annotated[int, typer.Option("--skip", min=0, help="Results to skip")] = 0,
    ratings: Annotated[
        bool,
        typer.Option("--ratings", help="Add GCVote ratings (default from GCWEB_INCLUDE_RATINGS)"),
    ] = False,
    output_format: OUTPUT_FORMAT_OPTION = OutputFormat.TABLE,
    output: OUTPUT_PATH_OPTION = None,
    auth_cookie: AUTH_COOKIE_OPTION = None,
) -> None:
    """Search geocaches in an area or around a point.

    Results come in server order. Caches without coordinates (premium caches
    for basic members) get an approximate distance when sorting by distance.
    """
    if box is None and origin is None and not (keywords or hidden_by or found_by):
        console.print("[yellow]Give at least --box, --origin, --keywords, --hidden-by or --found-by.[/yellow]")
        raise typer.Exit(1)

    query = (
        SearchQuery()
        .set_box(parse_box(box) if box else None)
        .set_origin(parse_point(origin) if origin else None)
        .add_cache_types(_enum_members(CacheType, cache_types, "--type"))
        .add_cache_sizes(_enum_members(CacheSize, cache_sizes, "--size"))
        .set_difficulty(min_difficulty, max_difficulty)
        .set_terrain(min_terrain, max_terrain)
        .set_keywords(keywords)
        .set_hidden_by(hidden_by)
        .set_min_favorite_points(min_favorite_points)
        .set_placement_date(parse_day(placed_after, "--placed-after"), parse_day(placed_before, "--placed-before"))
        .set_sort(SortType.from_display_sort(sort), not descending)
        .set_page(take, skip)
    )
    if hide_found:
        query.set_status_found(TriState.FALSE)
    if hide_own:
        query.set_status_own(TriState.FALSE)
    for name in found_by or []:
        query.add_found_by(name)
    for name in not_found_by or []:
        query.add_not_found_by(name)

    with with_client(auth_cookie) as client:
        service = GeocachingService(client)
        with console.status("[bold blue]Searching...[/bold blue]", spinner="dots"):
            result = service.search(query, include_ratings=True if ratings else None)

    if not result.ok:
        console.print(f"[red]Search failed: {result.error}[/red]")
        raise typer.Exit(1)

    if not result.caches:
        console.print("[yellow]No caches found[/yellow]")
        return

    if output_format == OutputFormat.TABLE:
        handle_table_output(result)
    elif output_format == OutputFormat.JSON:
        handle_json_output(result, output)
    elif output_format == OutputFormat.CSV:
        handle_csv_output(result.caches, output, row_transformer=transform_cache_for_csv)
