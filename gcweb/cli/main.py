"""Main CLI entry point for gcweb."""

import logging

import typer
from rich.logging import RichHandler

from gcweb.cli.commands.account import dt_matrix, favorite_points, trackable_inventory
from gcweb.cli.commands.log import post_log, post_trackable_log
from gcweb.cli.commands.search import search_caches
from gcweb.cli.utils.options import VERBOSE_OPTION

app = typer.Typer(
    name="gcweb",
    help="gcweb - Search geocaches and post logs on geocaching.com",
    add_completion=True,
    rich_markup_mode="rich",
    no_args_is_help=True,
)


@app.callback()
def callback(verbose: VERBOSE_OPTION = False) -> None:
    """
    geocaching.com web client CLI
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
    )


app.command("search", help="Search geocaches by area, point and filters")(search_caches)
app.command("inventory", help="List the trackables in your inventory")(trackable_inventory)
app.command("favorite-points", help="Show the favorite points a user can still award")(favorite_points)
app.command("dt-matrix", help="List difficulty/terrain combinations not found yet")(dt_matrix)
app.command("post-log", help="Post a log for a geocache")(post_log)
app.command("log-trackable", help="Post a log for a trackable")(post_trackable_log)


if __name__ == "__main__":
    app()
