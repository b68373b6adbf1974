"""Shared CLI options and enums for commands."""

from enum import StrEnum
from pathlib import Path
from typing import Annotated

import typer


class OutputFormat(StrEnum):
    """Supported output formats across commands."""

    TABLE = "table"
    JSON = "json"
    CSV = "csv"


# Common typer options
AUTH_COOKIE_OPTION = Annotated[
    str | None,
    typer.Option(
        "--auth-cookie",
        "-a",
        help="Session cookie of a logged-in geocaching.com session (auto-detected from GCWEB_AUTH_COOKIE env var)",
        hide_input=True,
    ),
]

OUTPUT_PATH_OPTION = Annotated[
    Path | None,
    typer.Option(
        "--output",
        "-o",
        help="Output file path for json/csv formats (prints to stdout if omitted)",
    ),
]

OUTPUT_FORMAT_OPTION = Annotated[
    OutputFormat,
    typer.Option(
        "--format",
        "-f",
        help="Output format",
        case_sensitive=False,
    ),
]

VERBOSE_OPTION = Annotated[
    bool,
    typer.Option(
        "--verbose",
        "-v",
        help="Enable verbose output",
    ),
]
