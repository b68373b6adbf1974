"""CLI utilities module."""

from gcweb.cli.utils.auth import get_auth_cookie, with_client
from gcweb.cli.utils.options import (
    AUTH_COOKIE_OPTION,
    OUTPUT_FORMAT_OPTION,
    OUTPUT_PATH_OPTION,
    VERBOSE_OPTION,
    OutputFormat,
)
from gcweb.cli.utils.output import handle_csv_output, handle_json_output

__all__ = [
    "AUTH_COOKIE_OPTION",
    "OUTPUT_FORMAT_OPTION",
    "OUTPUT_PATH_OPTION",
    "VERBOSE_OPTION",
    "OutputFormat",
    "get_auth_cookie",
    "handle_csv_output",
    "handle_json_output",
    "with_client",
]
