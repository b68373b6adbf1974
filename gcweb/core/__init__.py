"""Core functionality module."""

from gcweb.core.constants import FormattingConstants
from gcweb.core.geo import Geopoint, Viewport
from gcweb.core.query import SearchQuery, get_range_string

__all__ = [
    "FormattingConstants",
    "Geopoint",
    "SearchQuery",
    "Viewport",
    "get_range_string",
]
