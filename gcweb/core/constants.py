"""
Constants and configuration values for the geocaching.com web client.
"""

from enum import IntEnum, StrEnum

# Base URLs
WEBSITE_URL = "https://www.geocaching.com"
API_PROXY_URL = f"{WEBSITE_URL}/api/proxy"
GCVOTE_URL = "http://gcvote.com/getVotes.php"

# Version
PACKAGE_VERSION = "0.1.0"

# Identifies this client towards the service on every search request
APP_IDENTIFIER = "cgeo"

USER_AGENT = f"gcweb/{PACKAGE_VERSION} (+https://www.geocaching.com)"

# Header carrying the anti-forgery token on mutating website requests
CSRF_TOKEN_HEADER = "CSRF-Token"

# Wire date format for placement date filters
PARAM_DATE_FORMAT = "%Y-%m-%d"


class APIConstants(IntEnum):
    """API-related limits and constants."""

    MAX_TAKE = 50
    DEFAULT_SEARCH_TAKE = 500
    REQUEST_TIMEOUT = 30
    BACKOFF_MAX_TRIES = 3
    BACKOFF_FACTOR = 2
    BACKOFF_MAX_VALUE = 30


class SearchConstants(IntEnum):
    """Search filter limits."""

    MIN_RATING = 1
    MAX_RATING = 5


class DisplayConstants(IntEnum):
    """Display and formatting limits."""

    MAX_DIAGNOSTIC_LENGTH = 200
    MAX_NAME_LENGTH = 40
    MAX_OWNER_LENGTH = 20


class FormattingConstants(IntEnum):
    """Formatting constants."""

    JSON_INDENT = 2


class ProgressBarConstants(IntEnum):
    """Progress bar update intervals."""

    MIN_UPDATE_INTERVAL = 100  # milliseconds
    MAX_UPDATE_INTERVAL = 300  # milliseconds


class Endpoints(StrEnum):
    """Endpoint path templates, relative to the website or API proxy base URL."""

    # API proxy
    SEARCH = "/web/search/v2"
    TRACKABLE_INVENTORY = "/trackables"
    FAVORITE_POINTS = "/web/v1/users/{profile}/availablefavoritepoints"
    DT_MATRIX_NEEDED = "/web/v1/statistics/difficultyterrainmatrix/needed"
    LEGACY_GEOCACHE_LOG = "/web/v1/geocache/{geocode}/GeocacheLog"

    # Website pages holding a CSRF token
    GEOCACHE_LOG_PAGE = "/live/geocache/{geocode}/log"
    LOG_EDIT_PAGE = "/live/log/{log_code}"
    TRACKABLE_LOG_PAGE = "/live/trackable/{tb_code}/log"

    # Website live API
    GEOCACHE_LOG = "/api/live/v1/logs/{geocode}/geocacheLog"
    TRACKABLE_LOG = "/api/live/v1/logs/{tb_code}/trackableLog"
    LOG_IMAGES = "/api/live/v1/logs/{log_code}/images"
    LOG_IMAGE_REPLACE = "/api/live/v1/images/{log_code}/{guid}/replace"
