"""Log submission models and the JSON payloads exchanged with the live log API."""

from datetime import datetime
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from gcweb.models.enums import LogType, LogTypeTrackable, LogWorkflowState, StatusCode


def format_log_date(value: datetime) -> str:
    """Format a timestamp as ISO local time with millisecond precision."""
    if value.tzinfo is not None:
        value = value.astimezone().replace(tzinfo=None)
    return value.isoformat(timespec="milliseconds")


class LogImage(BaseModel):
    """An image to attach to a log."""

    data: bytes = Field(repr=False)
    filename: str = "image.jpg"
    title: str = ""
    description: str = ""

    @classmethod
    def from_file(cls, path: Path, title: str = "", description: str = "") -> "LogImage":
        return cls(data=path.read_bytes(), filename=path.name, title=title, description=description)

    @property
    def has_metadata(self) -> bool:
        """True if title or description carries non-blank text."""
        return bool(self.title.strip() or self.description.strip())


class TrackableAction(BaseModel):
    """What to do with a trackable from the own inventory while logging a cache."""

    trackable_code: str
    action: LogTypeTrackable


class CacheLogSubmission(BaseModel):
    """A cache log as composed by the caller."""

    geocode: str
    log_type: LogType
    date: datetime
    text: str
    trackables: list[TrackableAction] = Field(default_factory=list)
    add_to_favorites: bool = False
    images: list[LogImage] = Field(default_factory=list)


class TrackableLogSubmission(BaseModel):
    """A trackable log as composed by the caller."""

    trackable_code: str  # public TB code
    tracking_code: str | None = None  # secret code printed on the item
    action: LogTypeTrackable
    date: datetime
    text: str = ""


# --- wire payloads ---


class WirePayload(BaseModel):
    """Base for camelCase request/response bodies."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    def to_json_body(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class LogTrackableEntry(WirePayload):
    trackable_code: str = Field(alias="trackableCode")
    trackable_log_type_id: int = Field(alias="trackableLogTypeId")


class GeocacheLogRequest(WirePayload):
    """Body for ``POST /api/live/v1/logs/{geocode}/geocacheLog``."""

    images: list[str] = Field(default_factory=list)
    log_date: datetime = Field(alias="logDate")
    log_text: str = Field(alias="logText")
    log_type: int = Field(alias="logType")
    trackables: list[LogTrackableEntry] = Field(default_factory=list)
    used_favorite_point: bool | None = Field(default=None, alias="usedFavoritePoint")

    @field_serializer("log_date")
    def serialize_log_date(self, value: datetime) -> str:
        return format_log_date(value)


class TrackableLogRequest(WirePayload):
    """Body for ``POST /api/live/v1/logs/{tb_code}/trackableLog``."""

    images: list[str] = Field(default_factory=list)
    log_date: datetime = Field(alias="logDate")
    log_text: str = Field(alias="logText")
    log_type: int = Field(alias="logType")
    tracking_code: str | None = Field(default=None, alias="trackingCode")
    # mandatory for RETRIEVED_IT, absent otherwise
    geocache_reference_code: str | None = Field(default=None, alias="geocacheReferenceCode")

    @field_serializer("log_date")
    def serialize_log_date(self, value: datetime) -> str:
        return format_log_date(value)


class LegacyGeocacheLogRequest(WirePayload):
    """Body for the older ``POST /web/v1/geocache/{geocode}/GeocacheLog`` proxy endpoint."""

    geocache_reference_code: str = Field(alias="geocacheReferenceCode")
    images: list[str] = Field(default_factory=list)
    log_date: datetime = Field(alias="logDate")
    log_text: str = Field(alias="logText")
    log_type: int = Field(alias="logType")
    owner_is_viewing: bool = Field(default=False, alias="ownerIsViewing")
    trackables: list[LogTrackableEntry] = Field(default_factory=list)
    used_favorite_point: bool = Field(default=False, alias="usedFavoritePoint")

    @field_serializer("log_date")
    def serialize_log_date(self, value: datetime) -> str:
        return format_log_date(value)


class LogResponse(WirePayload):
    """Reply to a log creation, e.g. ``{"guid": "...", "logReferenceCode": "GL...", ...}``."""

    guid: str | None = None
    log_reference_code: str | None = Field(default=None, alias="logReferenceCode")
    date_time_created_utc: datetime | None = Field(default=None, alias="dateTimeCreatedUtc")
    cannot_delete: bool | None = Field(default=None, alias="cannotDelete")
    is_archived: bool | None = Field(default=None, alias="isArchived")


class LogImageResponse(WirePayload):
    """Reply to an image create or replace request."""

    guid: str | None = None
    url: str | None = None
    thumbnail_url: str | None = Field(default=None, alias="thumbnailUrl")
    success: bool | None = None


class GeocacheReference(WirePayload):
    """Snippet like ``{"id": 123, "referenceCode": "GCxyz", "name": "somename"}``."""

    id: int | None = None
    reference_code: str | None = Field(default=None, alias="referenceCode")
    name: str | None = None


# --- results ---


class LogWorkflowResult(BaseModel):
    """Outcome of a log workflow: status plus log reference code or image URL."""

    status: StatusCode
    state: LogWorkflowState
    reference: str = ""
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.status is StatusCode.NO_ERROR

    @classmethod
    def success(cls, reference: str) -> "LogWorkflowResult":
        return cls(status=StatusCode.NO_ERROR, state=LogWorkflowState.SUCCESS, reference=reference)
