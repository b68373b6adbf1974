"""Raw search response models matching the ``/web/search/v2`` JSON."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from gcweb.core.geo import Geopoint


class WireModel(BaseModel):
    """Base for camelCase wire models; unknown fields are ignored."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class PostedCoordinates(WireModel):
    """Coordinate object as posted by the service."""

    latitude: float
    longitude: float

    def to_geopoint(self) -> Geopoint:
        return Geopoint(latitude=self.latitude, longitude=self.longitude)


class CacheOwner(WireModel):
    """Owner of a geocache."""

    code: str | None = None
    username: str | None = None


class RawAttribute(WireModel):
    """Attribute entry, e.g. ``{"id": 8, "name": "Scenic view", "isApplicable": true}``."""

    id: int
    name: str | None = None
    is_applicable: bool = Field(default=True, alias="isApplicable")


class SearchResultRecord(WireModel):
    """A single search hit as returned by the service."""

    id: int | None = None
    name: str = ""
    code: str
    premium_only: bool = Field(default=False, alias="premiumOnly")
    favorite_points: int = Field(default=0, alias="favoritePoints")
    geocache_type: int = Field(default=0, alias="geocacheType")
    container_type: int = Field(default=0, alias="containerType")
    difficulty: float = 0.0
    terrain: float = 0.0
    user_found: bool = Field(default=False, alias="userFound")
    user_did_not_find: bool = Field(default=False, alias="userDidNotFind")
    cache_status: int = Field(default=0, alias="cacheStatus")
    posted_coordinates: PostedCoordinates | None = Field(default=None, alias="postedCoordinates")
    user_corrected_coordinates: PostedCoordinates | None = Field(default=None, alias="userCorrectedCoordinates")
    details_url: str | None = Field(default=None, alias="detailsUrl")
    has_geotour: bool = Field(default=False, alias="hasGeotour")
    has_log_draft: bool = Field(default=False, alias="hasLogDraft")
    placed_date: datetime | None = Field(default=None, alias="placedDate")
    owner: CacheOwner | None = None
    last_found_date: datetime | None = Field(default=None, alias="lastFoundDate")
    trackable_count: int = Field(default=0, alias="trackableCount")
    region: str | None = None
    country: str | None = None
    attributes: list[RawAttribute] = Field(default_factory=list)

    @field_validator("attributes", mode="before")
    @classmethod
    def ensure_list(cls, v: Any) -> list[Any]:
        """Treat a null attribute list as empty."""
        return v if isinstance(v, list) else []


class SearchResultPage(WireModel):
    """Search response: total hit count plus the records of this page, in server order."""

    total: int = 0
    results: list[SearchResultRecord] = Field(default_factory=list)

    @field_validator("results", mode="before")
    @classmethod
    def ensure_results(cls, v: Any) -> list[Any]:
        """Treat a null result list as empty."""
        return v if isinstance(v, list) else []
