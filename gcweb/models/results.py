"""Result models returned by the service facade."""

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from gcweb.models.cache import NormalizedCacheRecord

T = TypeVar("T")


class ServiceResult(BaseModel, Generic[T]):
    """Value of a fetch operation, or the reason it could not be produced."""

    value: T | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class SearchResult(BaseModel):
    """Caches of one search page, in server order."""

    caches: list[NormalizedCacheRecord] = Field(default_factory=list)
    left_to_fetch: int = 0
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def geocodes(self) -> list[str]:
        return [c.geocode for c in self.caches]

    def __len__(self) -> int:
        return len(self.caches)


class SearchFilterData(BaseModel):
    """User name filters a search was run with, for annotating its results."""

    model_config = ConfigDict(frozen=True)

    found_by: tuple[str, ...] = ()
    not_found_by: tuple[str, ...] = ()


class TrackableInventoryEntry(BaseModel):
    """A trackable in the user's inventory."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    reference_code: str = Field(alias="referenceCode")  # public code, starts with "TB"
    name: str | None = None
    icon_url: str | None = Field(default=None, alias="iconUrl")
    tracking_number: str | None = Field(default=None, alias="trackingNumber")  # secret code
