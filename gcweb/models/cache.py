"""Normalized geocache records produced from search results."""

from datetime import datetime

from pydantic import BaseModel, Field

from gcweb.core.geo import Geopoint
from gcweb.models.enums import CacheSize, CacheType, TriState


class NormalizedCacheRecord(BaseModel):
    """A geocache as seen through a search result, owned by the caller once mapped."""

    geocode: str
    name: str = ""
    cache_type: CacheType = CacheType.UNKNOWN
    size: CacheSize = CacheSize.UNKNOWN
    difficulty: float = 0.0
    terrain: float = 0.0
    coords: Geopoint | None = None  # absent for premium-only caches seen by basic members
    user_modified_coords: bool = False
    premium_members_only: bool = False
    hidden: datetime | None = None
    last_found: datetime | None = None
    inventory_items: int = 0
    location: str = ""
    found: TriState = TriState.UNSET
    dnf: bool = False
    favorite_points: int = 0
    disabled: bool = False
    archived: bool = False
    owner_display_name: str | None = None
    owner_user_id: str | None = None
    attributes: list[str] = Field(default_factory=list)
    distance: float | None = None  # km; inferred values are ordering hints only

    # GCVote enrichment
    rating: float | None = None
    votes: int | None = None
    my_vote: float | None = None

    def apply_found_signal(self, found: bool) -> None:
        """Merge a found/not-found signal without downgrading a known find."""
        if found:
            self.found = TriState.TRUE
        elif self.found is not TriState.TRUE:
            self.found = TriState.FALSE

    @property
    def is_found(self) -> bool:
        return self.found is TriState.TRUE

    @property
    def has_coords(self) -> bool:
        return self.coords is not None
