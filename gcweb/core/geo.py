"""Geographic primitives: points, viewports and great-circle distance."""

import math

from pydantic import BaseModel, ConfigDict, Field

EARTH_RADIUS_KM = 6371.0


class Geopoint(BaseModel):
    """A WGS84 coordinate."""

    model_config = ConfigDict(frozen=True)

    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)

    def distance_to(self, other: "Geopoint") -> float:
        """Great-circle distance to another point in kilometers."""
        p1, p2 = math.radians(self.latitude), math.radians(other.latitude)
        dphi = math.radians(other.latitude - self.latitude)
        dl = math.radians(other.longitude - self.longitude)
        a = math.sin(dphi / 2) ** 2 + math.cos(p1) * math.cos(p2) * math.sin(dl / 2) ** 2
        return 2 * EARTH_RADIUS_KM * math.asin(math.sqrt(a))

    def to_param(self) -> str:
        """Format as the ``lat,lon`` pair used in search parameters."""
        return f"{self.latitude},{self.longitude}"

    def __str__(self) -> str:
        return self.to_param()


class Viewport(BaseModel):
    """A latitude/longitude bounding box."""

    model_config = ConfigDict(frozen=True)

    lat_min: float
    lat_max: float
    lon_min: float
    lon_max: float

    @classmethod
    def from_corners(cls, a: Geopoint, b: Geopoint) -> "Viewport":
        """Build a viewport spanning two arbitrary corner points."""
        return cls(
            lat_min=min(a.latitude, b.latitude),
            lat_max=max(a.latitude, b.latitude),
            lon_min=min(a.longitude, b.longitude),
            lon_max=max(a.longitude, b.longitude),
        )

    @property
    def center(self) -> Geopoint:
        return Geopoint(
            latitude=(self.lat_min + self.lat_max) / 2,
            longitude=(self.lon_min + self.lon_max) / 2,
        )

    @property
    def is_just_a_dot(self) -> bool:
        """True if the viewport collapses to a single point."""
        return self.lat_min == self.lat_max and self.lon_min == self.lon_max

    def to_param(self) -> str:
        """Format as ``lat_max,lon_min,lat_min,lon_max``."""
        return f"{self.lat_max},{self.lon_min},{self.lat_min},{self.lon_max}"
