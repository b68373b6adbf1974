"""Distance guessing for search results without coordinates."""

import logging
from collections.abc import Sequence

from gcweb.core.geo import Geopoint
from gcweb.core.query import SearchQuery
from gcweb.models.cache import NormalizedCacheRecord
from gcweb.models.enums import SortType

logger = logging.getLogger(__name__)


def infer_missing_distances(
    records: Sequence[NormalizedCacheRecord],
    query: SearchQuery,
    origin: Geopoint | None,
) -> None:
    """Assign approximate distances to records lacking coordinates.

    Premium caches returned to basic members have no coordinates. When the
    page is sorted by distance from ``origin``, such a record lies between its
    neighbours, so it gets the midpoint of the surrounding known distances.
    Records after the last known one get that distance plus 1, or 1 if no
    record has coordinates. Values are ordering hints, not measurements.
    """
    if not records:
        return
    if origin is None or query.sort is not SortType.DISTANCE:
        return

    walk = list(records) if query.sort_asc else list(reversed(records))

    last_distance = 0.0
    pending: list[NormalizedCacheRecord] = []

    for record in walk:
        if not record.has_coords:
            pending.append(record)
            continue

        new_distance = origin.distance_to(record.coords)
        record.distance = new_distance
        for missing in pending:
            missing.distance = (last_distance + new_distance) / 2
        pending.clear()
        last_distance = new_distance

    for missing in pending:
        missing.distance = 1.0 if last_distance == 0 else last_distance + 1

    logger.debug(f"Inferred distances from origin {origin} for {len(records)} records")
