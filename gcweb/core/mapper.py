"""Maps raw search result pages into normalized cache records."""

import logging
from collections.abc import Mapping

from pydantic import ValidationError

from gcweb.core.geo import Geopoint
from gcweb.core.query import SearchQuery
from gcweb.models.cache import NormalizedCacheRecord
from gcweb.models.enums import CacheAttribute, CacheSize, CacheType
from gcweb.models.search import PostedCoordinates, SearchResultPage, SearchResultRecord

logger = logging.getLogger(__name__)

CACHE_STATUS_DISABLED = 1
CACHE_STATUS_ARCHIVED = 2


class ResultMapper:
    """Converts search responses into ``NormalizedCacheRecord`` instances."""

    def map(
        self,
        raw_page: SearchResultPage,
        query: SearchQuery,
        known: Mapping[str, NormalizedCacheRecord] | None = None,
    ) -> tuple[int, list[NormalizedCacheRecord]]:
        """Map a result page, keeping server order.

        Args:
            raw_page: Parsed search response
            query: Query the page was fetched with
            known: Records already held by the caller, keyed by geocode; these are
                updated in place so their found state is merged rather than replaced

        Returns:
            Tuple of (results left to fetch, records)
        """
        total_remaining = raw_page.total - query.take - query.skip
        known = known or {}

        records = [self.map_record(raw, known.get(raw.code)) for raw in raw_page.results]
        logger.debug(f"Mapped {len(records)} records, {total_remaining} left to fetch")
        return total_remaining, records

    def map_record(
        self, raw: SearchResultRecord, existing: NormalizedCacheRecord | None = None
    ) -> NormalizedCacheRecord:
        record = existing if existing is not None else NormalizedCacheRecord(geocode=raw.code)
        record.geocode = raw.code
        record.name = raw.name

        # premium caches seen by basic members carry no coordinates
        record.coords = None
        if raw.user_corrected_coordinates is not None:
            record.coords = self.map_coordinates(raw.code, raw.user_corrected_coordinates)
            record.user_modified_coords = record.coords is not None
        if record.coords is None and raw.posted_coordinates is not None:
            record.coords = self.map_coordinates(raw.code, raw.posted_coordinates)
            record.user_modified_coords = False

        record.cache_type = CacheType.by_wpt_type_id(raw.geocache_type)
        record.size = CacheSize.by_gc_id(raw.container_type)
        record.difficulty = raw.difficulty
        record.terrain = raw.terrain
        record.premium_members_only = raw.premium_only
        record.hidden = raw.placed_date
        record.last_found = raw.last_found_date
        record.inventory_items = raw.trackable_count
        record.location = ", ".join(part for part in (raw.region, raw.country) if part)

        # search results may lag behind other sources; never downgrade a known find
        record.apply_found_signal(raw.user_found)
        if not raw.user_found and raw.user_did_not_find:
            record.dnf = True

        record.favorite_points = raw.favorite_points
        record.disabled = raw.cache_status == CACHE_STATUS_DISABLED
        record.archived = raw.cache_status == CACHE_STATUS_ARCHIVED
        if raw.owner is not None:
            record.owner_display_name = raw.owner.username
            record.owner_user_id = raw.owner.username

        record.attributes = self.map_attributes(raw)
        return record

    @staticmethod
    def map_coordinates(geocode: str, coordinates: PostedCoordinates) -> Geopoint | None:
        try:
            return coordinates.to_geopoint()
        except ValidationError as e:
            logger.warning(f"Ignoring invalid coordinates on {geocode}: {e.errors()[0]['msg']}")
            return None

    @staticmethod
    def map_attributes(raw: SearchResultRecord) -> list[str]:
        attributes = []
        for attribute in raw.attributes:
            cache_attribute = CacheAttribute.by_gc_id(attribute.id)
            if cache_attribute is None:
                logger.debug(f"Skipping unknown attribute {attribute.id} ({attribute.name}) on {raw.code}")
                continue
            attributes.append(cache_attribute.get_value(attribute.is_applicable))
        return attributes
