"""Public operations against geocaching.com: searching, logging and account lookups.

All operations block and are meant to run off any UI thread. None of them
raises to the caller; failures come back as typed results.
"""

import logging
from collections.abc import Callable, Mapping

from tqdm import tqdm

from gcweb.api.client import GCWebClient
from gcweb.config import Config
from gcweb.core.constants import APIConstants, Endpoints, ProgressBarConstants
from gcweb.core.distance import infer_missing_distances
from gcweb.core.geo import Geopoint
from gcweb.core.mapper import ResultMapper
from gcweb.core.query import SearchQuery
from gcweb.exceptions import DegenerateViewportError
from gcweb.models.cache import NormalizedCacheRecord
from gcweb.models.enums import CacheType
from gcweb.models.log import CacheLogSubmission, LogImage, LogWorkflowResult, TrackableLogSubmission
from gcweb.models.results import SearchResult, ServiceResult, TrackableInventoryEntry
from gcweb.models.search import SearchResultPage
from gcweb.services.log_workflow import LogWorkflowEngine
from gcweb.services.ratings import GCVoteRatingsProvider, RatingsProvider

logger = logging.getLogger(__name__)

LocationProvider = Callable[[], Geopoint | None]


class GeocachingService:
    """Facade composing query building, result mapping and the log workflows."""

    def __init__(
        self,
        client: GCWebClient,
        ratings_provider: RatingsProvider | None = None,
        location_provider: LocationProvider | None = None,
        config: Config | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            client: Opened website/API proxy client
            ratings_provider: Rating lookup for enrichment (defaults to GCVote)
            location_provider: Returns the current device location, used as
                distance reference when a query has neither origin nor box
            config: Application config (falls back to the client's)
        """
        self.client = client
        self.config = config or client.config
        self.location_provider = location_provider
        self._ratings_provider = ratings_provider
        self.mapper = ResultMapper()
        self.log_workflow = LogWorkflowEngine(client)

    @property
    def ratings_provider(self) -> RatingsProvider:
        if self._ratings_provider is None:
            self._ratings_provider = GCVoteRatingsProvider(self.client.require_transport(), self.config)
        return self._ratings_provider

    # --- search ---

    def search(
        self,
        query: SearchQuery,
        include_ratings: bool | None = None,
        known: Mapping[str, NormalizedCacheRecord] | None = None,
    ) -> SearchResult:
        """Run a search and return the normalized caches of the requested page.

        Args:
            query: Search filters; consumed by this call
            include_ratings: Enrich with GCVote ratings (defaults to config)
            known: Records already held by the caller, merged into by geocode

        Returns:
            SearchResult in server order, empty for a degenerate viewport
        """
        query.cache_types.discard(CacheType.ALL)

        current_location = self._current_location()
        try:
            params = query.build(current_location)
        except DegenerateViewportError as e:
            logger.warning(f"{e.message}; returning empty result", stack_info=True)
            return SearchResult()

        logger.info(f"Searching caches (sort={query.sort.keyword}, take={query.take}, skip={query.skip})")
        try:
            data = self.client.request_json("GET", self.client.api_proxy(Endpoints.SEARCH), params=params)
            page = SearchResultPage.model_validate(data or {})
        except Exception as e:
            logger.error(f"Search failed: {e}")
            return SearchResult(error=str(e))

        left_to_fetch, caches = self.mapper.map(page, query, known)
        infer_missing_distances(caches, query, query.resolve_distance_origin(current_location))

        if self.config.include_ratings if include_ratings is None else include_ratings:
            self._load_ratings(caches)

        logger.info(f"Found {len(caches)} caches, {left_to_fetch} left to fetch")
        return SearchResult(caches=caches, left_to_fetch=left_to_fetch)

    def _current_location(self) -> Geopoint | None:
        if self.location_provider is None:
            return None
        try:
            return self.location_provider()
        except Exception as e:
            logger.warning(f"Current location unavailable: {e}")
            return None

    def _load_ratings(self, caches: list[NormalizedCacheRecord]) -> None:
        try:
            self.ratings_provider.load_ratings(caches)
        except Exception as e:
            logger.warning(f"Rating enrichment failed, returning caches without ratings: {e}")

    # --- logs ---

    def post_log(self, submission: CacheLogSubmission) -> LogWorkflowResult:
        return self.log_workflow.post_log(submission)

    def post_log_image(self, geocode: str, log_code: str, image: LogImage) -> LogWorkflowResult:
        return self.log_workflow.post_log_image(geocode, log_code, image)

    def post_trackable_log(self, submission: TrackableLogSubmission) -> LogWorkflowResult:
        return self.log_workflow.post_trackable_log(submission)

    # --- account lookups ---

    def fetch_trackable_inventory(self, show_progress: bool = False) -> ServiceResult[list[TrackableInventoryEntry]]:
        """Fetch all trackables in the user's inventory, page by page.

        Pages are requested one after another until a page comes back shorter
        than the page size.
        """
        logger.info("Fetching trackable inventory")
        entries: list[TrackableInventoryEntry] = []
        page_size = int(APIConstants.MAX_TAKE)
        skip = 0

        pbar = tqdm(
            desc="Fetching trackables",
            unit=" trackables",
            mininterval=ProgressBarConstants.MIN_UPDATE_INTERVAL,
            maxinterval=ProgressBarConstants.MAX_UPDATE_INTERVAL,
            disable=not show_progress,
        )
        try:
            while True:
                data = self.client.request_json(
                    "GET",
                    self.client.api_proxy(Endpoints.TRACKABLE_INVENTORY),
                    params={"inCollection": "false", "take": str(page_size), "skip": str(skip)},
                )
                page = [TrackableInventoryEntry.model_validate(item) for item in data or []]
                entries.extend(page)
                pbar.update(len(page))
                if len(page) < page_size:
                    break
                skip += page_size
        except Exception as e:
            logger.error(f"Fetching trackable inventory failed after {len(entries)} entries: {e}")
            return ServiceResult(error=str(e))
        finally:
            pbar.close()

        logger.info(f"Found {len(entries)} trackables in inventory")
        return ServiceResult(value=entries)

    def fetch_favorite_point_budget(self, profile_code: str) -> ServiceResult[int]:
        """Number of favorite points the given user can still award."""
        try:
            data = self.client.request_json(
                "GET", self.client.api_proxy(Endpoints.FAVORITE_POINTS.format(profile=profile_code))
            )
            return ServiceResult(value=int(data))
        except Exception as e:
            logger.error(f"Fetching favorite points for {profile_code} failed: {e}")
            return ServiceResult(error=str(e))

    def fetch_needed_difficulty_terrain_combinations(self) -> ServiceResult[list[tuple[float, float]]]:
        """Difficulty/terrain pairs the user has not found yet.

        The service answers with strings like ``["1-4.5", "2.5-4.5", "5-3.5"]``.
        """
        try:
            raw_combis = self.client.request_json("GET", self.client.api_proxy(Endpoints.DT_MATRIX_NEEDED))
        except Exception as e:
            logger.error(f"Fetching difficulty/terrain matrix failed: {e}")
            return ServiceResult(error=str(e))

        combis: list[tuple[float, float]] = []
        if not raw_combis:
            return ServiceResult(value=combis)
        try:
            for raw_combi in raw_combis:
                difficulty, terrain = raw_combi.split("-")
                combis.append((float(difficulty), float(terrain)))
        except (AttributeError, ValueError):
            logger.warning(f"Problems parsing as list of dt-combis: {raw_combis}")
        return ServiceResult(value=combis)
