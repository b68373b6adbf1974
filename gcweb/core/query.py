"""Search query builder for the ``/web/search/v2`` endpoint."""

import logging
import math
from collections.abc import Iterable
from datetime import date, timedelta

from gcweb.core.constants import APP_IDENTIFIER, PARAM_DATE_FORMAT, APIConstants, SearchConstants
from gcweb.core.geo import Geopoint, Viewport
from gcweb.exceptions import DegenerateViewportError
from gcweb.models.enums import CacheAttribute, CacheSize, CacheType, SortType, TriState
from gcweb.models.results import SearchFilterData

logger = logging.getLogger(__name__)

ONE_DAY = timedelta(days=1)


def _format_rating(value: float) -> str:
    return str(float(value))


def _normalize_rating(value: float) -> float:
    clamped = max(SearchConstants.MIN_RATING, min(SearchConstants.MAX_RATING, value))
    # half steps, ties rounded up
    return math.floor(clamped * 2 + 0.5) / 2


def get_range_string(p_from: float | None, p_to: float | None) -> str | None:
    """Range parameter for difficulty/terrain, e.g. ``"1.5-4.0"``.

    Bounds are clamped to 1..5 and rounded to half steps; a missing bound
    defaults to the domain extreme and inverted bounds are swapped.
    """
    if p_from is None and p_to is None:
        return None

    low = float(SearchConstants.MIN_RATING) if p_from is None else _normalize_rating(p_from)
    high = float(SearchConstants.MAX_RATING) if p_to is None else _normalize_rating(p_to)
    if low > high:
        low, high = high, low
    return f"{_format_rating(low)}-{_format_rating(high)}"


def _tri_state_param(value: TriState) -> str | None:
    if value is TriState.UNSET:
        return None
    return "0" if value is TriState.TRUE else "1"


def _ordered(values: Iterable, enum_type: type) -> list:
    order = list(enum_type)
    return sorted(values, key=order.index)


class SearchQuery:
    """Accumulates search filters and encodes them into wire parameters.

    Setters return the query so calls can be chained. A query is meant to be
    built for one search and discarded afterwards.
    """

    def __init__(self) -> None:
        self.box: Viewport | None = None
        self.origin: Geopoint | None = None

        self.status_own = TriState.UNSET
        self.status_found = TriState.UNSET
        self.status_membership = TriState.UNSET
        self.status_enabled = TriState.UNSET
        self.status_corrected_coordinates = TriState.UNSET

        self.cache_types: set[CacheType] = set()
        self.cache_sizes: set[CacheSize] = set()
        self.cache_attributes: set[CacheAttribute] = set()

        self.hidden_by: str | None = None
        self.not_found_by: list[str] = []
        self.found_by: list[str] = []
        self.difficulty: str | None = None
        self.terrain: str | None = None
        self.difficulty_terrain_combis: str | None = None
        self.placed_from: str | None = None
        self.placed_to: str | None = None
        self.keywords: str | None = None
        self.min_favorite_points = -1

        self.deliver_last_found_date_of_found_by = True

        self.sort = SortType.DISTANCE
        self.sort_asc = True

        self.skip = 0
        self.take = int(APIConstants.DEFAULT_SEARCH_TAKE)

    # --- paging / sort ---

    def set_page(self, take: int, skip: int) -> "SearchQuery":
        self.take = take
        self.skip = skip
        return self

    def set_sort(self, sort: SortType, sort_asc: bool = True) -> "SearchQuery":
        self.sort = sort
        self.sort_asc = sort_asc
        return self

    # --- area ---

    def set_box(self, box: Viewport | None) -> "SearchQuery":
        """Area to search in."""
        self.box = box
        return self

    def set_origin(self, origin: Geopoint | None) -> "SearchQuery":
        """Starting point and reference for distance sort. Does not filter the result."""
        self.origin = origin
        return self

    # --- set filters ---

    def add_cache_types(self, cache_types: Iterable[CacheType]) -> "SearchQuery":
        self.cache_types.update(cache_types)
        return self

    def add_cache_sizes(self, cache_sizes: Iterable[CacheSize]) -> "SearchQuery":
        self.cache_sizes.update(cache_sizes)
        return self

    def add_cache_attributes(self, *attributes: CacheAttribute) -> "SearchQuery":
        """Only positive attributes can be filtered for."""
        self.cache_attributes.update(attributes)
        return self

    # --- status filters ---

    def set_status_own(self, value: TriState | bool | None) -> "SearchQuery":
        """TRUE shows only own caches, FALSE hides them. Premium members only."""
        self.status_own = _as_tri_state(value)
        return self

    def set_status_found(self, value: TriState | bool | None) -> "SearchQuery":
        """TRUE shows only found caches, FALSE hides them. Premium members only."""
        self.status_found = _as_tri_state(value)
        return self

    def set_status_membership(self, value: TriState | bool | None) -> "SearchQuery":
        """TRUE shows only basic caches, FALSE only premium caches."""
        self.status_membership = _as_tri_state(value)
        return self

    def set_status_enabled(self, value: TriState | bool | None) -> "SearchQuery":
        """TRUE shows only enabled caches, FALSE only disabled ones."""
        self.status_enabled = _as_tri_state(value)
        return self

    def set_status_corrected_coordinates(self, value: TriState | bool | None) -> "SearchQuery":
        """TRUE shows only caches with original coordinates, FALSE only corrected ones."""
        self.status_corrected_coordinates = _as_tri_state(value)
        return self

    # --- user filters ---

    def set_hidden_by(self, hidden_by: str | None) -> "SearchQuery":
        """Exact owner name; case must match."""
        self.hidden_by = hidden_by
        return self

    def add_not_found_by(self, user_name: str) -> "SearchQuery":
        """Exact user name, case-insensitive."""
        self.not_found_by.append(user_name)
        return self

    def add_found_by(self, user_name: str) -> "SearchQuery":
        """Exact user name, case-insensitive."""
        self.found_by.append(user_name)
        return self

    def set_deliver_last_found_date_of_found_by(self, deliver: bool) -> "SearchQuery":
        """With exactly one found-by name, report that user's find date as last found date."""
        self.deliver_last_found_date_of_found_by = deliver
        return self

    # --- value filters ---

    def set_min_favorite_points(self, min_favorite_points: int) -> "SearchQuery":
        self.min_favorite_points = min_favorite_points
        return self

    def set_difficulty(self, p_from: float | None, p_to: float | None) -> "SearchQuery":
        self.difficulty = get_range_string(p_from, p_to)
        return self

    def set_terrain(self, p_from: float | None, p_to: float | None) -> "SearchQuery":
        self.terrain = get_range_string(p_from, p_to)
        return self

    def set_difficulty_terrain_combis(self, combis: Iterable[tuple[float, float]]) -> "SearchQuery":
        """Restrict to the given (difficulty, terrain) pairs, e.g. ``m=1.0-4.5,2.5-4.5``."""
        self.difficulty_terrain_combis = ",".join(f"{_format_rating(d)}-{_format_rating(t)}" for d, t in combis)
        return self

    def set_placement_date(self, date_from: date | None, date_to: date | None) -> "SearchQuery":
        """Filter by placement day.

        The service treats "before" and "after" as exclusive, so open-ended
        bounds are moved out by one day. A closed interval is inclusive.
        """
        if date_from is None and date_to is None:
            self.placed_from = None
            self.placed_to = None
        elif date_from is None:
            self.placed_from = None
            self.placed_to = (date_to + ONE_DAY).strftime(PARAM_DATE_FORMAT)
        elif date_to is None:
            self.placed_from = (date_from - ONE_DAY).strftime(PARAM_DATE_FORMAT)
            self.placed_to = None
        else:
            low, high = sorted((date_from, date_to))
            self.placed_from = low.strftime(PARAM_DATE_FORMAT)
            self.placed_to = high.strftime(PARAM_DATE_FORMAT)
        return self

    def set_keywords(self, keywords: str | None) -> "SearchQuery":
        """Whole words contained in the cache name, in order, case-insensitive."""
        self.keywords = keywords
        return self

    # --- derived ---

    def resolve_distance_origin(self, current_location: Geopoint | None = None) -> Geopoint | None:
        """Reference point for distance: explicit origin, else box center, else current location."""
        if self.origin is not None:
            return self.origin
        if self.box is not None:
            return self.box.center
        return current_location

    def fill_search_data(self) -> SearchFilterData:
        return SearchFilterData(found_by=tuple(self.found_by), not_found_by=tuple(self.not_found_by))

    def build(self, current_location: Geopoint | None = None) -> list[tuple[str, str]]:
        """Encode the query into wire parameters.

        Raises:
            DegenerateViewportError: If the box collapses to a single point

        """
        params: dict[str, str | list[str]] = {}

        if self.box is not None:
            if self.box.is_just_a_dot:
                raise DegenerateViewportError(self.box)
            params["box"] = self.box.to_param()
            # overridden below if an origin is set explicitly
            params["origin"] = self.box.center.to_param()

        if self.origin is not None:
            params["origin"] = self.origin.to_param()

        if self.cache_types:
            params["ct"] = ",".join(ct.wpt_type_id for ct in _ordered(self.cache_types, CacheType))

        size_ids = [str(i) for cs in _ordered(self.cache_sizes, CacheSize) for i in cs.gc_ids]
        if size_ids:
            params["cs"] = ",".join(size_ids)

        if self.cache_attributes:
            params["att"] = ",".join(str(a.gc_id) for a in _ordered(self.cache_attributes, CacheAttribute))

        for key, value in (
            ("ho", self.status_own),
            ("hf", self.status_found),
            ("sp", self.status_membership),
            ("sd", self.status_enabled),
            ("cc", self.status_corrected_coordinates),
        ):
            param = _tri_state_param(value)
            if param is not None:
                params[key] = param

        if self.hidden_by is not None:
            params["hb"] = self.hidden_by
        if self.not_found_by:
            params["nfb"] = list(self.not_found_by)
        if self.found_by:
            params["fb"] = list(self.found_by)

        if self.min_favorite_points > 0:
            params["fp"] = str(self.min_favorite_points)

        if self.difficulty is not None:
            params["d"] = self.difficulty
        if self.terrain is not None:
            params["t"] = self.terrain
        if self.difficulty_terrain_combis:
            params["m"] = self.difficulty_terrain_combis

        if self.placed_from is not None or self.placed_to is not None:
            if self.placed_from is None:
                params["pbd"] = self.placed_to
            elif self.placed_to is None:
                params["pad"] = self.placed_from
            else:
                params["psd"] = self.placed_from
                params["ped"] = self.placed_to

        if self.keywords is not None:
            params["cn"] = self.keywords

        if self.deliver_last_found_date_of_found_by and len(self.found_by) == 1:
            params["properties"] = "callernote"

        params["take"] = str(self.take)
        params["skip"] = str(self.skip)

        params["sort"] = self.sort.keyword
        if self.sort is SortType.DISTANCE:
            d_origin = self.resolve_distance_origin(current_location)
            if d_origin is not None:
                params["dorigin"] = d_origin.to_param()
            else:
                logger.warning("Distance sort requested but no origin is resolvable; omitting dorigin")
        params["asc"] = "true" if self.sort_asc else "false"

        params["app"] = APP_IDENTIFIER

        return [
            (key, item)
            for key, value in params.items()
            for item in (value if isinstance(value, list) else [value])
        ]


def _as_tri_state(value: TriState | bool | None) -> TriState:
    return value if isinstance(value, TriState) else TriState.of(value)
