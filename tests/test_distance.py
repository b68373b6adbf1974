"""Tests for distance inference of caches without coordinates."""

import pytest

from gcweb.core.distance import infer_missing_distances
from gcweb.core.geo import Geopoint
from gcweb.core.query import SearchQuery
from gcweb.models.cache import NormalizedCacheRecord
from gcweb.models.enums import SortType

ORIGIN = Geopoint(latitude=0.0, longitude=0.0)


def cache(code: str, longitude: float | None = None) -> NormalizedCacheRecord:
    coords = None if longitude is None else Geopoint(latitude=0.0, longitude=longitude)
    return NormalizedCacheRecord(geocode=code, coords=coords)


def distance_sorted(ascending: bool = True) -> SearchQuery:
    return SearchQuery().set_sort(SortType.DISTANCE, ascending)


class TestInferMissingDistances:
    def test_gap_gets_midpoint_of_neighbours(self):
        near, hidden, far = cache("GC1", 0.1), cache("GC2"), cache("GC3", 0.2)

        infer_missing_distances([near, hidden, far], distance_sorted(), ORIGIN)

        assert near.distance == pytest.approx(ORIGIN.distance_to(near.coords))
        assert far.distance == pytest.approx(ORIGIN.distance_to(far.coords))
        assert hidden.distance == pytest.approx((near.distance + far.distance) / 2)

    def test_midpoint_between_ten_and_twenty(self, monkeypatch):
        distances = {0.1: 10.0, 0.2: 20.0}
        monkeypatch.setattr(Geopoint, "distance_to", lambda self, other: distances[other.longitude])
        records = [cache("GC1", 0.1), cache("GC2"), cache("GC3", 0.2)]

        infer_missing_distances(records, distance_sorted(), ORIGIN)

        assert [r.distance for r in records] == [10.0, 15.0, 20.0]

    def test_leading_gap_starts_from_zero(self):
        hidden, known = cache("GC1"), cache("GC2", 0.1)

        infer_missing_distances([hidden, known], distance_sorted(), ORIGIN)

        assert hidden.distance == pytest.approx(known.distance / 2)

    def test_all_missing_get_one(self):
        records = [cache("GC1"), cache("GC2"), cache("GC3")]

        infer_missing_distances(records, distance_sorted(), ORIGIN)

        assert [r.distance for r in records] == [1.0, 1.0, 1.0]

    def test_trailing_missing_get_last_plus_one(self):
        known, hidden = cache("GC1", 0.1), cache("GC2")

        infer_missing_distances([known, hidden], distance_sorted(), ORIGIN)

        assert hidden.distance == pytest.approx(known.distance + 1)

    def test_descending_order_walks_from_the_end(self):
        hidden, far, near = cache("GC1"), cache("GC2", 0.2), cache("GC3", 0.1)

        infer_missing_distances([hidden, far, near], distance_sorted(ascending=False), ORIGIN)

        # first in descending order means farthest: beyond the last known distance
        assert hidden.distance == pytest.approx(far.distance + 1)

    def test_other_sorts_are_left_alone(self):
        records = [cache("GC1", 0.1), cache("GC2")]

        infer_missing_distances(records, SearchQuery().set_sort(SortType.NAME), ORIGIN)

        assert [r.distance for r in records] == [None, None]

    def test_no_origin_is_a_no_op(self):
        records = [cache("GC1", 0.1), cache("GC2")]

        infer_missing_distances(records, distance_sorted(), None)

        assert [r.distance for r in records] == [None, None]

    def test_empty_input(self):
        infer_missing_distances([], distance_sorted(), ORIGIN)
