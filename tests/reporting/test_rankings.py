"""Tests for top-N ranking."""

import pytest

from app.core.exceptions import ValidationError
from app.reporting.services.fallbacks import fallback_payload
from app.reporting.services.rankings import aggregate, rank


def units(*ids):
    return [{"unit_id": unit_id} for unit_id in ids]


class TestAggregate:
    """Tests for aggregate."""

    def test_counts_and_orders_by_frequency(self):
        items = units("a", "b", "a", "c", "a", "b")

        entries = aggregate(items, limit=5)

        assert [(e.key, e.count) for e in entries] == [("a", 3), ("b", 2), ("c", 1)]

    def test_limit_truncates_result(self):
        items = units(*[str(i) for i in range(20)])

        assert len(aggregate(items, limit=5)) == 5

    def test_ties_keep_first_seen_order(self):
        items = units("x", "y", "z", "z", "y", "x")

        entries = aggregate(items, limit=3)

        assert [e.key for e in entries] == ["x", "y", "z"]

    def test_missing_and_empty_keys_are_ignored(self):
        items = units("a", None, "", "a") + [{"other": "field"}]

        entries = aggregate(items, limit=5)

        assert [(e.key, e.count) for e in entries] == [("a", 2)]

    def test_numeric_keys_are_stringified(self):
        entries = aggregate(units(172, 172, 9), limit=5)

        assert entries[0].key == "172"
        assert entries[0].count == 2

    def test_custom_key_extractor(self):
        items = [{"browser": "Firefox"}, {"browser": "Chrome"}, {"browser": "Chrome"}]

        entries = aggregate(items, limit=1, key=lambda item: item.get("browser"))

        assert [(e.key, e.count) for e in entries] == [("Chrome", 2)]

    def test_zero_limit_returns_nothing(self):
        assert aggregate(units("a", "b"), limit=0) == []

    def test_fewer_keys_than_limit(self):
        assert len(aggregate(units("a", "b"), limit=10)) == 2

    def test_fallback_sample_ranks_in_declared_order(self):
        entries = aggregate(fallback_payload("pinned_units"), limit=5)

        assert [(e.key, e.count) for e in entries] == [
            ("172", 4),
            ("10", 4),
            ("8", 4),
            ("165", 2),
            ("9", 2),
        ]


class TestRank:
    """Tests for rank."""

    def test_sorts_pre_aggregated_pairs(self):
        entries = rank([("mobile", 4), ("desktop", 9), ("tablet", 1)], limit=2)

        assert [(e.key, e.count) for e in entries] == [("desktop", 9), ("mobile", 4)]

    def test_negative_limit_is_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            rank([("a", 1)], limit=-1)

        assert exc_info.value.details == {"field": "limit"}
        assert exc_info.value.status_code == 400
