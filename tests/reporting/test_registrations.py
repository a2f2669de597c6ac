"""Tests for registration counting."""

import pytest

from app.reporting.schemas.dashboard import FinancingStatus
from app.reporting.services.registrations import (
    financing_status,
    is_affirmative,
    make_flag_extractor,
    nautical_flag,
    summarize,
)


class TestIsAffirmative:
    """Tests for is_affirmative."""

    @pytest.mark.parametrize("value", [True, "ja", "JA", "Ja", " ja "])
    def test_affirmative_values(self, value):
        assert is_affirmative(value) is True

    @pytest.mark.parametrize("value", [False, "nee", "wellicht", "", None, 1, ["ja"]])
    def test_non_affirmative_values(self, value):
        assert is_affirmative(value) is False

    def test_custom_affirmative_word(self):
        assert is_affirmative("Yes", affirmative="yes") is True
        assert is_affirmative("ja", affirmative="yes") is False


class TestSummarize:
    """Tests for summarize."""

    def test_counts_total_and_flagged(self):
        records = [
            {"nautical": True},
            {"nautical": "ja"},
            {"nautical": "JA"},
            {"nautical": False},
            {"nautical": "nee"},
            {"nautical": None},
            {},
        ]

        summary = summarize(records, nautical_flag)

        assert summary.total == 7
        assert summary.flagged_count == 3

    def test_empty_records(self):
        summary = summarize([], nautical_flag)

        assert summary.total == 0
        assert summary.flagged_count == 0

    def test_flagged_never_exceeds_total(self):
        records = [{"nautical": "ja"}] * 4

        summary = summarize(records, nautical_flag)

        assert summary.flagged_count <= summary.total

    def test_extractor_for_other_field(self):
        extractor = make_flag_extractor("newsletter")

        summary = summarize([{"newsletter": "ja"}, {"nautical": "ja"}], extractor)

        assert summary.flagged_count == 1

    def test_accepts_generator(self):
        summary = summarize(({"nautical": "ja"} for _ in range(3)), nautical_flag)

        assert summary.total == 3


class TestFinancingStatus:
    """Tests for financing_status."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("ja", FinancingStatus.YES),
            ("Nee", FinancingStatus.NO),
            ("wellicht", FinancingStatus.MAYBE),
            (None, FinancingStatus.MAYBE),
            ("misschien", FinancingStatus.MAYBE),
        ],
    )
    def test_maps_answers(self, value, expected):
        assert financing_status(value) is expected
