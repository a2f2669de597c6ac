"""Top-N ranking of categorical keys."""

from collections.abc import Callable, Iterable, Mapping
from typing import Any

from app.core.exceptions import ValidationError
from app.reporting.schemas.dashboard import RankedEntry


def unit_key(item: Mapping[str, Any]) -> Any:
    return item.get("unit_id")


def aggregate(
    items: Iterable[Mapping[str, Any]],
    limit: int,
    key: Callable[[Mapping[str, Any]], Any] = unit_key,
) -> list[RankedEntry]:
    """Count occurrences per key and return the most frequent ones.

    Args:
        items: Raw records.
        limit: Maximum number of entries to return.
        key: Extracts the ranked key from a record. Empty or missing keys
            are ignored.

    Returns:
        Entries sorted by count descending; equal counts keep the order in
        which the key was first seen.
    """
    counts: dict[str, int] = {}
    for item in items:
        value = key(item)
        if value is None or value == "":
            continue
        label = str(value)
        counts[label] = counts.get(label, 0) + 1

    return rank(counts.items(), limit)


def rank(counts: Iterable[tuple[str, int]], limit: int) -> list[RankedEntry]:
    """Sort pre-aggregated ``(key, count)`` pairs and keep the top ``limit``.

    Raises:
        ValidationError: If ``limit`` is negative.
    """
    if limit < 0:
        raise ValidationError("Ranking limit must not be negative", field="limit")

    # sorted() is stable, so ties stay in encounter order
    ordered = sorted(counts, key=lambda pair: pair[1], reverse=True)
    return [RankedEntry(key=key, count=count) for key, count in ordered[:limit]]
