"""Registration counts and answer normalization."""

from collections.abc import Callable, Iterable, Mapping
from typing import Any

from app.core.constants import AFFIRMATIVE_ANSWER, NEGATIVE_ANSWER, UNDECIDED_ANSWER
from app.reporting.schemas.dashboard import FinancingStatus, RegistrationSummary

FlagExtractor = Callable[[Mapping[str, Any]], bool]


def is_affirmative(value: Any, affirmative: str = AFFIRMATIVE_ANSWER) -> bool:
    """Read a yes/no answer stored either as a boolean or as free text.

    Booleans pass through, strings match ``affirmative`` case-insensitively,
    anything else (None, numbers, lists) counts as no.
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() == affirmative.lower()
    return False


def make_flag_extractor(field: str, affirmative: str = AFFIRMATIVE_ANSWER) -> FlagExtractor:
    """Build an extractor that reads ``field`` from a record as a flag."""

    def extract(record: Mapping[str, Any]) -> bool:
        return is_affirmative(record.get(field), affirmative)

    return extract


nautical_flag = make_flag_extractor("nautical")


def summarize(
    records: Iterable[Mapping[str, Any]], flag_extractor: FlagExtractor
) -> RegistrationSummary:
    """Count records and the subset for which the flag is set.

    Args:
        records: Raw registration records.
        flag_extractor: Decides per record whether it is flagged.

    Returns:
        RegistrationSummary with total and flagged counts.
    """
    total = 0
    flagged = 0
    for record in records:
        total += 1
        if flag_extractor(record):
            flagged += 1
    return RegistrationSummary(total=total, flagged_count=flagged)


def financing_status(value: Any) -> FinancingStatus:
    if isinstance(value, str):
        answer = value.strip().lower()
        if answer == AFFIRMATIVE_ANSWER:
            return FinancingStatus.YES
        if answer == NEGATIVE_ANSWER:
            return FinancingStatus.NO
        if answer == UNDECIDED_ANSWER:
            return FinancingStatus.MAYBE
    return FinancingStatus.MAYBE
