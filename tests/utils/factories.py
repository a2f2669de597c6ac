from datetime import datetime
from typing import Any

import httpx
from faker import Faker

fake = Faker("nl_NL")


def create_customer_factory(
    created_at: datetime | str,
    customer_id: int | None = None,
    nautical: bool | str | None = None,
    financing: str | None = None,
    favourites: list[int | str] | None = None,
) -> dict[str, Any]:
    """
    Factory function to create a records-store customer row.

    Args:
        created_at: Registration timestamp (naive values are local time)
        customer_id: Row id (generates random if None)
        nautical: Raw nautical answer; omitted from the row if None
        financing: Raw financing answer ("ja", "nee", "wellicht")
        favourites: Favourite unit ids

    Returns:
        Customer row as the records store returns it
    """
    row: dict[str, Any] = {
        "id": customer_id if customer_id is not None else fake.random_int(min=1, max=99999),
        "first_name": fake.first_name(),
        "last_name": fake.last_name(),
        "email": fake.email(),
        "phone_number": fake.phone_number(),
        "created_at": created_at.isoformat() if isinstance(created_at, datetime) else created_at,
        "financing": financing,
        "favourites": favourites or [],
    }
    if nautical is not None:
        row["nautical"] = nautical
    return row


def create_pinned_units_factory(
    created_at: datetime | str, *unit_ids: str
) -> list[dict[str, Any]]:
    """Create one pinned_units row per unit id, all pinned at ``created_at``."""
    timestamp = created_at.isoformat() if isinstance(created_at, datetime) else created_at
    return [{"unit_id": unit_id, "created_at": timestamp} for unit_id in unit_ids]


def records_response(items: list[dict[str, Any]], status_code: int = 200) -> httpx.Response:
    return httpx.Response(status_code, json={"data": items})


def aggregate_response(**values: Any) -> httpx.Response:
    return httpx.Response(
        200, json={"results": {name: {"value": value} for name, value in values.items()}}
    )


def rows_response(rows: list[dict[str, Any]]) -> httpx.Response:
    return httpx.Response(200, json={"results": rows})
