"""Data models for the readings persistence layer."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class StoredWeightSample:
    """A weight sample as persisted in the data bank.

    The value is stored encrypted; ``time_utc`` is kept in clear text
    for indexed range queries.
    """

    id: str
    time_utc: str  # ISO 8601, always UTC, microsecond precision
    zone_offset_seconds: int
    value_kg: float
    created_at: str = ""
