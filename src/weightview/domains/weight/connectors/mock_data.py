"""Mock weight readings for development and demos.

The readings describe a median adult drifting slowly downward, spread
evenly over the part of the current local day that has already elapsed so
they always land inside the readings window.
"""

from __future__ import annotations

from datetime import datetime

from weightview.domains.weight.domain_logic.local_day import start_of_local_day
from weightview.domains.weight.domain_logic.models import WeightSample

MOCK_WEIGHTS_KG = [72.8, 72.6, 72.5]


def get_mock_readings(now: datetime) -> list[WeightSample]:
    """Return unsaved mock samples between local midnight and ``now``.

    Args:
        now: Aware "current time".
    """
    start_of_day = start_of_local_day(now)
    elapsed = now - start_of_day
    slots = len(MOCK_WEIGHTS_KG) + 1
    return [
        WeightSample(
            id=None,
            value_kg=value,
            time=(start_of_day + elapsed * (i + 1) / slots).replace(microsecond=0),
        )
        for i, value in enumerate(MOCK_WEIGHTS_KG)
    ]
