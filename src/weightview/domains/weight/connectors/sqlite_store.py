"""ReadingsStore backed by the encrypted SQLite data bank.

Storage-layer exceptions are translated into the connector fault taxonomy
so the controller sees the same failure types regardless of backend.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from weightview.core.storage.models import StoredWeightSample
from weightview.core.storage.repository import WeightRepository
from weightview.domains.weight.connectors import SampleNotFoundError
from weightview.domains.weight.connectors.storage_errors import translate_storage_errors
from weightview.domains.weight.domain_logic.models import WeightSample


def _to_domain(stored: StoredWeightSample) -> WeightSample:
    zone = timezone(timedelta(seconds=stored.zone_offset_seconds))
    return WeightSample(
        id=stored.id,
        value_kg=stored.value_kg,
        time=datetime.fromisoformat(stored.time_utc).astimezone(zone),
    )


class SQLiteReadingsStore:
    """ReadingsStore over :class:`WeightRepository`."""

    def __init__(self, repository: WeightRepository) -> None:
        self._repo = repository

    async def read(self, start: datetime, end: datetime) -> list[WeightSample]:
        with translate_storage_errors("read"):
            stored = self._repo.get_samples(since=start, until=end)
        return [_to_domain(s) for s in stored]

    async def write(self, sample: WeightSample) -> WeightSample:
        with translate_storage_errors("write"):
            sample_id = self._repo.save_sample(
                sample.value_kg, sample.time, sample_id=sample.id
            )
        return WeightSample(id=sample_id, value_kg=sample.value_kg, time=sample.time)

    async def delete(self, sample_id: str) -> None:
        with translate_storage_errors("delete"):
            deleted = self._repo.delete_sample(sample_id)
        if not deleted:
            raise SampleNotFoundError(sample_id)

    async def weekly_average(self, start: datetime, end: datetime) -> float | None:
        with translate_storage_errors("weekly_average"):
            return self._repo.average_weight(since=start, until=end)

    def count(self) -> int:
        return self._repo.count_samples()
