"""In-memory ReadingsStore used for demos and tests. Always available."""

from __future__ import annotations

import uuid
from dataclasses import replace
from datetime import datetime

from weightview.domains.weight.connectors import SampleNotFoundError
from weightview.domains.weight.domain_logic.models import WeightSample


class InMemoryReadingsStore:
    """Keeps samples in a dict keyed by ID; nothing survives the process."""

    def __init__(self, samples: list[WeightSample] | None = None) -> None:
        self._samples: dict[str, WeightSample] = {}
        for sample in samples or []:
            self._put(sample)

    def _put(self, sample: WeightSample) -> WeightSample:
        stored = sample if sample.id else replace(sample, id=str(uuid.uuid4()))
        self._samples[stored.id] = stored
        return stored

    async def read(self, start: datetime, end: datetime) -> list[WeightSample]:
        matching = [s for s in self._samples.values() if start <= s.time <= end]
        return sorted(matching, key=lambda s: s.time)

    async def write(self, sample: WeightSample) -> WeightSample:
        return self._put(sample)

    async def delete(self, sample_id: str) -> None:
        if self._samples.pop(sample_id, None) is None:
            raise SampleNotFoundError(sample_id)

    async def weekly_average(self, start: datetime, end: datetime) -> float | None:
        values = [s.value_kg for s in self._samples.values() if start <= s.time < end]
        if not values:
            return None
        return sum(values) / len(values)

    def __len__(self) -> int:
        return len(self._samples)
