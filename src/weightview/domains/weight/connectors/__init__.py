"""Readings connectors — the store and permission interfaces the controller consumes."""

from __future__ import annotations

from collections.abc import Set
from datetime import datetime
from typing import Protocol, runtime_checkable

from weightview.domains.weight.domain_logic.models import WeightSample


# ---------------------------------------------------------------------------
# Fault taxonomy
# ---------------------------------------------------------------------------

class StoreFault(Exception):
    """Base class for failures raised by a ReadingsStore or PermissionGate."""


class RemoteCallFault(StoreFault):
    """The backing service rejected or crashed on the request."""


class AccessDeniedFault(StoreFault, PermissionError):
    """Access was refused mid-operation, after the permission pre-check."""


class StoreIOFault(StoreFault, OSError):
    """Communication with the backing store failed."""


class IllegalStoreStateFault(StoreFault, RuntimeError):
    """The store is in a state that cannot serve the request."""


class SampleNotFoundError(IllegalStoreStateFault):
    """No sample with the requested ID exists in the store."""

    def __init__(self, sample_id: str) -> None:
        super().__init__(f"No weight sample with id {sample_id!r}")
        self.sample_id = sample_id


# ---------------------------------------------------------------------------
# Interfaces
# ---------------------------------------------------------------------------

@runtime_checkable
class ReadingsStore(Protocol):
    """Async access to dated weight samples.

    Every method may raise a :class:`StoreFault` (or an ``OSError``).
    """

    async def read(self, start: datetime, end: datetime) -> list[WeightSample]:
        """Samples with ``start <= time <= end``, oldest first."""
        ...

    async def write(self, sample: WeightSample) -> WeightSample:
        """Persist ``sample`` and return it with its assigned ID."""
        ...

    async def delete(self, sample_id: str) -> None:
        """Remove a sample; raises :class:`SampleNotFoundError` if absent."""
        ...

    async def weekly_average(self, start: datetime, end: datetime) -> float | None:
        """Mean weight over ``start <= time < end``, or None with no samples."""
        ...


@runtime_checkable
class PermissionGate(Protocol):
    """Reports and requests the capabilities the readings screen needs."""

    async def has_all(self, capabilities: Set[str]) -> bool:
        """True only if every capability in ``capabilities`` is granted."""
        ...

    async def request(self, capabilities: Set[str]) -> bool:
        """Prompt for ``capabilities``; return whether all are now granted."""
        ...
