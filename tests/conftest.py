"""Shared test fixtures for Weightview tests."""

from __future__ import annotations

import sys
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo

import pytest

# ---------------------------------------------------------------------------
# Test hermeticity
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def _force_hermetic_test_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ENCRYPTION_KEY", "")
    monkeypatch.setenv("STORE_BACKEND", "memory")
    monkeypatch.setenv("SEED_MOCK_READINGS", "false")
    monkeypatch.setenv("AUTO_GRANT_PERMISSIONS", "true")

# Allow running tests without `pip install -e .` by making `src/` importable.
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_SRC_DIR = _PROJECT_ROOT / "src"
if str(_SRC_DIR) not in sys.path:
    sys.path.insert(0, str(_SRC_DIR))

from weightview.domains.weight.connectors.memory_store import InMemoryReadingsStore  # noqa: E402
from weightview.domains.weight.connectors.permissions import StaticPermissionGate  # noqa: E402
from weightview.domains.weight.domain_logic.models import (  # noqa: E402
    REQUIRED_CAPABILITIES,
    WeightSample,
)


# ---------------------------------------------------------------------------
# Time
# ---------------------------------------------------------------------------

# Mid-afternoon on a UTC+2 wall clock (no DST in this zone), with sub-second noise
LOCAL_ZONE = ZoneInfo("Africa/Johannesburg")
FIXED_NOW = datetime(2026, 3, 10, 15, 30, 45, 123456, tzinfo=LOCAL_ZONE)
START_OF_DAY = datetime(2026, 3, 10, tzinfo=LOCAL_ZONE)


def fixed_clock() -> datetime:
    return FIXED_NOW


def sample_at(hour: int, value_kg: float, *, sample_id: str | None = None, day_offset: int = 0) -> WeightSample:
    """A sample on the fixed test day at ``hour`` o'clock local time."""
    return WeightSample(
        id=sample_id,
        value_kg=value_kg,
        time=START_OF_DAY + timedelta(days=day_offset, hours=hour),
    )


# ---------------------------------------------------------------------------
# Fake collaborators
# ---------------------------------------------------------------------------

class RecordingStore:
    """In-memory ReadingsStore that records calls and can inject faults.

    ``faults`` maps a method name to the exception it should raise.
    """

    def __init__(self, samples: list[WeightSample] | None = None) -> None:
        self._inner = InMemoryReadingsStore(samples)
        self.calls: list[tuple[str, Any]] = []
        self.faults: dict[str, BaseException] = {}

    def _enter(self, method: str, *args: Any) -> None:
        self.calls.append((method, args))
        fault = self.faults.get(method)
        if fault is not None:
            raise fault

    def call_names(self) -> list[str]:
        return [name for name, _ in self.calls]

    async def read(self, start, end):
        self._enter("read", start, end)
        return await self._inner.read(start, end)

    async def write(self, sample):
        self._enter("write", sample)
        return await self._inner.write(sample)

    async def delete(self, sample_id):
        self._enter("delete", sample_id)
        await self._inner.delete(sample_id)

    async def weekly_average(self, start, end):
        self._enter("weekly_average", start, end)
        return await self._inner.weekly_average(start, end)


class FailingGate:
    """PermissionGate whose checks raise ``fault``."""

    def __init__(self, fault: BaseException) -> None:
        self.fault = fault

    async def has_all(self, capabilities):
        raise self.fault

    async def request(self, capabilities):
        raise self.fault


@pytest.fixture
def granted_gate() -> StaticPermissionGate:
    return StaticPermissionGate(REQUIRED_CAPABILITIES)


@pytest.fixture
def denied_gate() -> StaticPermissionGate:
    return StaticPermissionGate(grant_on_request=False)


# ---------------------------------------------------------------------------
# In-memory storage fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def readings_db():
    """Create an in-memory ReadingsDatabase for testing."""
    from weightview.core.storage.database import ReadingsDatabase

    db = ReadingsDatabase(":memory:")
    db.initialize()
    yield db
    db.close()


@pytest.fixture
def field_encryptor():
    """Create a FieldEncryptor with a fresh key."""
    from weightview.core.storage.encryption import FieldEncryptor

    return FieldEncryptor(FieldEncryptor.generate_key())


@pytest.fixture
def weight_repository(readings_db, field_encryptor):
    """Create a WeightRepository backed by in-memory SQLite."""
    from weightview.core.storage.repository import WeightRepository

    return WeightRepository(readings_db, field_encryptor)


@pytest.fixture
def audit_logger(readings_db):
    """Create an AuditLogger backed by in-memory SQLite."""
    from weightview.core.audit.logger import AuditLogger

    return AuditLogger(readings_db)
