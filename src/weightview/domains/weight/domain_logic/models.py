"""Weight reading models, UI state variants and capability constants."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Union


# ---------------------------------------------------------------------------
# Capabilities
# ---------------------------------------------------------------------------

READ_WEIGHT = "read:weight"
WRITE_WEIGHT = "write:weight"

# Everything the readings screen needs before it touches the store
REQUIRED_CAPABILITIES = frozenset({READ_WEIGHT, WRITE_WEIGHT})

# Largest value the input surface lets through (kilograms)
MAX_WEIGHT_KG = 1000.0

# ProjectedWeight value meaning "not enough readings to project"
NO_PROJECTION = 0.0


# ---------------------------------------------------------------------------
# Readings
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class WeightSample:
    """A single body-weight measurement.

    ``id`` is None until the store assigns one on write. ``time`` is always
    timezone-aware; its offset is the wall clock the reading was taken on.
    """

    id: str | None
    value_kg: float
    time: datetime


# ---------------------------------------------------------------------------
# UI state
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Uninitialized:
    """No command has completed yet."""


@dataclass(frozen=True)
class Done:
    """The last command completed; data fields are authoritative."""


def _new_token() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True)
class Error:
    """The last command failed with ``cause``.

    ``token`` is unique per occurrence so a re-render of the same failure
    does not raise a second notification.
    """

    cause: BaseException
    token: str = field(default_factory=_new_token)


UiState = Union[Uninitialized, Done, Error]

UNINITIALIZED = Uninitialized()
DONE = Done()
