"""Short-horizon weight projection from the loaded readings window."""

from __future__ import annotations

from collections.abc import Sequence

from weightview.domains.weight.domain_logic.models import NO_PROJECTION, WeightSample


def project_weight(samples: Sequence[WeightSample]) -> float:
    """Extrapolate one position past the last two readings.

    Positions are indices into ``samples`` (not timestamps). With ``n``
    samples the line through ``(n-2, y1)`` and ``(n-1, y2)`` is evaluated
    at ``x = n``::

        y = y1 + (x - x1) * ((y2 - y1) / (x2 - x1))

    Returns:
        The projected weight in kilograms, or ``NO_PROJECTION`` (0.0) when
        the window holds two readings or fewer.
    """
    n = len(samples)
    if n <= 2:
        return NO_PROJECTION

    x = n
    x1 = n - 2
    x2 = n - 1
    y1 = samples[x1].value_kg
    y2 = samples[x2].value_kg

    return y1 + (x - x1) * ((y2 - y1) / (x2 - x1))
