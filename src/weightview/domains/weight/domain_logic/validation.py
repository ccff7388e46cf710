"""Acceptance policy for weight values typed into the input surface.

The controller does not re-validate; anything submitted to
``ReadingsController.add_reading`` must have passed this check first.
"""

from __future__ import annotations

import math

from weightview.domains.weight.domain_logic.models import MAX_WEIGHT_KG


class InvalidWeightInput(ValueError):
    """Raised when typed text is not an acceptable weight."""


def validate_weight_input(text: str) -> float:
    """Parse ``text`` as a weight in kilograms.

    Accepts any finite real number up to and including ``MAX_WEIGHT_KG``.

    Raises:
        InvalidWeightInput: If the text does not parse, is not finite, or
            exceeds the maximum.
    """
    try:
        value = float(text.strip())
    except (AttributeError, ValueError) as exc:
        raise InvalidWeightInput(f"Not a number: {text!r}") from exc
    if not math.isfinite(value):
        raise InvalidWeightInput(f"Weight must be a finite number, got {text!r}")
    if value > MAX_WEIGHT_KG:
        raise InvalidWeightInput(
            f"Weight must be at most {MAX_WEIGHT_KG:g} kg, got {value:g}"
        )
    return value


def is_valid_weight_input(text: str) -> bool:
    """Whether submission should be enabled for ``text``."""
    try:
        validate_weight_input(text)
    except InvalidWeightInput:
        return False
    return True
