"""View-boundary render policy for the readings screen.

Turns controller state into the JSON document the MCP tools return:

* an absent weekly average renders as ``0.0``;
* the projected weight is omitted while it holds the "no projection"
  sentinel;
* an ``Error`` state yields a notification only the first time its token
  is rendered.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from weightview.domains.weight.domain_logic.models import (
    NO_PROJECTION,
    Done,
    Error,
    UiState,
    WeightSample,
)

if TYPE_CHECKING:
    from weightview.domains.weight.controller import ReadingsController


class NotificationTracker:
    """Remembers the token of the last error shown.

    The controller holds one state at a time and every failure gets a
    fresh token, so the last shown token is all that needs remembering.
    """

    def __init__(self) -> None:
        self._last_token: str | None = None

    def take(self, state: UiState) -> str | None:
        """Return a message for a not-yet-shown ``Error``, else None."""
        if not isinstance(state, Error) or state.token == self._last_token:
            return None
        self._last_token = state.token
        return str(state.cause) or type(state.cause).__name__


def status_label(state: UiState) -> str:
    if isinstance(state, Error):
        return "error"
    if isinstance(state, Done):
        return "done"
    return "uninitialized"


def render_weekly_average(value: float | None) -> float:
    return 0.0 if value is None else round(value, 2)


def render_sample(sample: WeightSample) -> dict[str, Any]:
    return {
        "id": sample.id,
        "weight_kg": sample.value_kg,
        "time": sample.time.isoformat(),
    }


def render_screen(
    controller: ReadingsController,
    notifications: NotificationTracker,
) -> dict[str, Any]:
    """Snapshot the controller's observables as a JSON-ready dict."""
    state = controller.ui_state.value
    screen: dict[str, Any] = {
        "status": status_label(state),
        "permissions_granted": controller.permissions_granted.value,
        "readings": [render_sample(s) for s in controller.readings.value],
        "weekly_average_kg": render_weekly_average(controller.weekly_average.value),
    }

    projected = controller.projected_weight.value
    if projected != NO_PROJECTION:
        screen["projected_weight_kg"] = round(projected, 2)

    if not screen["permissions_granted"]:
        screen["permissions_required"] = sorted(controller.capabilities)

    message = notifications.take(state)
    if message is not None:
        screen["notification"] = {
            "error_type": type(state.cause).__name__,
            "message": message,
            "token": state.token,
        }
    return screen
