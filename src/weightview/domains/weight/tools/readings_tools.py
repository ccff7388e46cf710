"""MCP tools for the weight readings screen.

Each tool forwards one user intent to the ReadingsController and returns
the rendered screen state. Weight text is validated here, before it ever
reaches the controller.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING

from fastmcp import Context, FastMCP

from weightview.domains.weight.domain_logic.validation import (
    InvalidWeightInput,
    validate_weight_input,
)
from weightview.domains.weight.tools.rendering import NotificationTracker, render_screen

if TYPE_CHECKING:
    from weightview.domains.weight.controller import ReadingsController

logger = logging.getLogger(__name__)


def register_readings_tools(
    mcp: FastMCP,
    controller: ReadingsController,
    notifications: NotificationTracker | None = None,
) -> None:
    """Register the readings screen tools on the MCP server."""
    notifications = notifications or NotificationTracker()

    def _screen() -> str:
        return json.dumps(render_screen(controller, notifications), indent=2)

    @mcp.tool
    async def load_weight_readings(ctx: Context) -> str:
        """Show today's weight readings, the weekly average and the projected weight.

        The projected weight only appears once more than two readings exist
        today. If ``permissions_granted`` is false, call
        ``request_weight_permissions`` first.
        """
        await controller.scope.launch(controller.initial_load())
        return _screen()

    @mcp.tool
    async def add_weight_reading(ctx: Context, weight: str) -> str:
        """Record a body-weight reading taken now.

        Args:
            weight: Weight in kilograms, e.g. '72.4'. Must be a number no
                greater than 1000.
        """
        try:
            value_kg = validate_weight_input(weight)
        except InvalidWeightInput as exc:
            return json.dumps({
                "status": "error",
                "message": f"Please enter a valid weight: {exc}",
            })

        await controller.scope.launch(controller.add_reading(value_kg))
        return _screen()

    @mcp.tool
    async def delete_weight_reading(ctx: Context, sample_id: str) -> str:
        """Delete one of today's weight readings.

        Args:
            sample_id: The ``id`` of a reading returned by another tool.
        """
        await controller.scope.launch(controller.delete_reading(sample_id))
        return _screen()

    @mcp.tool
    async def request_weight_permissions(ctx: Context) -> str:
        """Ask for read and write access to weight data, then reload."""
        await controller.scope.launch(controller.request_permissions())
        return _screen()
