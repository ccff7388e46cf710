"""Readings controller — the view-model behind the weight readings screen.

Owns the screen's observable state (permission flag, UI status, today's
readings, weekly average, projected weight) and the three commands the view
sends in. Every command runs through the same permission-gated wrapper:

1. Re-check the required capabilities with the PermissionGate.
2. If they are missing, skip the store entirely and report ``Done``; the
   view renders a "request access" affordance from ``permissions_granted``.
3. Otherwise run the operation; any classified fault becomes ``Error``.

Commands are not serialized. Two commands issued together both hit the
store and both refresh; whichever refresh finishes last is what the view
shows.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Awaitable, Callable, Set
from datetime import datetime
from typing import TYPE_CHECKING, Any

from weightview.domains.weight.connectors import PermissionGate, ReadingsStore, StoreFault
from weightview.domains.weight.domain_logic.lifecycle import LifecycleScope
from weightview.domains.weight.domain_logic.local_day import start_of_local_day
from weightview.domains.weight.domain_logic.models import (
    DONE,
    NO_PROJECTION,
    REQUIRED_CAPABILITIES,
    UNINITIALIZED,
    Error,
    UiState,
    WeightSample,
)
from weightview.domains.weight.domain_logic.observable import MutableObservable, Observable
from weightview.domains.weight.domain_logic.projection import project_weight

if TYPE_CHECKING:
    from weightview.core.audit.logger import AuditLogger

logger = logging.getLogger(__name__)

# Failures the gated wrapper turns into Error. OSError covers builtin
# PermissionError and raw I/O errors from collaborators that do not use the
# StoreFault hierarchy.
HANDLED_FAULTS: tuple[type[BaseException], ...] = (StoreFault, OSError)


def local_now() -> datetime:
    return datetime.now().astimezone()


class ReadingsController:
    """Single authority for the readings screen's data and status.

    Usage::

        controller = ReadingsController(store, gate)
        controller.scope.launch(controller.initial_load())
        ...
        await controller.close()  # screen torn down
    """

    def __init__(
        self,
        store: ReadingsStore,
        permission_gate: PermissionGate,
        *,
        capabilities: Set[str] = REQUIRED_CAPABILITIES,
        clock: Callable[[], datetime] = local_now,
        scope: LifecycleScope | None = None,
        audit_logger: AuditLogger | None = None,
    ) -> None:
        self._store = store
        self._gate = permission_gate
        self._capabilities = frozenset(capabilities)
        self._clock = clock
        self._audit = audit_logger
        self.scope = scope or LifecycleScope()

        self._permissions_granted: MutableObservable[bool] = MutableObservable(False)
        self._ui_state: MutableObservable[UiState] = MutableObservable(UNINITIALIZED)
        self._readings: MutableObservable[tuple[WeightSample, ...]] = MutableObservable(())
        self._weekly_average: MutableObservable[float | None] = MutableObservable(None)
        self._projected_weight: MutableObservable[float] = MutableObservable(NO_PROJECTION)

    # ------------------------------------------------------------------
    # Observable state
    # ------------------------------------------------------------------

    @property
    def capabilities(self) -> frozenset[str]:
        return self._capabilities

    @property
    def permissions_granted(self) -> Observable[bool]:
        return self._permissions_granted.as_read_only()

    @property
    def ui_state(self) -> Observable[UiState]:
        return self._ui_state.as_read_only()

    @property
    def readings(self) -> Observable[tuple[WeightSample, ...]]:
        return self._readings.as_read_only()

    @property
    def weekly_average(self) -> Observable[float | None]:
        return self._weekly_average.as_read_only()

    @property
    def projected_weight(self) -> Observable[float]:
        return self._projected_weight.as_read_only()

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    async def initial_load(self) -> None:
        """Reload today's readings, the weekly average and the projection."""
        await self._run_gated("initial_load", self._read_weight_inputs)

    async def add_reading(self, value_kg: float) -> None:
        """Record ``value_kg`` as a reading taken now, then reload.

        ``value_kg`` must already have passed the input surface's
        validation; it is not checked again here.
        """
        async def block() -> None:
            now = self._clock().replace(microsecond=0)
            sample = WeightSample(id=None, value_kg=value_kg, time=now)
            await self._store.write(sample)
            await self._read_weight_inputs()

        await self._run_gated("add_reading", block, {"value_kg": value_kg})

    async def delete_reading(self, sample_id: str) -> None:
        """Delete the reading with ``sample_id``, then reload.

        An ID the store does not know is a failure, not a no-op.
        """
        async def block() -> None:
            await self._store.delete(sample_id)
            if self._audit is not None:
                self._audit.log_data_delete(
                    command="delete_reading", sample_id=sample_id, count=1
                )
            await self._read_weight_inputs()

        await self._run_gated("delete_reading", block, {"sample_id": sample_id})

    async def request_permissions(self) -> bool:
        """Prompt for the required capabilities, then reload.

        A gate fault is handled like a failed permission check: permission
        is reported as missing, ``ui_state`` becomes ``Error`` and no
        reload happens.

        Returns:
            Whether every required capability is granted afterwards.
        """
        started = time.monotonic()
        try:
            granted = await self._gate.request(self._capabilities)
        except HANDLED_FAULTS as exc:
            logger.warning("request_permissions failed: %s: %s", type(exc).__name__, exc)
            state = Error(exc)
            self._permissions_granted.set(False)
            self._ui_state.set(state)
            self._audit_command("request_permissions", None, False, started, state)
            return False
        self._audit_command("request_permissions", None, granted, started, DONE)
        await self.initial_load()
        return granted

    async def close(self) -> None:
        """Cancel any command still in flight (screen teardown)."""
        await self.scope.close()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _read_weight_inputs(self) -> None:
        now = self._clock()
        start_of_day = start_of_local_day(now)
        # Forward-looking: today through the next seven days
        end_of_week = start_of_local_day(now, days_ahead=7)

        readings = await self._store.read(start_of_day, now)
        self._readings.set(tuple(readings))
        self._weekly_average.set(await self._store.weekly_average(start_of_day, end_of_week))
        self._projected_weight.set(project_weight(readings))

    async def _run_gated(
        self,
        command: str,
        block: Callable[[], Awaitable[None]],
        command_input: dict[str, Any] | None = None,
    ) -> None:
        """Run ``block`` behind the permission check and fault classifier.

        Updates ``permissions_granted`` from a fresh check, then sets
        ``ui_state`` to ``Done`` or ``Error``. Cancellation propagates
        without touching state.
        """
        started = time.monotonic()
        granted = False
        checked = False
        state: UiState
        try:
            granted = await self._gate.has_all(self._capabilities)
            checked = True
            self._permissions_granted.set(granted)
            if granted:
                await block()
            else:
                logger.info("%s skipped: capabilities not granted", command)
        except HANDLED_FAULTS as exc:
            if not checked:
                self._permissions_granted.set(False)
            logger.warning("%s failed: %s: %s", command, type(exc).__name__, exc)
            state = Error(exc)
        else:
            state = DONE
        self._ui_state.set(state)
        self._audit_command(command, command_input, granted, started, state)

    def _audit_command(
        self,
        command: str,
        command_input: dict[str, Any] | None,
        permitted: bool,
        started: float,
        state: UiState,
    ) -> None:
        if self._audit is None:
            return
        error_type = type(state.cause).__name__ if isinstance(state, Error) else None
        self._audit.log_command(
            command,
            command_input,
            permitted=permitted,
            duration_ms=round((time.monotonic() - started) * 1000, 3),
            status="failure" if error_type else "success",
            error_type=error_type,
        )
