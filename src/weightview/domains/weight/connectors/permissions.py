"""Concrete PermissionGate implementations."""

from __future__ import annotations

import logging
from collections.abc import Set

from weightview.core.storage.repository import WeightRepository
from weightview.domains.weight.connectors.storage_errors import translate_storage_errors

logger = logging.getLogger(__name__)


class StaticPermissionGate:
    """Holds grants in memory.

    Args:
        granted: Capabilities granted up front.
        grant_on_request: Whether :meth:`request` grants what was asked
            for (the user accepted the prompt) or leaves grants unchanged
            (the user declined).
    """

    def __init__(
        self,
        granted: Set[str] = frozenset(),
        *,
        grant_on_request: bool = True,
    ) -> None:
        self._granted = set(granted)
        self._grant_on_request = grant_on_request

    @property
    def granted(self) -> frozenset[str]:
        return frozenset(self._granted)

    async def has_all(self, capabilities: Set[str]) -> bool:
        return set(capabilities) <= self._granted

    async def request(self, capabilities: Set[str]) -> bool:
        if self._grant_on_request:
            self._granted |= set(capabilities)
        return await self.has_all(capabilities)

    def revoke(self, capabilities: Set[str]) -> None:
        self._granted -= set(capabilities)


class StoredPermissionGate:
    """PermissionGate whose grants live in the readings data bank.

    Grants survive restarts. Requests are granted only when the
    installation is configured to auto-grant; otherwise the request is
    recorded in the log and reported as still missing. Data-bank failures
    surface as store faults, like those of :class:`SQLiteReadingsStore`.
    """

    def __init__(self, repository: WeightRepository, *, auto_grant: bool = True) -> None:
        self._repo = repository
        self._auto_grant = auto_grant

    async def has_all(self, capabilities: Set[str]) -> bool:
        with translate_storage_errors("permission check"):
            granted = self._repo.get_granted_capabilities()
        return set(capabilities) <= granted

    async def request(self, capabilities: Set[str]) -> bool:
        if self._auto_grant:
            with translate_storage_errors("permission grant"):
                self._repo.grant_capabilities(sorted(capabilities))
            logger.info("Granted capabilities: %s", ", ".join(sorted(capabilities)))
        else:
            logger.warning(
                "Permission request for %s declined: auto-grant disabled",
                ", ".join(sorted(capabilities)),
            )
        return await self.has_all(capabilities)
