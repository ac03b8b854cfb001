from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

from .errors import ManagerError
from .models import Inventory, Unit

if TYPE_CHECKING:
    from .systemd_bus import SystemdManager

logger = logging.getLogger(__name__)


class InventoryStore:
    """Holds the unit list exactly as the manager last reported it.

    ``refresh`` is all-or-nothing: a failed listing leaves the previous
    inventory in place and re-raises the manager error for the caller to
    report.
    """

    def __init__(self, manager: "SystemdManager", clock=time.time) -> None:
        self._manager = manager
        self._clock = clock
        self.units: Inventory = ()
        self.refreshed_at: float | None = None
        self.refresh_count = 0

    async def refresh(self) -> Inventory:
        try:
            units = await self._manager.list_units()
        except ManagerError as e:
            logger.warning("Unit refresh failed: %s", e)
            raise
        self.units = tuple(units)
        self.refreshed_at = self._clock()
        self.refresh_count += 1
        logger.debug("Loaded %d units (refresh #%d)", len(self.units), self.refresh_count)
        return self.units

    def get(self, name: str) -> Unit | None:
        for u in self.units:
            if u.name == name:
                return u
        return None
