from __future__ import annotations

import logging
from typing import Any, Optional

from dbus_next import BusType
from dbus_next.aio import MessageBus
from dbus_next.errors import DBusError

from .errors import ManagerCallError, ManagerConnectionError
from .models import Unit

logger = logging.getLogger(__name__)

SYSTEMD_DEST = "org.freedesktop.systemd1"
SYSTEMD_PATH = "/org/freedesktop/systemd1"
IFACE_MANAGER = "org.freedesktop.systemd1.Manager"


async def connect_bus(bus_type: BusType = BusType.SYSTEM) -> MessageBus:
    bus = await MessageBus(bus_type=bus_type).connect()
    return bus


async def get_manager(bus: MessageBus):
    intro = await bus.introspect(SYSTEMD_DEST, SYSTEMD_PATH)
    obj = bus.get_proxy_object(SYSTEMD_DEST, SYSTEMD_PATH, intro)
    return obj.get_interface(IFACE_MANAGER)


def unit_from_row(row: Any) -> Unit:
    # ListUnits rows: name, description, load_state, active_state, sub_state,
    # following, unit_path, job_id, job_type, job_path
    return Unit(
        name=row[0],
        description=row[1],
        load_state=row[2],
        active_state=row[3],
        sub_state=row[4],
    )


async def list_units(mgr) -> list[Unit]:
    rows = await mgr.call_list_units()
    return [unit_from_row(row) for row in rows]


async def start_unit(mgr, unit_name: str, mode: str = "replace"):
    return await mgr.call_start_unit(unit_name, mode)


async def stop_unit(mgr, unit_name: str, mode: str = "replace"):
    return await mgr.call_stop_unit(unit_name, mode)


async def restart_unit(mgr, unit_name: str, mode: str = "replace"):
    return await mgr.call_restart_unit(unit_name, mode)


async def enable_unit(mgr, unit_name: str):
    # runtime=False (persistent), force=True
    await mgr.call_enable_unit_files([unit_name], False, True)
    await mgr.call_reload()


async def disable_unit(mgr, unit_name: str):
    await mgr.call_disable_unit_files([unit_name], False)
    await mgr.call_reload()


class SystemdManager:
    """Session-scoped connection to the systemd manager.

    The bus is opened on ``connect()`` (or ``async with``) and reopened on the
    next call if it drops; ``close()`` releases it. Every failure is raised as
    ``ManagerConnectionError`` (bus unreachable) or ``ManagerCallError``
    (systemd rejected the call).
    """

    def __init__(self, bus_type: BusType = BusType.SYSTEM, unit_type: Optional[str] = None) -> None:
        self.bus_type = bus_type
        self.unit_type = unit_type
        self._bus: MessageBus | None = None
        self._mgr = None

    async def __aenter__(self) -> "SystemdManager":
        await self.connect()
        return self

    async def __aexit__(self, *exc) -> None:
        await self.close()

    @property
    def connected(self) -> bool:
        return self._bus is not None and self._bus.connected

    async def connect(self) -> "SystemdManager":
        await self._interface()
        return self

    async def close(self) -> None:
        bus, self._bus, self._mgr = self._bus, None, None
        if bus is not None and bus.connected:
            bus.disconnect()
            logger.debug("Disconnected from %s bus", self._bus_label())

    async def list_units(self) -> list[Unit]:
        units = await self._call("list units", list_units)
        if self.unit_type:
            suffix = f".{self.unit_type}"
            units = [u for u in units if u.name.endswith(suffix)]
        units.sort(key=lambda u: u.name)
        return units

    async def start_unit(self, name: str) -> None:
        await self._call(f"start {name}", start_unit, name)

    async def stop_unit(self, name: str) -> None:
        await self._call(f"stop {name}", stop_unit, name)

    async def restart_unit(self, name: str) -> None:
        await self._call(f"restart {name}", restart_unit, name)

    async def enable_unit(self, name: str) -> None:
        await self._call(f"enable {name}", enable_unit, name)

    async def disable_unit(self, name: str) -> None:
        await self._call(f"disable {name}", disable_unit, name)

    async def _interface(self):
        if self._mgr is not None and self.connected:
            return self._mgr
        self._bus, self._mgr = None, None
        try:
            bus = await connect_bus(self.bus_type)
        except Exception as e:
            raise ManagerConnectionError(f"cannot connect to {self._bus_label()} bus: {e}") from e
        try:
            mgr = await get_manager(bus)
        except Exception as e:
            bus.disconnect()
            raise ManagerConnectionError(f"systemd not reachable on {self._bus_label()} bus: {e}") from e
        logger.debug("Connected to systemd on %s bus", self._bus_label())
        self._bus, self._mgr = bus, mgr
        return mgr

    async def _call(self, what: str, fn, *args):
        mgr = await self._interface()
        try:
            return await fn(mgr, *args)
        except DBusError as e:
            raise ManagerCallError(e.text or e.type) from e
        except Exception as e:
            if not self.connected:
                raise ManagerConnectionError(f"lost connection during {what}: {e}") from e
            raise ManagerCallError(f"{what}: {e}") from e

    def _bus_label(self) -> str:
        return "user" if self.bus_type == BusType.SESSION else "system"
