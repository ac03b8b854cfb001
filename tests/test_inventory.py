import asyncio

import pytest

from unitdash.errors import ManagerConnectionError
from unitdash.inventory import InventoryStore


def test_refresh_replaces_inventory(manager, units):
    store = InventoryStore(manager, clock=lambda: 123.0)
    first = asyncio.run(store.refresh())
    assert [u.name for u in first] == ["nginx.service", "sshd.service"]
    assert store.refreshed_at == 123.0

    manager.units = units(3)
    asyncio.run(store.refresh())
    assert [u.name for u in store.units] == ["unit-00.service", "unit-01.service", "unit-02.service"]
    assert store.refresh_count == 2
    assert store.get("nginx.service") is None
    assert store.get("unit-01.service").name == "unit-01.service"


def test_failed_refresh_keeps_previous_inventory(manager):
    store = InventoryStore(manager)
    asyncio.run(store.refresh())
    before = store.units

    manager.units = []
    manager.list_error = ManagerConnectionError("bus gone")
    with pytest.raises(ManagerConnectionError):
        asyncio.run(store.refresh())
    assert store.units is before
    assert store.refresh_count == 1
