from __future__ import annotations

import asyncio

import pytest

from unitdash.errors import ManagerCallError
from unitdash.models import Unit


def make_unit(name: str, active: str = "active", sub: str = "running") -> Unit:
    return Unit(name=name, load_state="loaded", active_state=active, sub_state=sub, description=f"{name} unit")


class FakeManager:
    """In-memory stand-in for SystemdManager."""

    def __init__(self, units=()):
        self.units: list[Unit] = list(units)
        self.calls: list[tuple[str, str]] = []
        self.list_calls = 0
        self.list_error: Exception | None = None
        self.action_errors: dict[str, Exception] = {}
        self.gate: asyncio.Event | None = None
        self.closed = False

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        self.closed = True

    async def list_units(self) -> list[Unit]:
        self.list_calls += 1
        if self.list_error is not None:
            raise self.list_error
        return list(self.units)

    async def _act(self, kind: str, name: str, new_state: str | None) -> None:
        self.calls.append((kind, name))
        if self.gate is not None:
            await self.gate.wait()
        err = self.action_errors.get(name)
        if err is not None:
            raise err
        if new_state is not None:
            self.units = [
                make_unit(u.name, active=new_state, sub="running" if new_state == "active" else "dead")
                if u.name == name
                else u
                for u in self.units
            ]

    async def start_unit(self, name: str) -> None:
        await self._act("start", name, "active")

    async def stop_unit(self, name: str) -> None:
        await self._act("stop", name, "inactive")

    async def restart_unit(self, name: str) -> None:
        await self._act("restart", name, "active")

    async def enable_unit(self, name: str) -> None:
        await self._act("enable", name, None)

    async def disable_unit(self, name: str) -> None:
        await self._act("disable", name, None)


@pytest.fixture
def units():
    def _make(n: int, prefix: str = "unit-") -> list[Unit]:
        return [make_unit(f"{prefix}{i:02d}.service") for i in range(n)]

    return _make


@pytest.fixture
def manager():
    return FakeManager([make_unit("nginx.service"), make_unit("sshd.service")])


@pytest.fixture
def call_error():
    return ManagerCallError("Unit bad.service not found.")


@pytest.fixture
def make_manager():
    return FakeManager
