from __future__ import annotations

import asyncio
import logging
from contextlib import suppress
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Union

from . import commands as cmd
from .dispatcher import ActionDispatcher
from .errors import BusyError, ManagerError, ValidationError
from .filtering import FilterState, apply_filter
from .inventory import InventoryStore
from .keys import decode_key
from .models import ActionKind, ActionOutcome, FilterMode, Inventory, Mode, Unit
from .pager import Pager
from .view import ViewSnapshot, project

if TYPE_CHECKING:
    from .systemd_bus import SystemdManager

logger = logging.getLogger(__name__)

Event = Union[cmd.Command, ActionOutcome]
RenderSink = Callable[[ViewSnapshot], None]


@dataclass(slots=True)
class DashState:
    store: InventoryStore
    filter: FilterState
    pager: Pager
    dispatcher: ActionDispatcher
    filtered: Inventory = ()
    mode: Mode = Mode.NORMAL
    action_target: str | None = None
    action_buffer: str = ""
    error: str = ""
    notice: str = ""

    def selected_unit(self) -> Unit | None:
        idx = self.pager.absolute_index()
        if idx is None or idx >= len(self.filtered):
            return None
        return self.filtered[idx]


class Controller:
    """Single owner of the dashboard state.

    Every input command and every action completion goes through ``events``
    and is handled one at a time by ``run``; rendering happens between events.
    """

    def __init__(
        self,
        manager: "SystemdManager",
        page_size: int = 10,
        filter_mode: FilterMode = "live",
        refresh_interval: float = 0.0,
    ) -> None:
        self.events: asyncio.Queue[Event] = asyncio.Queue()
        self.refresh_interval = refresh_interval
        self.state = DashState(
            store=InventoryStore(manager),
            filter=FilterState(mode=filter_mode),
            pager=Pager(page_size),
            dispatcher=ActionDispatcher(manager, post=self.submit),
        )

    def submit(self, event: Event) -> None:
        self.events.put_nowait(event)

    def snapshot(self) -> ViewSnapshot:
        return project(self.state)

    async def run(self, render: RenderSink) -> None:
        """Drain events until ``Quit``; ``render`` is called after each one."""
        ticker = None
        if self.refresh_interval > 0:
            ticker = asyncio.create_task(self._tick())
        render(self.snapshot())
        try:
            while True:
                event = await self.events.get()
                keep_going = await self.handle(event)
                render(self.snapshot())
                if not keep_going:
                    break
        finally:
            if ticker is not None:
                ticker.cancel()
                with suppress(asyncio.CancelledError):
                    await ticker

    async def handle(self, event: Event) -> bool:
        """Apply one event to the state. Returns False once the session should end."""
        if isinstance(event, ActionOutcome):
            await self._on_outcome(event)
            return True

        st = self.state
        if isinstance(event, cmd.KeyPress):
            # decoded one key at a time, so earlier keys in a burst set the mode for later ones
            for command in decode_key(event.key, event.character, st.mode):
                if not await self.handle(command):
                    return False
            return True
        st.notice = ""
        if isinstance(event, cmd.Quit):
            if st.dispatcher.pending is not None:
                logger.info("Quitting with %s still in flight", st.dispatcher.pending.describe())
            return False
        if isinstance(event, cmd.Refresh):
            await self.refresh()
        elif isinstance(event, cmd.Cancel):
            self._cancel()
        elif isinstance(event, cmd.MoveUp):
            st.pager.move_selection(-1)
        elif isinstance(event, cmd.MoveDown):
            st.pager.move_selection(1)
        elif isinstance(event, cmd.PageNext):
            st.pager.change_page(1)
        elif isinstance(event, cmd.PagePrev):
            st.pager.change_page(-1)
        elif isinstance(event, (cmd.FilterStart, cmd.FilterChar, cmd.FilterBackspace, cmd.FilterCommit)):
            self._on_filter(event)
        elif isinstance(event, (cmd.ActionConfirm, cmd.ActionKeyInput, cmd.ActionBackspace)):
            self._on_action(event)
        else:
            logger.debug("Unhandled event %r", event)
        return True

    async def refresh(self, keep_error: bool = False) -> bool:
        st = self.state
        try:
            await st.store.refresh()
        except ManagerError as e:
            st.error = f"refresh failed: {e}"
            return False
        if not keep_error:
            st.error = ""
        self._rederive()
        return True

    def _rederive(self) -> None:
        st = self.state
        st.filtered = apply_filter(st.store.units, st.filter.query)
        st.pager.reclamp(len(st.filtered))

    def _cancel(self) -> None:
        st = self.state
        if st.mode is Mode.FILTER:
            st.filter.discard()
        st.mode = Mode.NORMAL
        st.action_target = None
        st.action_buffer = ""

    def _on_filter(self, event: cmd.Command) -> None:
        st = self.state
        if isinstance(event, cmd.FilterStart):
            if st.mode is Mode.ACTION:
                self._cancel()
            st.mode = Mode.FILTER
            st.filter.begin()
            return
        if st.mode is not Mode.FILTER:
            logger.debug("Ignoring %r outside filter mode", event)
            return
        if isinstance(event, cmd.FilterChar):
            changed = st.filter.append_char(event.char)
        elif isinstance(event, cmd.FilterBackspace):
            changed = st.filter.delete_last_char()
        else:
            changed = st.filter.commit()
            st.mode = Mode.NORMAL
        if changed:
            self._rederive()

    def _on_action(self, event: cmd.Command) -> None:
        st = self.state
        if st.mode is not Mode.ACTION:
            if isinstance(event, cmd.ActionBackspace):
                return
            if st.mode is Mode.FILTER:
                if st.filter.commit():
                    self._rederive()
                st.mode = Mode.NORMAL
            unit = st.selected_unit()
            if unit is None:
                st.error = "no unit selected"
                return
            st.mode = Mode.ACTION
            st.action_target = unit.name
            st.action_buffer = event.char if isinstance(event, cmd.ActionKeyInput) else ""
            return
        if isinstance(event, cmd.ActionKeyInput):
            st.action_buffer += event.char
        elif isinstance(event, cmd.ActionBackspace):
            st.action_buffer = st.action_buffer[:-1]
        else:
            self._submit_action()

    def _submit_action(self) -> None:
        st = self.state
        target, text = st.action_target, st.action_buffer
        st.mode = Mode.NORMAL
        st.action_target = None
        st.action_buffer = ""
        try:
            kind = ActionKind.parse(text)
            st.dispatcher.invoke(target or "", kind)
        except BusyError as e:
            logger.info("Rejected %s %s: %s", text, target, e)
            st.notice = str(e)
        except ValidationError as e:
            logger.info("Rejected %r for %s: %s", text, target, e)
            st.error = str(e)
        else:
            st.notice = f"{kind.value} {target} requested"

    async def _on_outcome(self, outcome: ActionOutcome) -> None:
        st = self.state
        if not st.dispatcher.resolve(outcome):
            return
        action = outcome.action
        if outcome.ok:
            st.error = ""
            st.notice = f"{action.describe()} succeeded"
        else:
            st.error = f"{action.kind.value} {action.unit} failed: {outcome.error}"
        await self.refresh(keep_error=not outcome.ok)

    async def _tick(self) -> None:
        while True:
            await asyncio.sleep(self.refresh_interval)
            self.submit(cmd.Refresh())
