from __future__ import annotations

import asyncio
import logging
from asyncio import Task
from contextlib import suppress

from rich.text import Text
from textual import events
from textual.app import App, ComposeResult
from textual.containers import Container, Horizontal
from textual.widgets import DataTable, Label

from ..commands import KeyPress, Refresh
from ..config import Settings
from ..controller import Controller
from ..systemd_bus import SystemdManager
from ..view import COLUMNS, ViewSnapshot

logger = logging.getLogger(__name__)

HELP_TEXT = (
    "↑↓/jk move  ←→/hl page  / filter  enter action  "
    "s t R e d start/stop/restart/enable/disable  r refresh  esc cancel  q quit"
)

DEFAULT_CSS = """
#header { height: 1; }
#title { width: auto; text-style: bold; padding: 0 1; }
#page { width: auto; padding: 0 1; }
#counts { width: 1fr; content-align: right middle; padding: 0 1; }
#units { height: 1fr; }
#prompt { height: 1; padding: 0 1; }
#status { height: 1; padding: 0 1; }
#error { height: auto; padding: 0 1; color: $error; }
#help { height: 1; padding: 0 1; color: $text-muted; }
"""


class UnitDashApp(App):
    """Render sink for the controller: keys in, snapshots out."""

    CSS = DEFAULT_CSS

    def __init__(self, controller: Controller) -> None:
        super().__init__()
        self.controller = controller
        self._loop_task: Task | None = None

    def compose(self) -> ComposeResult:
        with Container(id="header"):
            with Horizontal():
                yield Label("unitdash", id="title")
                yield Label("", id="page", markup=False)
                yield Label("", id="counts", markup=False)
        table = DataTable(zebra_stripes=True, cursor_type="row", id="units")
        # keys go to the controller, never to the table
        table.can_focus = False
        table.add_columns(*COLUMNS)
        yield table
        yield Label("", id="prompt", markup=False)
        yield Label("", id="status", markup=False)
        yield Label("", id="error", markup=False)
        yield Label(HELP_TEXT, id="help")

    async def on_mount(self) -> None:
        self.controller.submit(Refresh())
        self._loop_task = asyncio.create_task(self._drive())

    async def on_unmount(self) -> None:
        if self._loop_task and not self._loop_task.done():
            self._loop_task.cancel()
            with suppress(asyncio.CancelledError):
                await self._loop_task

    async def _drive(self) -> None:
        try:
            await self.controller.run(self.render_snapshot)
        except Exception:
            logger.exception("Dashboard loop crashed")
            raise
        finally:
            self.exit()

    def on_key(self, event: events.Key) -> None:
        self.controller.submit(KeyPress(event.key, event.character))
        event.stop()
        event.prevent_default()

    def render_snapshot(self, snap: ViewSnapshot) -> None:
        table = self.query_one("#units", DataTable)
        table.clear(columns=False)
        selected = None
        for i, row in enumerate(snap.rows):
            table.add_row(*(Text(c) for c in row.cells()))
            if row.selected:
                selected = i
        if selected is not None:
            table.move_cursor(row=selected)
        self.query_one("#page", Label).update(snap.header)
        counts = f"{snap.shown}/{snap.total} units"
        if snap.query:
            counts = f"filter '{snap.query}'  {counts}"
        self.query_one("#counts", Label).update(counts)
        self.query_one("#prompt", Label).update(snap.prompt)
        status = snap.notice
        if snap.busy:
            status = f"[busy] {snap.busy}" + (f"  {status}" if status else "")
        self.query_one("#status", Label).update(status)
        self.query_one("#error", Label).update(f"error: {snap.error}" if snap.error else "")


def run_dash(settings: Settings) -> None:
    """Open the dashboard; the bus session lives exactly as long as the app."""

    async def _main() -> None:
        async with SystemdManager(settings.bus_type, unit_type=settings.unit_type) as manager:
            controller = Controller(
                manager,
                page_size=settings.page_size,
                filter_mode=settings.filter_mode,
                refresh_interval=settings.refresh_interval,
            )
            await UnitDashApp(controller).run_async()

    asyncio.run(_main())
