from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable

from .models import ActionKind, Mode, Unit

if TYPE_CHECKING:
    from .controller import DashState


COLUMNS = ("Name", "Load", "Active", "Sub", "Description")


@dataclass(frozen=True, slots=True)
class ViewRow:
    name: str
    load_state: str
    active_state: str
    sub_state: str
    description: str
    selected: bool = False

    @classmethod
    def from_unit(cls, unit: Unit, selected: bool = False) -> "ViewRow":
        return cls(
            name=unit.name,
            load_state=unit.load_state,
            active_state=unit.active_state,
            sub_state=unit.sub_state,
            description=unit.description,
            selected=selected,
        )

    def cells(self) -> tuple[str, str, str, str, str]:
        return (self.name, self.load_state, self.active_state, self.sub_state, self.description)


@dataclass(frozen=True, slots=True)
class ViewSnapshot:
    header: str
    page: int
    total_pages: int
    rows: tuple[ViewRow, ...]
    query: str
    mode: Mode
    prompt: str
    busy: str
    error: str
    notice: str
    shown: int
    total: int

    @property
    def selected_row(self) -> ViewRow | None:
        for r in self.rows:
            if r.selected:
                return r
        return None


def project(state: "DashState") -> ViewSnapshot:
    """Build a render-ready snapshot of ``state``. Never mutates anything."""
    pager = state.pager
    start, end = pager.page_bounds()
    rows = [
        ViewRow.from_unit(unit, selected=pager.has_selection and offset == pager.selected_index)
        for offset, unit in enumerate(state.filtered[start:end])
    ]

    pending = state.dispatcher.pending
    busy = f"{pending.describe()}…" if pending is not None else ""

    return ViewSnapshot(
        header=f"page {pager.current_page + 1}/{pager.total_pages}",
        page=pager.current_page,
        total_pages=pager.total_pages,
        rows=tuple(rows),
        query=state.filter.query,
        mode=state.mode,
        prompt=_prompt(state),
        busy=busy,
        error=state.error,
        notice=state.notice,
        shown=len(state.filtered),
        total=len(state.store.units),
    )


def _prompt(state: "DashState") -> str:
    if state.mode is Mode.FILTER:
        suffix = "" if state.filter.mode == "live" else "  (enter to apply)"
        return f"/{state.filter.text}{suffix}"
    if state.mode is Mode.ACTION:
        choices = "/".join(k.value for k in ActionKind)
        return f"{state.action_target} action ({choices}): {state.action_buffer}"
    return ""


def format_rows(rows: Iterable[ViewRow]) -> list[str]:
    """Tab-separated lines for non-interactive output."""
    return ["\t".join(r.cells()) for r in rows]
