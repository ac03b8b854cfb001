from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from .models import FilterMode, Inventory, Unit


def apply_filter(inventory: Iterable[Unit], query: str) -> Inventory:
    """Return units whose name contains ``query`` (case-insensitive), in order."""
    units = tuple(inventory)
    q = query.lower()
    if not q:
        return units
    return tuple(u for u in units if q in u.name.lower())


@dataclass(slots=True)
class FilterState:
    """Search query being edited by the user.

    In ``live`` mode every edit changes ``query`` directly. In ``confirm`` mode
    edits go to ``draft`` and only ``commit()`` makes them the applied query.
    Each mutator returns True when the applied query changed, so the caller
    knows to re-derive the filtered view.
    """

    mode: FilterMode = "live"
    query: str = ""
    draft: str = ""

    @property
    def text(self) -> str:
        # what the prompt shows while editing
        return self.query if self.mode == "live" else self.draft

    def begin(self) -> None:
        self.draft = self.query

    def append_char(self, c: str) -> bool:
        if not c:
            return False
        return self._edit(self.text + c)

    def delete_last_char(self) -> bool:
        if not self.text:
            return False
        return self._edit(self.text[:-1])

    def reset(self) -> bool:
        changed = bool(self.query)
        self.query = ""
        self.draft = ""
        return changed

    def commit(self) -> bool:
        if self.mode == "live":
            return False
        changed = self.draft != self.query
        self.query = self.draft
        return changed

    def discard(self) -> None:
        self.draft = self.query

    def _edit(self, new_text: str) -> bool:
        if self.mode == "live":
            changed = new_text != self.query
            self.query = new_text
            self.draft = new_text
            return changed
        self.draft = new_text
        return False
