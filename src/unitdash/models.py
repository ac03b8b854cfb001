from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Literal

from .errors import ValidationError


@dataclass(frozen=True, slots=True)
class Unit:
    name: str
    load_state: str
    active_state: str
    sub_state: str
    description: str = ""


Inventory = tuple[Unit, ...]


class ActionKind(str, enum.Enum):
    START = "start"
    STOP = "stop"
    RESTART = "restart"
    ENABLE = "enable"
    DISABLE = "disable"

    @classmethod
    def parse(cls, text: str) -> "ActionKind":
        """Map user input onto a known action; anything else is rejected."""
        value = (text or "").strip().lower()
        try:
            return cls(value)
        except ValueError:
            choices = "/".join(k.value for k in cls)
            raise ValidationError(f"unknown action '{text}' (expected {choices})") from None


@dataclass(frozen=True, slots=True)
class PendingAction:
    unit: str
    kind: ActionKind
    started_at: float

    def describe(self) -> str:
        return f"{self.kind.value} {self.unit}"


@dataclass(frozen=True, slots=True)
class ActionOutcome:
    action: PendingAction
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class Mode(str, enum.Enum):
    NORMAL = "normal"
    FILTER = "filter"
    ACTION = "action"


FilterMode = Literal["live", "confirm"]
