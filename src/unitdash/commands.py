"""Abstract input commands fed to the dashboard controller.

Front-ends post raw keys as ``KeyPress``; the controller decodes them with
``unitdash.keys`` against the mode it holds when the key is handled.
"""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class MoveUp:
    pass


@dataclass(frozen=True, slots=True)
class MoveDown:
    pass


@dataclass(frozen=True, slots=True)
class PageNext:
    pass


@dataclass(frozen=True, slots=True)
class PagePrev:
    pass


@dataclass(frozen=True, slots=True)
class FilterStart:
    pass


@dataclass(frozen=True, slots=True)
class FilterChar:
    char: str


@dataclass(frozen=True, slots=True)
class FilterBackspace:
    pass


@dataclass(frozen=True, slots=True)
class FilterCommit:
    pass


@dataclass(frozen=True, slots=True)
class ActionConfirm:
    pass


@dataclass(frozen=True, slots=True)
class ActionKeyInput:
    char: str


@dataclass(frozen=True, slots=True)
class ActionBackspace:
    pass


@dataclass(frozen=True, slots=True)
class Refresh:
    pass


@dataclass(frozen=True, slots=True)
class Cancel:
    pass


@dataclass(frozen=True, slots=True)
class Quit:
    pass


@dataclass(frozen=True, slots=True)
class KeyPress:
    """A raw terminal key, decoded by the controller."""

    key: str
    character: str | None = None


Command = (
    MoveUp
    | MoveDown
    | PageNext
    | PagePrev
    | FilterStart
    | FilterChar
    | FilterBackspace
    | FilterCommit
    | ActionConfirm
    | ActionKeyInput
    | ActionBackspace
    | Refresh
    | Cancel
    | Quit
    | KeyPress
)
