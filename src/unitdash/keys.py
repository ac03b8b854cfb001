from __future__ import annotations

from . import commands as cmd
from .models import Mode

# single-key shortcuts that open the action prompt pre-filled
ACTION_SHORTCUTS = {
    "s": "start",
    "t": "stop",
    "R": "restart",
    "e": "enable",
    "d": "disable",
}

_NORMAL_KEYS: dict[str, cmd.Command] = {
    "up": cmd.MoveUp(),
    "k": cmd.MoveUp(),
    "down": cmd.MoveDown(),
    "j": cmd.MoveDown(),
    "right": cmd.PageNext(),
    "l": cmd.PageNext(),
    "pagedown": cmd.PageNext(),
    "left": cmd.PagePrev(),
    "h": cmd.PagePrev(),
    "pageup": cmd.PagePrev(),
    "slash": cmd.FilterStart(),
    "/": cmd.FilterStart(),
    "enter": cmd.ActionConfirm(),
    "r": cmd.Refresh(),
    "ctrl+r": cmd.Refresh(),
    "escape": cmd.Cancel(),
    "q": cmd.Quit(),
    "ctrl+c": cmd.Quit(),
}

_FILTER_KEYS: dict[str, cmd.Command] = {
    "enter": cmd.FilterCommit(),
    "backspace": cmd.FilterBackspace(),
    "escape": cmd.Cancel(),
    "up": cmd.MoveUp(),
    "down": cmd.MoveDown(),
    "ctrl+r": cmd.Refresh(),
    "ctrl+c": cmd.Quit(),
}

_ACTION_KEYS: dict[str, cmd.Command] = {
    "enter": cmd.ActionConfirm(),
    "backspace": cmd.ActionBackspace(),
    "escape": cmd.Cancel(),
    "ctrl+r": cmd.Refresh(),
    "ctrl+c": cmd.Quit(),
}


def _printable(character: str | None) -> bool:
    return bool(character) and len(character) == 1 and character.isprintable()


def decode_key(key: str, character: str | None, mode: Mode) -> list[cmd.Command]:
    """Translate one terminal key press into dashboard commands for ``mode``."""
    if mode is Mode.FILTER:
        if key in _FILTER_KEYS:
            return [_FILTER_KEYS[key]]
        return [cmd.FilterChar(character)] if _printable(character) else []
    if mode is Mode.ACTION:
        if key in _ACTION_KEYS:
            return [_ACTION_KEYS[key]]
        return [cmd.ActionKeyInput(character)] if _printable(character) else []
    if character in ACTION_SHORTCUTS:
        return [cmd.ActionKeyInput(c) for c in ACTION_SHORTCUTS[character]]
    if key in _NORMAL_KEYS:
        return [_NORMAL_KEYS[key]]
    return []
