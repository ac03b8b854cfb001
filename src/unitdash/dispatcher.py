from __future__ import annotations

import asyncio
import logging
import time
from typing import TYPE_CHECKING, Callable

from .errors import BusyError, ManagerError, ValidationError
from .models import ActionKind, ActionOutcome, PendingAction

if TYPE_CHECKING:
    from .systemd_bus import SystemdManager

logger = logging.getLogger(__name__)


class ActionDispatcher:
    """Runs one lifecycle action at a time against the service manager.

    The manager call runs as a background task; its outcome is handed to
    ``post`` (normally the controller's event queue) instead of touching any
    dashboard state directly. ``resolve`` must be called by the consumer of
    that outcome to free the slot for the next action.
    """

    def __init__(
        self,
        manager: "SystemdManager",
        post: Callable[[ActionOutcome], None],
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._manager = manager
        self._post = post
        self._clock = clock
        self.pending: PendingAction | None = None
        self._task: asyncio.Task | None = None

    @property
    def busy(self) -> bool:
        return self.pending is not None

    def invoke(self, unit_name: str, kind: ActionKind | str) -> "asyncio.Task[ActionOutcome]":
        if not isinstance(kind, ActionKind):
            kind = ActionKind.parse(kind)
        if not unit_name:
            raise ValidationError("no unit selected")
        if self.pending is not None:
            raise BusyError(f"busy: {self.pending.describe()} still in progress")
        action = PendingAction(unit=unit_name, kind=kind, started_at=self._clock())
        self.pending = action
        logger.info("Requested %s", action.describe())
        self._task = asyncio.create_task(self._run(action))
        return self._task

    def resolve(self, outcome: ActionOutcome) -> bool:
        """Clear the pending slot if ``outcome`` belongs to it."""
        if self.pending is None or outcome.action != self.pending:
            logger.debug("Ignoring stale outcome for %s", outcome.action.describe())
            return False
        self.pending = None
        self._task = None
        return True

    async def _run(self, action: PendingAction) -> ActionOutcome:
        call = {
            ActionKind.START: self._manager.start_unit,
            ActionKind.STOP: self._manager.stop_unit,
            ActionKind.RESTART: self._manager.restart_unit,
            ActionKind.ENABLE: self._manager.enable_unit,
            ActionKind.DISABLE: self._manager.disable_unit,
        }[action.kind]
        try:
            await call(action.unit)
        except ManagerError as e:
            logger.warning("%s failed: %s", action.describe(), e)
            outcome = ActionOutcome(action, error=str(e) or e.__class__.__name__)
        except Exception as e:
            # the slot must still be released, otherwise the dashboard stays busy
            logger.exception("Unexpected error during %s", action.describe())
            outcome = ActionOutcome(action, error=f"{e.__class__.__name__}: {e}")
        else:
            logger.info("%s done in %.2fs", action.describe(), self._clock() - action.started_at)
            outcome = ActionOutcome(action)
        self._post(outcome)
        return outcome
