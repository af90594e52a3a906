"""confirm.py — Confirmation modal for destructive actions.

At most one action waits for consent. The modal is shown exactly while an
action is pending; a second request replaces the first.
"""

import asyncio
import logging
from dataclasses import dataclass

from . import viewport

logger = logging.getLogger(__name__)

COMMAND = "command"
QUERY = "query"


@dataclass(frozen=True)
class PendingAction:
    kind: str
    payload: str
    title: str
    message: str


class ConfirmationWorkflow:
    """Idle <-> PendingConfirmation.

    run_command and run_query are coroutine functions taking the payload.
    spawn schedules the dispatch coroutine; it defaults to asyncio.ensure_future.
    """

    def __init__(self, view, run_command, run_query, spawn=None):
        self.view = view
        self._dispatch = {COMMAND: run_command, QUERY: run_query}
        self._spawn = spawn or asyncio.ensure_future
        self._pending = None

    @property
    def pending(self):
        return self._pending

    @property
    def modal_visible(self):
        return self._pending is not None

    def request(self, kind, payload, title, message):
        if kind not in self._dispatch:
            raise ValueError(f"Unknown action kind: {kind}")
        if self._pending is not None:
            logger.debug("replacing pending %s action", self._pending.kind)
        self._pending = PendingAction(kind, payload, title, message)
        self.view.set_output(viewport.MODAL_TITLE, title)
        self.view.set_output(viewport.MODAL_MESSAGE, message)
        self.view.set_status(viewport.MODAL, viewport.VISIBLE)
        logger.debug("staged %s action for confirmation", kind)
        return self._pending

    def _close(self):
        self._pending = None
        self.view.set_status(viewport.MODAL, viewport.HIDDEN)

    def confirm(self):
        """Dispatch the pending action. Returns the scheduled task, or None."""
        action = self._pending
        if action is None:
            return None
        self._close()
        logger.debug("confirmed %s action", action.kind)
        return self._spawn(self._dispatch[action.kind](action.payload))

    def cancel(self):
        if self._pending is None:
            return False
        logger.debug("cancelled %s action", self._pending.kind)
        self._close()
        return True

    def escape(self):
        """Escape key: same as cancel while the modal is up, otherwise nothing."""
        return self.cancel()
