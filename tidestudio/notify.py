"""notify.py — Transient operator notifications ("toasts").

Each entry expires on its own timer. Timers come from a scheduler object so
that the event loop can drive them in production and tests can advance a
virtual clock instead.
"""

import asyncio
import heapq
import itertools
import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)

SUCCESS = "success"
ERROR = "error"
WARNING = "warning"
SEVERITIES = (SUCCESS, ERROR, WARNING)

TOAST_TTL_MS = 5000

ICONS = {SUCCESS: "✓", ERROR: "✗", WARNING: "⚠"}


# ── Schedulers ─────────────────────────────────────────────────


class LoopScheduler:
    """Delayed callbacks on the running asyncio loop."""

    def __init__(self, loop=None):
        self._loop = loop

    def call_later(self, delay_ms, callback):
        loop = self._loop or asyncio.get_running_loop()
        return loop.call_later(delay_ms / 1000.0, callback)


class _VirtualHandle:
    def __init__(self, when, callback):
        self.when = when
        self.callback = callback
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class VirtualScheduler:
    """Manually advanced clock. advance() fires every callback that falls due."""

    def __init__(self):
        self.now = 0
        self._queue = []
        self._seq = itertools.count()

    def call_later(self, delay_ms, callback):
        handle = _VirtualHandle(self.now + delay_ms, callback)
        heapq.heappush(self._queue, (handle.when, next(self._seq), handle))
        return handle

    def advance(self, ms):
        target = self.now + ms
        while self._queue and self._queue[0][0] <= target:
            when, _, handle = heapq.heappop(self._queue)
            self.now = when
            if not handle.cancelled:
                handle.callback()
        self.now = target

    @property
    def pending(self):
        return sum(1 for _, _, h in self._queue if not h.cancelled)


# ── Queue ──────────────────────────────────────────────────────


@dataclass(frozen=True)
class ToastEntry:
    id: int
    severity: str
    title: str
    body: str

    @property
    def icon(self):
        return ICONS[self.severity]


class NotificationQueue:
    """Unbounded, insertion-ordered collection of self-expiring entries.

    listener, when given, is called as listener(event, entry) with event
    "shown" or "removed".
    """

    def __init__(self, scheduler=None, ttl_ms=TOAST_TTL_MS, listener=None):
        self.scheduler = scheduler or LoopScheduler()
        self.ttl_ms = ttl_ms
        self.listener = listener
        self._entries = {}
        self._timers = {}
        self._ids = itertools.count(1)

    def emit(self, severity, title, body):
        if severity not in SEVERITIES:
            raise ValueError(f"Unknown severity: {severity}")
        entry = ToastEntry(next(self._ids), severity, title, body)
        self._entries[entry.id] = entry
        self._timers[entry.id] = self.scheduler.call_later(
            self.ttl_ms, lambda: self._expire(entry.id)
        )
        logger.debug("toast %d [%s] %s: %s", entry.id, severity, title, body)
        self._notify("shown", entry)
        return entry

    def dismiss(self, entry_id):
        """Remove an entry now. Returns False if it was already gone."""
        entry = self._entries.pop(entry_id, None)
        if entry is None:
            return False
        timer = self._timers.pop(entry_id, None)
        if timer is not None:
            timer.cancel()
        self._notify("removed", entry)
        return True

    def _expire(self, entry_id):
        self._timers.pop(entry_id, None)
        entry = self._entries.pop(entry_id, None)
        if entry is not None:
            self._notify("removed", entry)

    def _notify(self, event, entry):
        if self.listener is not None:
            self.listener(event, entry)

    @property
    def visible(self):
        return list(self._entries.values())

    def __len__(self):
        return len(self._entries)
