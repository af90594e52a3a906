"""viewport.py — The narrow surface the core writes to.

Front-ends implement set_output() and set_status(). The core never touches
widgets directly; it addresses display regions and controls by id.
"""

# ── Region ids ─────────────────────────────────────────────────

GENERATOR_OUTPUT = "generator-output"
MIGRATION_OUTPUT = "migration-output"
SEEDER_OUTPUT = "seeder-output"
DATABASE_OUTPUT = "database-output"
QUERY_RESULTS = "query-results"
QUERY_TIME = "query-time"

MODAL = "confirm-modal"
MODAL_TITLE = "modal-title"
MODAL_MESSAGE = "modal-message"
CONFIG_ALERT = "config-alert"
STATUS_BADGE = "status-badge"

# ── Status values ──────────────────────────────────────────────

NEUTRAL = ""
SUCCESS = "success"
ERROR = "error"
VISIBLE = "visible"
HIDDEN = "hidden"
ACTIVE = "active"
INACTIVE = "inactive"
DISABLED = "disabled"
WARNING = "warning"


class ViewPort:
    """Base view. Subclasses render however they like."""

    def set_output(self, region_id, text):
        raise NotImplementedError

    def set_status(self, region_id, state):
        raise NotImplementedError


class MemoryViewPort(ViewPort):
    """Keeps the last text and status per region. Used headless and in tests."""

    def __init__(self):
        self.outputs = {}
        self.statuses = {}
        self.history = []

    def set_output(self, region_id, text):
        self.outputs[region_id] = text
        self.history.append(("output", region_id, text))

    def set_status(self, region_id, state):
        self.statuses[region_id] = state
        self.history.append(("status", region_id, state))

    def output(self, region_id, default=""):
        return self.outputs.get(region_id, default)

    def status(self, region_id, default=NEUTRAL):
        return self.statuses.get(region_id, default)
