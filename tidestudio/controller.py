"""controller.py — Root controller for the studio.

Owns the session state (config presence, the pending confirmation, the
active panel and the form inputs) and maps control ids to handlers. Front-ends
call set_input(), activate() and key_pressed(); everything they need to show
arrives through the ViewPort and the notification listener.
"""

import asyncio
import logging
from collections import namedtuple
from functools import partial

from . import viewport
from .actions import QUICK_ACTIONS
from .builder import (
    ModelFormState,
    build,
    factory_command,
    migration_command,
    preview,
    require_model_name,
    seed_class_command,
    seeder_command,
)
from .client import ExecutionClient
from .confirm import COMMAND, QUERY, ConfirmationWorkflow
from .errors import ConfigUnavailable, MissingRequiredField
from .gate import AvailabilityGate
from .notify import TOAST_TTL_MS, WARNING, NotificationQueue
from .panels import PANELS, PanelNavigator
from .risk import classify

logger = logging.getLogger(__name__)

Control = namedtuple("Control", "handler cli_required")

DANGEROUS_QUERY_TITLE = "Execute Dangerous Query"
DANGEROUS_QUERY_MESSAGE = "This query may modify or delete data. Are you sure you want to proceed?"
QUERY_PLACEHOLDER = "Results will appear here after executing a query."

# Form inputs and their initial values. All of them are disabled while the
# gate is closed.
DEFAULT_INPUTS = {
    "model-name": "",
    "table-name": "",
    "fields": "",
    "relations": "",
    "indexes": "",
    "opt-timestamps": True,
    "opt-soft-delete": False,
    "opt-migration": False,
    "opt-factory": False,
    "opt-seeder": False,
    "migration-name": "",
    "seeder-name": "",
    "factory-name": "",
    "specific-seeder": "",
    "query-input": "",
}
CLI_INPUTS = tuple(DEFAULT_INPUTS)


class StudioController:
    def __init__(self, transport, view, scheduler=None, ttl_ms=TOAST_TTL_MS,
                 listener=None, spawn=None):
        self.view = view
        self.notifications = NotificationQueue(scheduler, ttl_ms=ttl_ms, listener=listener)
        self.gate = AvailabilityGate(transport, self.notifications)
        self.client = ExecutionClient(transport, self.gate, view, self.notifications)
        self.workflow = ConfirmationWorkflow(
            view, self.client.run_command, self.client.run_query, spawn=spawn
        )
        self.panels = PanelNavigator(view)
        self.inputs = dict(DEFAULT_INPUTS)
        self.controls = self._dispatch_table()

    # ── Dispatch table ─────────────────────────────────────────

    def _dispatch_table(self):
        table = {
            "generate-model": Control(self._generate_model, True),
            "preview-model": Control(self._preview_model, True),
            "generate-migration": Control(
                partial(self._run_named, migration_command, "migration-name", "Migration creation"), True),
            "generate-seeder": Control(
                partial(self._run_named, seeder_command, "seeder-name", "Seeder creation"), True),
            "generate-factory": Control(
                partial(self._run_named, factory_command, "factory-name", "Factory creation"), True),
            "run-seeder-class": Control(self._run_seeder_class, True),
            "execute-query": Control(self._execute_query, True),
            "clear-query": Control(self._clear_query, False),
            "modal-confirm": Control(self.workflow.confirm, False),
            "modal-cancel": Control(self.workflow.cancel, False),
            "modal-backdrop": Control(self.workflow.cancel, False),
        }
        for control_id, action in QUICK_ACTIONS.items():
            table[control_id] = Control(partial(self._quick_action, action), True)
        for panel_id in PANELS:
            table[f"tab-{panel_id}"] = Control(partial(self.panels.switch, panel_id), False)
        return table

    @property
    def cli_controls(self):
        return [cid for cid, control in self.controls.items() if control.cli_required]

    # ── Lifecycle ──────────────────────────────────────────────

    async def start(self):
        """Probe the backend once and lay out the initial view."""
        state = await self.gate.probe()
        self.panels.render()
        if state.present:
            self.view.set_status(viewport.CONFIG_ALERT, viewport.HIDDEN)
            self.view.set_status(viewport.STATUS_BADGE, viewport.SUCCESS)
            self.view.set_output(viewport.STATUS_BADGE, "✓ Ready")
        else:
            self._disable_cli_surface()
        return state

    def _disable_cli_surface(self):
        self.view.set_status(viewport.CONFIG_ALERT, viewport.VISIBLE)
        self.view.set_status(viewport.STATUS_BADGE, viewport.WARNING)
        self.view.set_output(viewport.STATUS_BADGE, "⚠ No Config")
        for control_id in self.cli_controls:
            self.view.set_status(control_id, viewport.DISABLED)
        for input_id in CLI_INPUTS:
            self.view.set_status(input_id, viewport.DISABLED)

    # ── Operator entry points ──────────────────────────────────

    def set_input(self, input_id, value):
        """Store an input value. Returns False if the input is disabled."""
        if input_id not in self.inputs:
            raise KeyError(input_id)
        if input_id in CLI_INPUTS and self.gate.probed and not self.gate.is_available():
            return False
        self.inputs[input_id] = value
        return True

    async def activate(self, control_id):
        control = self.controls[control_id]
        if control.cli_required:
            try:
                self.gate.require()
            except ConfigUnavailable:
                self.gate.warn()
                return None
        result = control.handler()
        if asyncio.iscoroutine(result):
            result = await result
        return result

    async def key_pressed(self, key, ctrl=False, meta=False):
        if key == "Enter" and (ctrl or meta):
            if self.panels.active == "query":
                return await self.activate("execute-query")
            return None
        if key == "Escape":
            return self.workflow.escape()
        return None

    def switch_panel(self, panel_id):
        return self.panels.switch(panel_id)

    def dismiss_toast(self, entry_id):
        return self.notifications.dismiss(entry_id)

    def stage_command(self, command, title, message):
        """Hold a command behind the confirmation modal."""
        return self.workflow.request(COMMAND, command, title, message)

    # ── Handlers ───────────────────────────────────────────────

    def model_form(self):
        i = self.inputs
        return ModelFormState(
            name=i["model-name"],
            table=i["table-name"],
            fields=i["fields"],
            relations=i["relations"],
            indexed=i["indexes"],
            timestamps=bool(i["opt-timestamps"]),
            soft_deletes=bool(i["opt-soft-delete"]),
            migration=bool(i["opt-migration"]),
            factory=bool(i["opt-factory"]),
            seeder=bool(i["opt-seeder"]),
        )

    def _refuse(self, error):
        self.notifications.emit(WARNING, error.title, error.body)

    async def _generate_model(self):
        form = self.model_form()
        try:
            require_model_name(form)
        except MissingRequiredField as e:
            self._refuse(e)
            return None
        return await self.client.run_command(build(form), "Model generation")

    def _preview_model(self):
        try:
            text = preview(self.model_form())
        except MissingRequiredField as e:
            self._refuse(e)
            return None
        self.view.set_output(viewport.GENERATOR_OUTPUT, text)
        return text

    async def _run_named(self, make_command, input_id, display_name):
        try:
            command = make_command(self.inputs[input_id])
        except MissingRequiredField as e:
            self._refuse(e)
            return None
        return await self.client.run_command(command, display_name)

    async def _run_seeder_class(self):
        name = self.inputs["specific-seeder"].strip()
        try:
            command = seed_class_command(name)
        except MissingRequiredField as e:
            self._refuse(e)
            return None
        return await self.client.run_command(command, f"Running {name}")

    async def _quick_action(self, action):
        if action.risky:
            return self.stage_command(action.command, action.title, action.message)
        return await self.client.run_command(action.command, action.display_name)

    async def _execute_query(self):
        query = self.inputs["query-input"].strip()
        if not query:
            self.notifications.emit(WARNING, "Query Required", "Please enter a SQL query.")
            return None
        if classify(query):
            return self.workflow.request(
                QUERY, query, DANGEROUS_QUERY_TITLE, DANGEROUS_QUERY_MESSAGE
            )
        return await self.client.run_query(query)

    def _clear_query(self):
        self.inputs["query-input"] = ""
        self.view.set_output(viewport.QUERY_RESULTS, QUERY_PLACEHOLDER)
        self.view.set_status(viewport.QUERY_RESULTS, viewport.NEUTRAL)
        self.view.set_output(viewport.QUERY_TIME, "")
