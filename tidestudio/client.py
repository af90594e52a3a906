"""client.py — Talk to the studio backend and render what comes back.

Stdlib HTTP (urllib) run off the event loop in a worker thread. Two request
shapes: CLI commands (/api/execute) and SQL queries (/api/query).
"""

import asyncio
import json
import logging
import time
from dataclasses import dataclass
from http.client import HTTPException
from typing import Optional
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from . import viewport
from .builder import TOOL
from .errors import ConnectionFailure
from .notify import ERROR, SUCCESS

logger = logging.getLogger(__name__)

EXECUTE_PATH = "/api/execute"
QUERY_PATH = "/api/query"

APPLICATION = "application"
CONNECTION = "connection"
CONFIG = "config"

CONNECTION_TITLE = "Connection Error"
CONNECTION_BODY = "Failed to communicate with the server."


# ── HTTP Transport ─────────────────────────────────────────────


class Transport:
    """Blocking JSON-over-HTTP calls against one base URL.

    Every failure to obtain a JSON object is raised as ConnectionFailure.
    """

    def __init__(self, base_url, timeout=None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def _send(self, req):
        try:
            with urlopen(req, timeout=self.timeout) as resp:
                raw = resp.read().decode("utf-8")
        except HTTPError as e:
            # Error statuses still carry a JSON body from the studio backend.
            try:
                raw = e.read().decode("utf-8", errors="replace") if e.fp else ""
            except (HTTPException, OSError):
                raw = ""
            if not raw:
                raise ConnectionFailure(f"HTTP {e.code}") from e
        except (URLError, OSError) as e:
            raise ConnectionFailure(str(getattr(e, "reason", e))) from e
        except HTTPException as e:
            raise ConnectionFailure(f"Malformed HTTP response: {e!r}") from e
        except UnicodeDecodeError as e:
            raise ConnectionFailure("Response is not valid UTF-8") from e
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise ConnectionFailure("Invalid JSON response") from e
        if not isinstance(data, dict):
            raise ConnectionFailure("Unexpected response shape")
        return data

    def get_json(self, path):
        req = Request(f"{self.base_url}{path}", method="GET")
        return self._send(req)

    def post_json(self, path, body):
        data = json.dumps(body).encode("utf-8")
        req = Request(
            f"{self.base_url}{path}",
            data=data,
            headers={"Content-Type": "application/json"},
            method="POST",
        )
        return self._send(req)


# ── Outcomes ───────────────────────────────────────────────────


@dataclass
class ExecutionOutcome:
    success: bool
    output: str = ""
    error_message: Optional[str] = None
    elapsed_ms: Optional[float] = None
    failure: Optional[str] = None


def region_for_command(command):
    """Pick the display region a command's output belongs in."""
    if command.startswith("make") or "generate" in command:
        return viewport.GENERATOR_OUTPUT
    if command.startswith("migrate"):
        return viewport.MIGRATION_OUTPUT
    if command.startswith("db seed") or "seeder" in command:
        return viewport.SEEDER_OUTPUT
    if command.startswith("db"):
        return viewport.DATABASE_OUTPUT
    return viewport.GENERATOR_OUTPUT


def _parse_reply(data, text_key):
    if "success" not in data:
        raise ConnectionFailure("Malformed response: missing 'success'")
    success = data.get("success") is True
    text = data.get(text_key) or ""
    error = data.get("error")
    return success, str(text), (str(error) if error else None)


# ── Execution Client ───────────────────────────────────────────


class ExecutionClient:
    def __init__(self, transport, gate, view, notifications, clock=time.perf_counter):
        self.transport = transport
        self.gate = gate
        self.view = view
        self.notifications = notifications
        self.clock = clock

    async def run_command(self, command, display_name=None):
        """POST a command to /api/execute and render the result."""
        if not self.gate.guard():
            return ExecutionOutcome(
                success=False, error_message="Configuration required", failure=CONFIG
            )

        display_name = display_name or command
        region = region_for_command(command)
        self.view.set_output(region, f"Executing: {TOOL} {command}\n\nPlease wait...")

        try:
            data = await asyncio.to_thread(
                self.transport.post_json, EXECUTE_PATH, {"command": command}
            )
            success, output, error = _parse_reply(data, "output")
        except ConnectionFailure as e:
            logger.error("command %r: connection error: %s", command, e)
            self.view.set_output(region, f"Error: {e}")
            self.notifications.emit(ERROR, CONNECTION_TITLE, CONNECTION_BODY)
            return ExecutionOutcome(success=False, error_message=str(e), failure=CONNECTION)

        self.view.set_output(region, output or error or "Command completed.")
        if success:
            logger.info("command %r succeeded", command)
            self.notifications.emit(SUCCESS, "Success", f"{display_name} completed successfully.")
            return ExecutionOutcome(success=True, output=output)

        logger.warning("command %r failed: %s", command, error)
        self.notifications.emit(ERROR, "Error", error or "Command failed.")
        return ExecutionOutcome(
            success=False, output=output, error_message=error, failure=APPLICATION
        )

    async def run_query(self, query):
        """POST a query to /api/query; always reports elapsed time."""
        self.view.set_output(viewport.QUERY_RESULTS, "Executing query...")
        self.view.set_status(viewport.QUERY_RESULTS, viewport.NEUTRAL)

        start = self.clock()
        try:
            data = await asyncio.to_thread(
                self.transport.post_json, QUERY_PATH, {"query": query}
            )
            success, result, error = _parse_reply(data, "result")
        except ConnectionFailure as e:
            elapsed = (self.clock() - start) * 1000.0
            self._show_elapsed(elapsed)
            logger.error("query: connection error: %s", e)
            self.view.set_output(viewport.QUERY_RESULTS, f"Connection Error: {e}")
            self.view.set_status(viewport.QUERY_RESULTS, viewport.ERROR)
            self.notifications.emit(ERROR, CONNECTION_TITLE, CONNECTION_BODY)
            return ExecutionOutcome(
                success=False, error_message=str(e), elapsed_ms=elapsed, failure=CONNECTION
            )

        elapsed = (self.clock() - start) * 1000.0
        self._show_elapsed(elapsed)

        if success:
            self.view.set_output(
                viewport.QUERY_RESULTS,
                result or "Query executed successfully. No results returned.",
            )
            self.view.set_status(viewport.QUERY_RESULTS, viewport.SUCCESS)
            self.notifications.emit(SUCCESS, "Query Executed", "Query completed successfully.")
            return ExecutionOutcome(success=True, output=result, elapsed_ms=elapsed)

        message = error or "Query failed."
        logger.warning("query failed: %s", message)
        self.view.set_output(viewport.QUERY_RESULTS, f"Error: {message}")
        self.view.set_status(viewport.QUERY_RESULTS, viewport.ERROR)
        self.notifications.emit(ERROR, "Query Failed", message)
        return ExecutionOutcome(
            success=False, output=result, error_message=message,
            elapsed_ms=elapsed, failure=APPLICATION,
        )

    def _show_elapsed(self, elapsed_ms):
        self.view.set_output(viewport.QUERY_TIME, f"Executed in {elapsed_ms:.2f}ms")
