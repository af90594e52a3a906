"""gate.py — Session-wide availability of CLI-backed actions.

The backend is asked once whether tideorm.toml exists. Anything other than
a clear yes (including a failed request) leaves the gate closed for the
rest of the session.
"""

import asyncio
import logging
from dataclasses import dataclass

from .errors import ConfigUnavailable, ConnectionFailure
from .notify import WARNING

logger = logging.getLogger(__name__)

CONFIG_CHECK_PATH = "/api/config-check"
WARNING_TITLE = "Configuration Required"
WARNING_BODY = 'Run "tideorm init" to create tideorm.toml first.'


@dataclass(frozen=True)
class ConfigState:
    present: bool = False


class AvailabilityGate:
    def __init__(self, transport, notifications):
        self.transport = transport
        self.notifications = notifications
        self.state = None

    async def probe(self):
        """Query the backend once. Later calls return the first answer."""
        if self.state is not None:
            return self.state
        try:
            data = await asyncio.to_thread(self.transport.get_json, CONFIG_CHECK_PATH)
            present = isinstance(data, dict) and data.get("exists") is True
        except ConnectionFailure as e:
            logger.warning("config check failed: %s", e)
            present = False
        self.state = ConfigState(present=present)
        if not present:
            logger.warning("tideorm.toml not found; CLI features disabled")
        return self.state

    @property
    def probed(self):
        return self.state is not None

    def is_available(self):
        # Closed until the probe has answered.
        return self.state is not None and self.state.present

    def warn(self):
        self.notifications.emit(WARNING, WARNING_TITLE, WARNING_BODY)

    def guard(self):
        """Return True if available, otherwise emit the warning and return False."""
        if self.is_available():
            return True
        self.warn()
        return False

    def require(self):
        if not self.is_available():
            raise ConfigUnavailable()
