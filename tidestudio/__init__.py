"""tide-studio — operator console for the TideORM command-line tool.

Builds tideorm commands from form state, classifies SQL by risk, holds
destructive actions behind a confirmation step and forwards everything to
the studio backend.
"""

__version__ = "0.1.0"

from .builder import ModelFormState, build, preview
from .client import ExecutionClient, ExecutionOutcome, Transport
from .confirm import ConfirmationWorkflow, PendingAction
from .controller import StudioController
from .errors import ConfigUnavailable, ConnectionFailure, MissingRequiredField, StudioError
from .gate import AvailabilityGate, ConfigState
from .notify import NotificationQueue, ToastEntry
from .risk import classify

__all__ = [
    "AvailabilityGate",
    "ConfigState",
    "ConfigUnavailable",
    "ConfirmationWorkflow",
    "ConnectionFailure",
    "ExecutionClient",
    "ExecutionOutcome",
    "MissingRequiredField",
    "ModelFormState",
    "NotificationQueue",
    "PendingAction",
    "StudioController",
    "StudioError",
    "ToastEntry",
    "Transport",
    "build",
    "classify",
    "preview",
]
