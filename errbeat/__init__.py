"""
errbeat - An in-process error capture agent.

This library captures exceptions, messages and uncaught exceptions, turns
them into structured error events with a stack trace and delivers them to a
remote collector.

Example usage:
    >>> import errbeat
    >>> client = errbeat.Client(
    ...     app_id="...", organization_id="...", secret_token="..."
    ... )
    >>> try:
    ...     raise ValueError("Something went wrong")
    ... except Exception as e:
    ...     client.capture_error_nowait(e, {"extra": {"user": "alice"}})
"""

from .constants import REDACT_DEFAULT_KEYS, VERSION
from .models import (
    StackFrame,
    Stacktrace,
    ExceptionInfo,
    HttpInfo,
    MachineInfo,
    ErrorEvent,
)
from .config import Settings
from .exceptions import ErrbeatError, TransportError, ReleaseTrackingError
from .events import Notifier
from .normalizer import CaptureInput, Normalizer, classify, detect_culprit
from .guard import UncaughtExceptionGuard
from .transport import Transport, HttpTransport
from .release import ReleaseTracker
from .middleware import ErrbeatMiddleware
from .log import configure_logging
from .client import Client

__version__ = VERSION
__author__ = "errbeat"
__email__ = ""
__description__ = "An in-process error capture agent"

# Main API exports
__all__ = [
    # Core functionality
    "Client",
    "Settings",
    "UncaughtExceptionGuard",
    "Normalizer",
    "CaptureInput",
    "classify",
    "detect_culprit",
    "configure_logging",

    # Data models
    "ErrorEvent",
    "StackFrame",
    "Stacktrace",
    "ExceptionInfo",
    "HttpInfo",
    "MachineInfo",

    # Delivery
    "Notifier",
    "Transport",
    "HttpTransport",
    "ReleaseTracker",
    "ErrbeatMiddleware",

    # Errors
    "ErrbeatError",
    "TransportError",
    "ReleaseTrackingError",

    # Constants
    "REDACT_DEFAULT_KEYS",

    # Version info
    "__version__",
]
