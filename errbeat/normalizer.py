"""Event normalization: from a classified capture input to an ErrorEvent."""

import os
import platform
from dataclasses import dataclass
from datetime import datetime
from types import TracebackType
from typing import Any, Dict, List, Optional

from .constants import PACKAGE_ROOT
from .frames import attach_current_stack
from .models import ErrorEvent, MachineInfo, StackFrame
from .parsers import parse_error, parse_message
from .utils import serialize

EXCEPTION = "exception"
MESSAGE = "message"

_UNCAUGHT_ATTR = "__errbeat_uncaught__"

_KNOWN_CONTEXT_KEYS = {"culprit", "level", "extra", "http", "message", "request"}


def mark_uncaught(exc: BaseException) -> None:
    setattr(exc, _UNCAUGHT_ATTR, True)


def is_uncaught(exc: BaseException) -> bool:
    return getattr(exc, _UNCAUGHT_ATTR, False) is True


@dataclass
class CaptureInput:
    """What was handed to the capture call, decided once at entry.

    For messages `error` is a materialized exception carrying the stack of
    the capture call and `message` holds the coerced text.
    """

    kind: str
    error: BaseException
    message: Optional[str] = None

    @property
    def is_message(self) -> bool:
        return self.kind == MESSAGE


def classify(
    value: Any, context: Dict[str, Any], stack: Optional[TracebackType] = None
) -> CaptureInput:
    """
    Sort `value` into an exception or a message capture.

    A message error gets `stack` as its traceback. Without one it gets the
    live stack, whose newest frame is the frame that called this function.
    Either way that newest frame is expected to be the capture entry point.
    """
    if isinstance(value, BaseException):
        return CaptureInput(kind=EXCEPTION, error=value)
    message = parse_message(value, context)
    if stack is not None:
        error = Exception(message).with_traceback(stack)
    else:
        error = attach_current_stack(Exception(message), depth=2)
    return CaptureInput(kind=MESSAGE, error=error, message=message)


def _is_own_frame(frame: StackFrame) -> bool:
    return frame.abs_path.startswith(PACKAGE_ROOT + os.sep)


def detect_culprit(frames: List[StackFrame]) -> Optional[str]:
    """
    Name the first in-app frame of a top-first frame list.

    errbeat's own frames are never the culprit.
    """
    for frame in frames:
        if frame.in_app and not _is_own_frame(frame):
            return f"{frame.module or frame.filename} in {frame.function}"
    return None


class Normalizer:
    """Builds and finalizes error events for one client."""

    def __init__(
        self,
        hostname: str,
        stack_trace_limit: Optional[int] = None,
        context_lines: int = 3,
    ) -> None:
        self.hostname = hostname
        self.stack_trace_limit = stack_trace_limit
        self.context_lines = context_lines

    def extract(self, error: BaseException, context: Dict[str, Any]) -> ErrorEvent:
        return parse_error(
            error,
            context,
            limit=self.stack_trace_limit,
            context_lines=self.context_lines,
        )

    def build(self, capture: CaptureInput, context: Dict[str, Any]) -> ErrorEvent:
        """
        Run the extractor and settle message, culprit and extra fields.

        Frames of the returned event are still top-of-stack first.
        Extractor errors propagate unchanged.
        """
        custom_culprit = "culprit" in context
        event = self.extract(capture.error, context)

        if not custom_culprit:
            event.culprit = detect_culprit(event.stacktrace.frames)

        if capture.is_message:
            # Messages carry no exception, and the culprit search would only
            # land on the capture call itself. The top frame is the entry
            # point the message came through
            event.message = capture.message
            event.exception = None
            if not custom_culprit:
                event.culprit = None
            if event.stacktrace.frames:
                event.stacktrace.frames.pop(0)

        for key, value in context.items():
            if key not in _KNOWN_CONTEXT_KEYS:
                event.extra.setdefault(key, value)
        return event

    def finalize(self, event: ErrorEvent, captured_at: datetime) -> ErrorEvent:
        """Put frames in wire order and stamp machine, runtime and time."""
        event.stacktrace.frames.reverse()
        event.machine = MachineInfo(hostname=self.hostname)
        extra = dict(event.extra)
        extra["python"] = platform.python_version()
        event.extra = serialize(extra)
        event.timestamp = captured_at.isoformat()
        return event
