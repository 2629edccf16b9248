"""Process-wide uncaught exception listeners.

Mirrors a process-level "uncaught exception" event on top of
``sys.excepthook`` and ``threading.excepthook``: both hooks are swapped for
dispatchers while at least one listener is registered and restored when the
last one goes away.
"""

import sys
import threading
from types import TracebackType
from typing import Callable, List, Optional, Type

UncaughtListener = Callable[[BaseException], None]

_listeners: List[UncaughtListener] = []
_previous_hook: Optional[Callable] = None
_previous_thread_hook: Optional[Callable] = None


def _dispatch(
    exc_type: Type[BaseException],
    exc: BaseException,
    tb: Optional[TracebackType],
) -> None:
    # KeyboardInterrupt and friends keep their default behaviour
    if not _listeners or not isinstance(exc, Exception):
        hook = _previous_hook or sys.__excepthook__
        hook(exc_type, exc, tb)
        return
    for listener in list(_listeners):
        listener(exc)


def _dispatch_thread(args: "threading.ExceptHookArgs") -> None:
    exc = args.exc_value
    if not _listeners or not isinstance(exc, Exception):
        hook = _previous_thread_hook or threading.__excepthook__
        hook(args)
        return
    for listener in list(_listeners):
        listener(exc)


def add_listener(listener: UncaughtListener) -> None:
    global _previous_hook, _previous_thread_hook
    if sys.excepthook is not _dispatch:
        _previous_hook = sys.excepthook
        sys.excepthook = _dispatch
    if threading.excepthook is not _dispatch_thread:
        _previous_thread_hook = threading.excepthook
        threading.excepthook = _dispatch_thread
    _listeners.append(listener)


def remove_listener(listener: UncaughtListener) -> None:
    global _previous_hook, _previous_thread_hook
    if listener in _listeners:
        _listeners.remove(listener)
    if _listeners:
        return
    if sys.excepthook is _dispatch:
        sys.excepthook = _previous_hook or sys.__excepthook__
        _previous_hook = None
    if threading.excepthook is _dispatch_thread:
        threading.excepthook = _previous_thread_hook or threading.__excepthook__
        _previous_thread_hook = None


def listeners() -> List[UncaughtListener]:
    return list(_listeners)
