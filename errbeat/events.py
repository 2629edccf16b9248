"""Notification channel for delivery outcomes."""

from typing import Any, Callable, Dict, List

from .constants import EVENT_ERROR, EVENT_NAMES

Listener = Callable[..., Any]


class Notifier:
    """
    Publish/subscribe for the two delivery outcomes.

    "error" listeners receive the exception of a failed delivery or release
    tracking call; "logged" listeners receive the confirmation URL.
    """

    def __init__(self) -> None:
        self._listeners: Dict[str, List[Listener]] = {name: [] for name in EVENT_NAMES}

    def _check(self, event: str) -> None:
        if event not in self._listeners:
            raise ValueError(
                f"Unknown event {event!r}, expected one of {', '.join(EVENT_NAMES)}"
            )

    def on(self, event: str, listener: Listener) -> None:
        self._check(event)
        self._listeners[event].append(listener)

    def off(self, event: str, listener: Listener) -> None:
        self._check(event)
        if listener in self._listeners[event]:
            self._listeners[event].remove(listener)

    def listeners(self, event: str) -> List[Listener]:
        self._check(event)
        return list(self._listeners[event])

    def remove_all_listeners(self) -> None:
        for listeners in self._listeners.values():
            listeners.clear()

    def emit(self, event: str, *args: Any) -> None:
        """
        Call every listener of `event` in registration order.

        An "error" with nobody listening is raised instead of dropped.
        """
        self._check(event)
        listeners = list(self._listeners[event])
        if event == EVENT_ERROR and not listeners:
            if args and isinstance(args[0], BaseException):
                raise args[0]
            raise RuntimeError("Unhandled errbeat error event")
        for listener in listeners:
            listener(*args)
