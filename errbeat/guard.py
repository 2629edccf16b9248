"""Uncaught exception interception."""

import os
import sys
from typing import TYPE_CHECKING, Callable, Optional

from . import hooks
from .normalizer import mark_uncaught

if TYPE_CHECKING:
    from .client import Client

OnHandled = Callable[[BaseException, Optional[str]], None]


class UncaughtExceptionGuard:
    """
    Reports uncaught exceptions of one client, then ends the process.

    At most one listener per guard is registered at a time. Supplying
    `on_handled` to install() hands the decision about terminating the
    process to the caller; without it the process exits with status 1 once
    the report has been attempted. Exceptions escaping worker threads are
    handled the same way as those of the main thread.
    """

    def __init__(self, client: "Client") -> None:
        self._client = client
        self._listener: Optional[hooks.UncaughtListener] = None

    @property
    def installed(self) -> bool:
        return self._listener is not None

    def install(self, on_handled: Optional[OnHandled] = None) -> None:
        self.remove()
        client = self._client

        def listener(exc: BaseException) -> None:
            client.logger.debug("Caught unhandled exception", error=repr(exc))

            # The process is about to end, so listeners registered earlier
            # can't be relied upon; only the internal error logger stays
            client.events.remove_all_listeners()
            client.events.on("error", client._internal_error_logger)

            mark_uncaught(exc)

            def done(err: Optional[BaseException], url: Optional[str]) -> None:
                if err is not None:
                    client._internal_error_logger(err)
                elif url:
                    client.logger.info("Error logged successfully", url=url)
                else:
                    client.logger.info("Uncaught exception handled without a confirmation url")
                if on_handled is not None:
                    on_handled(exc, url)
                else:
                    self._terminate()

            client.capture_error_nowait(
                exc, {"level": client.exception_log_level}, done
            )

        self._listener = listener
        hooks.add_listener(listener)

    def remove(self) -> None:
        if self._listener is None:
            return
        hooks.remove_listener(self._listener)
        self._listener = None

    def _terminate(self) -> None:
        sys.stderr.flush()
        os._exit(1)
