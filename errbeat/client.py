"""The errbeat client: capture, dispatch and uncaught exception handling."""

import asyncio
import traceback
from datetime import datetime, timezone
from types import TracebackType
from typing import Any, Callable, Dict, Optional, Union

from .config import Settings
from .constants import EVENT_ERROR, EVENT_LOGGED
from .events import Listener, Notifier
from .exceptions import CaptureFrameError
from .frames import current_traceback
from .guard import OnHandled, UncaughtExceptionGuard
from .log import get_logger, log_method
from .middleware import ErrbeatMiddleware
from .models import ErrorEvent
from .normalizer import CaptureInput, Normalizer, classify, is_uncaught
from .parsers import is_http_request, parse_request
from .release import ReleaseTracker
from .transport import HttpTransport, Transport

Callback = Callable[[Optional[BaseException], Optional[str]], Any]


class Client:
    """
    Captures errors and messages and reports them to the collector.

    Construct once at startup. A client built with ``active=False`` or
    without the full set of credentials never sends anything, and never
    becomes active again.

    Example usage:
        >>> client = Client(app_id="...", organization_id="...", secret_token="...")
        >>> try:
        ...     handle()
        ... except Exception as e:
        ...     url = await client.capture_error(e, {"extra": {"user": "alice"}})
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        *,
        transport: Optional[Transport] = None,
        **options: Any,
    ) -> None:
        settings = settings or Settings(**options)
        self.settings = settings

        self.app_id = settings.app_id
        self.organization_id = settings.organization_id
        self.secret_token = (
            settings.secret_token.get_secret_value() if settings.secret_token else None
        )
        self.active = settings.active
        self.logger = get_logger(settings.client_log_level, settings.logger)
        self.hostname = settings.hostname
        self.stack_trace_limit = settings.stack_trace_limit
        self.capture_exceptions = settings.capture_exceptions
        self.exception_log_level = settings.exception_log_level
        self.filter = settings.filter
        self.ff_capture_frame = settings.ff_capture_frame

        self.normalizer = Normalizer(self.hostname, self.stack_trace_limit)
        self.events = Notifier()
        self.events.on(EVENT_ERROR, self._internal_error_logger)
        self.events.on(EVENT_LOGGED, self._logged_logger)
        self.guard = UncaughtExceptionGuard(self)

        self._transport: Optional[Transport] = None
        self._release_tracker: Optional[ReleaseTracker] = None

        if not self.active:
            self.logger.info("errbeat logging is disabled for now")
            return
        if not settings.has_credentials:
            self.logger.info(
                "[WARNING] errbeat logging is disabled. To enable, specify "
                "organization id, app id and secret token"
            )
            self.active = False
            return

        self._transport = transport or HttpTransport(
            app_id=self.app_id,
            organization_id=self.organization_id,
            secret_token=self.secret_token,
            api_url=settings.api_url,
            timeout=settings.timeout,
            logger=self.logger,
        )

        if self.capture_exceptions:
            self.handle_uncaught_exceptions()

    @property
    def transport(self) -> Optional[Transport]:
        return self._transport

    # ---- notifications -------------------------------------------------------

    def on(self, event: str, listener: Listener) -> None:
        self.events.on(event, listener)

    def off(self, event: str, listener: Listener) -> None:
        self.events.off(event, listener)

    def _internal_error_logger(self, err: BaseException) -> None:
        self.logger.info("Could not notify errbeat!")
        self.logger.error(
            "".join(traceback.format_exception(type(err), err, err.__traceback__))
        )

    def _logged_logger(self, url: Optional[str]) -> None:
        self.logger.info("Error logged successfully", url=url)

    # ---- capture -------------------------------------------------------------

    async def capture_error(
        self,
        err: Any,
        context: Union[Dict[str, Any], Callback, None] = None,
        callback: Optional[Callback] = None,
        *,
        _call_site: Optional[TracebackType] = None,
    ) -> Optional[str]:
        """
        Report an exception, or any other value as a message.

        Parameters:
          err: the exception to report. Anything else is reported as a
            message built from str(err).
          context: optional mapping with `extra`, `culprit`, `level` and a
            starlette `request`; other keys end up in `extra`. Not modified.
            May be the callback when no context is needed.
          callback: called once with (error, url) when the capture is done.
            `error` is the extraction or delivery failure, `url` the
            confirmation URL. `url` is None when nothing was sent or the
            collector returned no location.

        Returns:
          The confirmation URL, or None.
        """
        captured_at = datetime.now(timezone.utc)
        # Newest frame is the entry point, the next one the capture site
        call_site = _call_site if _call_site is not None else current_traceback(depth=1)

        if callable(context) and callback is None:
            callback, context = context, None
        context = dict(context or {})
        request = context.pop("request", None)
        if request is not None and is_http_request(request):
            context["http"] = parse_request(request)

        level = log_method(self.logger, context.get("level") or self.exception_log_level)

        capture = classify(err, context, call_site)
        capture_frame = None
        if not capture.is_message and self.ff_capture_frame and not is_uncaught(err):
            capture_frame = CaptureFrameError().with_traceback(call_site)

        try:
            event = self.normalizer.build(capture, context)
            if capture.is_message:
                level(capture.message)
            else:
                level("".join(traceback.format_exception(type(err), err, err.__traceback__)))

            if capture_frame is not None and not event.stacktrace.has_in_app_frame():
                self._add_capture_frame(event, capture_frame)
        except Exception as exc:
            if callback is None:
                raise
            callback(exc, None)
            return None

        event = self.normalizer.finalize(event, captured_at)
        return await self._dispatch(capture, event, callback)

    capture_message = capture_error

    def _add_capture_frame(self, event: ErrorEvent, capture_frame: BaseException) -> None:
        # the first frame is the entry point itself
        frames = self.normalizer.extract(capture_frame, {}).stacktrace.frames
        if len(frames) > 1:
            event.stacktrace.frames.insert(0, frames[1])

    async def _dispatch(
        self,
        capture: CaptureInput,
        event: Union[ErrorEvent, Dict[str, Any], None],
        callback: Optional[Callback],
    ) -> Optional[str]:
        if not self.active or self._transport is None:
            if callback is not None:
                callback(None, None)
            return None

        if self.filter is not None:
            event = self.filter(capture.error, event)
            if event is None:
                self.logger.debug("Event dropped by filter")
                if callback is not None:
                    callback(None, None)
                return None

        payload = event.to_dict() if isinstance(event, ErrorEvent) else dict(event)
        try:
            url = await self._transport.send_error(payload)
        except Exception as exc:
            self.events.emit(EVENT_ERROR, exc)
            if callback is not None:
                callback(exc, None)
            return None

        self.events.emit(EVENT_LOGGED, url)
        if callback is not None:
            callback(None, url)
        return url

    def capture_error_nowait(
        self,
        err: Any,
        context: Union[Dict[str, Any], Callback, None] = None,
        callback: Optional[Callback] = None,
    ) -> Union["asyncio.Task[Optional[str]]", Optional[str]]:
        """
        capture_error() for synchronous code.

        Inside a running event loop the capture is scheduled and its task is
        returned; otherwise it runs to completion and the URL is returned.
        """
        # The coroutine runs under the event loop, so the caller's stack has
        # to be taken here
        coro = self.capture_error(
            err, context, callback, _call_site=current_traceback(depth=1)
        )
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return asyncio.run(coro)
        return loop.create_task(coro)

    # ---- uncaught exceptions -------------------------------------------------

    def handle_uncaught_exceptions(self, on_handled: Optional[OnHandled] = None) -> None:
        """
        Report uncaught exceptions.

        `on_handled` is called with (exception, url) once the report is done.
        Without it the process is terminated with exit status 1, so if you
        pass one you must end the process yourself.
        """
        self.guard.install(on_handled)

    def remove_uncaught_exception_handler(self) -> None:
        self.guard.remove()

    # ---- releases ------------------------------------------------------------

    async def track_release(
        self,
        data: Optional[Dict[str, Any]] = None,
        callback: Optional[Callable[[Optional[BaseException]], Any]] = None,
    ) -> Optional[str]:
        """
        Tell the collector a revision was deployed.

        `data` may hold `rev`, `branch`, `status` and `cwd`; missing rev and
        branch are read from the git checkout in `cwd`.
        """
        data = dict(data or {})
        if "path" in data:
            self.logger.warning("Detected use of deprecated path option to track_release")
            data.setdefault("cwd", data.pop("path"))

        if not self.active or self._transport is None:
            self.logger.info("Release tracking is disabled")
            if callback is not None:
                callback(None)
            return None

        if self._release_tracker is None:
            self._release_tracker = ReleaseTracker(self._transport, logger=self.logger)

        try:
            url = await self._release_tracker.track(data)
        except Exception as exc:
            if callback is not None:
                callback(exc)
            self.events.emit(EVENT_ERROR, exc)
            return None

        if callback is not None:
            callback(None)
        return url

    track_deployment = track_release

    # ---- web -----------------------------------------------------------------

    def middleware(self, app: Any) -> ErrbeatMiddleware:
        return ErrbeatMiddleware(app, client=self)
