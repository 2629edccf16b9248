"""Parsers turning raw errors, messages and requests into event parts."""

from typing import Any, Dict, Optional

from starlette.requests import Request

from .frames import extract_frames
from .models import ErrorEvent, ExceptionInfo, HttpInfo, Stacktrace
from .utils import redact_mapping, safe_str


def parse_error(
    exc: BaseException,
    context: Dict[str, Any],
    *,
    limit: Optional[int] = None,
    context_lines: int = 3,
) -> ErrorEvent:
    """
    Build the raw event for `exc`: message, exception info and frames.

    Frames are top-of-stack first. Recognized context keys (`level`,
    `culprit`, `http`, `extra`) are carried over.
    """
    exc_type = type(exc)
    value = safe_str(exc)
    message = f"{exc_type.__name__}: {value}" if value else exc_type.__name__

    return ErrorEvent(
        message=message,
        stacktrace=Stacktrace(
            frames=extract_frames(exc, limit=limit, context_lines=context_lines)
        ),
        level=context.get("level") or "error",
        exception=ExceptionInfo(
            type=exc_type.__name__,
            value=value,
            module=getattr(exc_type, "__module__", None),
        ),
        culprit=context.get("culprit"),
        http=context.get("http"),
        extra=dict(context.get("extra") or {}),
    )


def parse_message(value: Any, context: Dict[str, Any]) -> str:
    """Coerce `value` to the event message and store it in `context`."""
    message = safe_str(value)
    context["message"] = message
    return message


def is_http_request(obj: Any) -> bool:
    return isinstance(obj, Request)


def parse_request(request: Request) -> HttpInfo:
    """Extract the parts of an inbound request worth reporting."""
    client = request.client
    return HttpInfo(
        method=request.method,
        url=str(request.url),
        headers=redact_mapping(request.headers),
        query_string=request.url.query,
        remote_address=client.host if client else None,
        cookies=redact_mapping(request.cookies),
    )
