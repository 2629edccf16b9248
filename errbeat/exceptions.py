"""Exceptions raised by errbeat."""

from typing import Optional


class ErrbeatError(Exception):
    """Base class for errbeat errors."""


class TransportError(ErrbeatError):
    """The collector could not be reached or rejected the payload."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        body: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class ReleaseTrackingError(ErrbeatError):
    """Release information could not be resolved."""


class CaptureFrameError(Exception):
    """Never raised; records the stack at a capture call site."""
