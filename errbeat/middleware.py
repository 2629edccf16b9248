"""Starlette middleware reporting request errors."""

from typing import TYPE_CHECKING

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

if TYPE_CHECKING:
    from .client import Client


class ErrbeatMiddleware(BaseHTTPMiddleware):
    """Reports exceptions escaping the app, with the request attached.

    The exception is re-raised after reporting so the app's own error
    handling still runs.

    Usage:
        app.add_middleware(ErrbeatMiddleware, client=client)
    """

    def __init__(self, app: ASGIApp, client: "Client") -> None:
        super().__init__(app)
        self.client = client

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:
            await self.client.capture_error(exc, {"request": request})
            raise
