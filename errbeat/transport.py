"""Delivery of events to the collector."""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import httpx
import structlog

from .constants import DEFAULT_API_URL, USER_AGENT
from .exceptions import TransportError


class Transport(ABC):
    """Abstract base class for transports."""

    @abstractmethod
    async def send_error(self, event: Dict[str, Any]) -> Optional[str]:
        """Deliver an error event.

        Args:
            event: Finalized event, as a JSON-serializable mapping

        Returns:
            Confirmation URL of the stored event, None when the collector
            gave none

        Raises:
            TransportError: The event was not accepted
        """

    @abstractmethod
    async def send_release(self, release: Dict[str, Any]) -> Optional[str]:
        """Deliver a release notification.

        Args:
            release: Mapping with rev, branch and status

        Returns:
            Confirmation URL of the stored release, None when the collector
            gave none

        Raises:
            TransportError: The release was not accepted
        """


class HttpTransport(Transport):
    """Transport posting JSON to the collector's intake API."""

    def __init__(
        self,
        app_id: str,
        organization_id: str,
        secret_token: str,
        api_url: str = DEFAULT_API_URL,
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
        logger: Optional[Any] = None,
    ):
        self.app_id = app_id
        self.organization_id = organization_id
        self.secret_token = secret_token
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self.logger = logger or structlog.get_logger()
        self._client = client

    def _endpoint(self, kind: str) -> str:
        return (
            f"{self.api_url}/api/v1/organizations/{self.organization_id}"
            f"/apps/{self.app_id}/{kind}/"
        )

    @property
    def headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.secret_token}",
            "Content-Type": "application/json",
            "User-Agent": USER_AGENT,
        }

    async def send_error(self, event: Dict[str, Any]) -> Optional[str]:
        return await self._post("errors", event)

    async def send_release(self, release: Dict[str, Any]) -> Optional[str]:
        return await self._post("releases", release)

    async def _post(self, kind: str, payload: Dict[str, Any]) -> Optional[str]:
        url = self._endpoint(kind)
        try:
            if self._client is not None:
                response = await self._client.post(url, json=payload, headers=self.headers)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.post(url, json=payload, headers=self.headers)
        except httpx.HTTPError as e:
            raise TransportError(f"Could not reach {url}: {e}") from e

        if not response.is_success:
            raise TransportError(
                f"Unexpected response code from collector: {response.status_code}",
                status_code=response.status_code,
                body=response.text,
            )

        location = response.headers.get("location")
        if not location:
            try:
                body = response.json()
            except ValueError:
                body = None
            location = body.get("url") if isinstance(body, dict) else None
        self.logger.debug("Payload delivered", kind=kind, status_code=response.status_code)
        return location or None
