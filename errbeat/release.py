"""Release tracking over the error transport."""

import asyncio
from typing import Any, Dict, Optional

import structlog

from .exceptions import ReleaseTrackingError
from .transport import Transport


async def _git(cwd: Optional[str], *args: str) -> str:
    try:
        proc = await asyncio.create_subprocess_exec(
            "git",
            *args,
            cwd=cwd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as e:
        raise ReleaseTrackingError(f"Could not run git: {e}") from e
    stdout, stderr = await proc.communicate()
    if proc.returncode != 0:
        raise ReleaseTrackingError(
            f"git {' '.join(args)} failed: {stderr.decode(errors='replace').strip()}"
        )
    return stdout.decode().strip()


class ReleaseTracker:
    """Notifies the collector about a deployed revision."""

    def __init__(self, transport: Transport, logger: Optional[Any] = None):
        self.transport = transport
        self.logger = logger or structlog.get_logger()

    async def resolve(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Fill in rev and branch from the git checkout in data["cwd"]."""
        cwd = data.get("cwd")
        rev = data.get("rev") or await _git(cwd, "rev-parse", "HEAD")
        branch = data.get("branch") or await _git(cwd, "rev-parse", "--abbrev-ref", "HEAD")
        return {
            "rev": rev,
            "branch": branch,
            "status": data.get("status") or "completed",
        }

    async def track(self, data: Dict[str, Any]) -> Optional[str]:
        release = await self.resolve(data)
        self.logger.debug("Tracking release", **release)
        return await self.transport.send_release(release)
