"""
File upload storage.

Files land in the configured upload directory under a timestamped name and
are served back from ``upload_url_prefix``. Contents are stored as-is.
"""

import re
import time
import uuid
from pathlib import Path
from typing import Optional, Union

from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from artibrain.config import get_settings
from artibrain.kernel.errors import FORBIDDEN, INVALID_REQUEST, Failure
from artibrain.kernel.events.event_store import EventStore
from artibrain.kernel.identity.principal import Principal
from artibrain.kernel.models.event_log import EventType
from artibrain.kernel.permissions.policy import Action, ResourceKind, authorize_principal
from artibrain.logging_config import get_logger

logger = get_logger(__name__)


def safe_filename(filename: Optional[str]) -> str:
    """Strip any directory part and characters that don't belong in a URL."""
    name = Path(filename or "").name
    name = re.sub(r"[^\w.-]+", "-", name).strip(".-")
    return name or "upload"


class UploadService:
    """Stores files for use in posts (featured images, inline media)."""

    def __init__(
        self,
        session: AsyncSession,
        upload_dir: Optional[str] = None,
        url_prefix: Optional[str] = None,
        max_bytes: Optional[int] = None,
    ):
        settings = get_settings()
        self.session = session
        self.event_store = EventStore(session)
        self.upload_dir = Path(upload_dir or settings.upload_dir)
        self.url_prefix = (url_prefix or settings.upload_url_prefix).rstrip("/")
        self.max_bytes = max_bytes or settings.max_upload_bytes

    async def read_upload(self, file) -> bytes:
        """
        Read an incoming upload, stopping one byte past ``max_bytes``.

        Anything longer than the limit comes back one byte too long, which
        ``store`` rejects, so an oversized body is never read into memory in full.
        """
        return await file.read(self.max_bytes + 1)

    async def store(
        self,
        principal: Optional[Principal],
        filename: Optional[str],
        data: bytes,
        ip_address: Optional[str] = None,
    ) -> Union[str, Failure]:
        """
        Save an uploaded file.

        Uploading counts as part of writing a post, so it needs the
        policy's create permission on posts.

        Returns:
            The public URL of the stored file, FORBIDDEN, or INVALID_REQUEST
            for an empty or oversized file
        """
        if principal is None or not authorize_principal(principal, Action.CREATE, ResourceKind.POST).allowed:
            return FORBIDDEN
        if not data or len(data) > self.max_bytes:
            return INVALID_REQUEST

        stored_name = f"{int(time.time() * 1000)}-{safe_filename(filename)}"
        target = self.upload_dir / stored_name
        await run_in_threadpool(self._write, target, data)

        url = f"{self.url_prefix}/{stored_name}"
        await self.event_store.log(
            event_type=EventType.FILE_UPLOADED,
            entity_type="file",
            entity_id=uuid.uuid4(),
            user_id=principal.id,
            payload={"url": url, "size": len(data)},
            ip_address=ip_address,
        )
        logger.info("File uploaded", extra={"url": url, "size": len(data), "user_id": principal.id})
        return url

    @staticmethod
    def _write(target: Path, data: bytes) -> None:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)
