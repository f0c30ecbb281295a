"""
Download use case.

Fetches a finished artifact as bytes so a front end can hand it to the user as
a local file. The URL is cache-busted with a `t=<epoch ms>` parameter. When the
fetch fails the result falls back to the original remote URL instead of
failing the interaction.
"""

import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from imagefx.core import (
    ensure_directory,
    get_logger,
    make_download_filename,
    DownloadFailed,
    TransportError,
)
from ..transport import ApiTransport
from .base import UseCase

logger = get_logger(__name__, component="download")


def cache_busted(url: str, timestamp_ms: Optional[int] = None) -> str:
    stamp = timestamp_ms if timestamp_ms is not None else int(time.time() * 1000)
    separator = "&" if "?" in url else "?"
    return f"{url}{separator}t={stamp}"


@dataclass
class DownloadResult:
    """Either local bytes (`fallback=False`) or the remote URL to open directly."""
    url: str
    filename: str
    content: Optional[bytes] = field(default=None, repr=False)
    content_type: Optional[str] = None
    fallback: bool = False

    def save(self, directory: Path) -> Path:
        if self.content is None:
            raise DownloadFailed(f"Nothing to save; open {self.url} instead")
        target = ensure_directory(Path(directory)) / self.filename
        target.write_bytes(self.content)
        return target


class DownloadUseCase(UseCase[str, DownloadResult]):

    def __init__(self, transport: ApiTransport):
        self.transport = transport

    async def fetch(self, artifact_url: str) -> DownloadResult:
        """Fetch the artifact; raises DownloadFailed."""
        try:
            content, content_type = await self.transport.fetch_bytes(cache_busted(artifact_url))
        except TransportError as e:
            raise DownloadFailed(f"Direct download failed: {e.user_message}") from e
        return DownloadResult(
            url=artifact_url,
            filename=make_download_filename(),
            content=content,
            content_type=content_type,
        )

    async def execute(self, request: str) -> DownloadResult:
        try:
            return await self.fetch(request)
        except DownloadFailed as e:
            logger.warning("Download failed, falling back to remote URL", extra={
                "url": request,
                "error": str(e),
            })
            return DownloadResult(url=request, filename=make_download_filename(), fallback=True)
