"""
Handles the low-level streaming download of Julia archives over HTTP.
"""

import asyncio
import logging
import os
from pathlib import Path

import aiofiles
import aiohttp

from jlup.cli.progress_manager import ProgressManager
from jlup.exceptions import DownloadError

log = logging.getLogger(__name__)


class Downloader:
    """A streaming file downloader with retry logic and progress reporting."""

    CHUNK_SIZE = 262144  # 256 KB

    def __init__(
        self,
        progress_manager: ProgressManager | None = None,
        max_attempts: int = 3,
        base_delay: float = 1.5,
    ):
        self.progress_manager = progress_manager
        self.max_attempts = max_attempts
        self.base_delay = base_delay

    async def download_file(
        self, url: str, destination_path: Path, description: str = "Downloading"
    ) -> None:
        """
        Streams ``url`` into ``destination_path``, updating the progress bar.

        Raises:
            DownloadError: If every attempt failed.
        """
        timeout = aiohttp.ClientTimeout(total=None, sock_connect=15, sock_read=90)
        last_exception = None
        async with aiohttp.ClientSession(timeout=timeout) as session:
            for attempt in range(1, self.max_attempts + 1):
                task_id = None
                try:
                    async with session.get(url, allow_redirects=True) as response:
                        response.raise_for_status()

                        content_length = response.headers.get("Content-Length")
                        total = int(content_length) if content_length else None
                        if self.progress_manager:
                            task_id = self.progress_manager.add_download_task(
                                description, total=total
                            )

                        async with aiofiles.open(destination_path, "wb") as f:
                            bytes_downloaded = 0
                            async for chunk in response.content.iter_chunked(
                                self.CHUNK_SIZE
                            ):
                                await f.write(chunk)
                                bytes_downloaded += len(chunk)
                                if self.progress_manager:
                                    self.progress_manager.update_task_progress(
                                        task_id, completed=bytes_downloaded
                                    )
                    log.debug(
                        f"Downloaded {bytes_downloaded} bytes from {url} to "
                        f"'{os.path.basename(destination_path)}'."
                    )
                    return
                except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                    last_exception = e
                    log.debug(
                        f"Download attempt {attempt}/{self.max_attempts} for "
                        f"{url} failed: {e}. Retrying..."
                    )
                    if attempt < self.max_attempts:
                        await asyncio.sleep(self.base_delay * (2 ** (attempt - 1)))
                finally:
                    if self.progress_manager:
                        self.progress_manager.remove_task(task_id)

        raise DownloadError(
            f"Failed to download from url '{url}': {last_exception}"
        ) from last_exception

    def fetch(self, url: str, destination_path: Path, description: str = "Downloading") -> None:
        """Downloads a file, blocking the calling thread until it is complete."""
        asyncio.run(self.download_file(url, destination_path, description))
