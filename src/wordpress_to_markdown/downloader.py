"""Download post images to disk."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Literal
from urllib.parse import urlparse

import aiofiles
import httpx

from wordpress_to_markdown.config import Settings
from wordpress_to_markdown.merge import filename_from_url

logger = logging.getLogger(__name__)

ALLOWED_SCHEMES = {"http", "https"}


@dataclass
class ImageReport:
    """Outcome of downloading one image."""

    url: str
    output_file: str
    status: Literal["success", "partial", "failed", "skipped"]
    status_code: int | None = None
    error: str | None = None


class ImageDownloader:
    """Streams images into a directory with bounded concurrency."""

    def __init__(self, settings: Settings, client: httpx.AsyncClient):
        self.settings = settings
        self.client = client
        self._semaphore = asyncio.Semaphore(settings.download.max_concurrent)

    async def download(self, url: str, image_dir: Path) -> ImageReport:
        """Download one image into ``image_dir``.

        The file is named after the last segment of the URL. A response
        other than 200 is logged but its body is still saved. Failures are
        logged and returned in the report instead of being raised.
        """
        image_path = image_dir / filename_from_url(url)

        if urlparse(url).scheme not in ALLOWED_SCHEMES:
            logger.error(f"Unable to download image {url}: not an http(s) URL")
            return ImageReport(url, str(image_path), "failed", error="Not an http(s) URL")

        async with self._semaphore:
            try:
                status_code = await self._stream_to_file(url, image_path)
            except (httpx.HTTPError, httpx.InvalidURL) as e:
                logger.error(f"Unable to download image {url}: {e}")
                return ImageReport(url, str(image_path), "failed", error=str(e))
            except OSError as e:
                logger.error(f"Unable to write image {image_path}: {e}")
                return ImageReport(url, str(image_path), "failed", error=str(e))

        logger.info(f"Saved {image_path}.")

        if status_code != 200:
            return ImageReport(
                url,
                str(image_path),
                "partial",
                status_code=status_code,
                error=f"Response status code {status_code}",
            )
        return ImageReport(url, str(image_path), "success", status_code=status_code)

    async def _stream_to_file(self, url: str, image_path: Path) -> int:
        """Stream the response body for ``url`` into ``image_path``."""
        async with self.client.stream("GET", url) as response:
            if response.status_code != 200:
                logger.warning(
                    f"Response status code {response.status_code} received for {url}."
                )

            async with aiofiles.open(image_path, "wb") as f:
                async for chunk in response.aiter_bytes(self.settings.download.chunk_size):
                    await f.write(chunk)

            return response.status_code
