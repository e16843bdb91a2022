"""Build orchestration: export file in, Markdown tree out."""

from __future__ import annotations

import asyncio
import logging
import re
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

import httpx

from wordpress_to_markdown.config import Settings
from wordpress_to_markdown.converter import MarkdownConverter
from wordpress_to_markdown.downloader import ImageDownloader, ImageReport
from wordpress_to_markdown.export_parser import ExportError, ExportParser, Post
from wordpress_to_markdown.merge import filename_from_url, merge_images_into_posts

logger = logging.getLogger(__name__)

IMAGES_DIRNAME = "images"


@dataclass
class PostReport:
    """Detailed report for a single post."""

    post_id: str
    slug: str
    output_file: str
    status: Literal["success", "failed"]
    errors: list[str] = field(default_factory=list)
    image_reports: list[ImageReport] = field(default_factory=list)


@dataclass
class BuildResult:
    """Result of a full build operation."""

    posts_written: int
    posts_failed: int
    images_saved: int
    images_failed: int
    total_time_ms: int
    post_reports: list[PostReport] = field(default_factory=list)

    @property
    def failures(self) -> list[str]:
        """Human readable description of every failure and partial download."""
        messages = []
        for report in self.post_reports:
            for error in report.errors:
                messages.append(f"{report.output_file}: {error}")
            for image in report.image_reports:
                if image.status in ("partial", "failed"):
                    messages.append(f"{image.url}: {image.error}")
        return messages

    @property
    def ok(self) -> bool:
        return not self.failures


class ConversionBuilder:
    """Converts a WordPress export into a directory of Markdown posts."""

    def __init__(
        self,
        settings: Settings,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.settings = settings
        self.parser = ExportParser()
        self.converter = MarkdownConverter(settings)
        self.transport = transport

    def run(self) -> BuildResult:
        """Run the build to completion on a new event loop."""
        return asyncio.run(self.build())

    async def build(self) -> BuildResult:
        """Extract, merge and write every post in the export.

        Returns:
            BuildResult with per-post and per-image reports.

        Raises:
            FileNotFoundError: If the input file doesn't exist.
            ExportError: If the export can't be parsed, extracted or merged.
        """
        start_time = time.time()
        input_file = self.settings.input_file

        logger.info(f"Starting conversion of export: {input_file}")

        export = self.parser.parse(input_file)
        posts = merge_images_into_posts(export.images, export.posts)
        self._assign_slugs(posts)

        logger.info(f"Parsed {len(posts)} posts and {len(export.images)} images")

        async with httpx.AsyncClient(
            timeout=self.settings.download.timeout,
            follow_redirects=True,
            transport=self.transport,
        ) as client:
            downloader = ImageDownloader(self.settings, client)
            reports = await asyncio.gather(
                *(self._write_post(post, downloader) for post in posts)
            )

        images = [image for report in reports for image in report.image_reports]
        images_saved = sum(1 for image in images if image.status in ("success", "partial"))
        images_failed = sum(1 for image in images if image.status == "failed")
        posts_failed = sum(1 for report in reports if report.status == "failed")
        total_time_ms = int((time.time() - start_time) * 1000)

        logger.info(
            f"Conversion complete: {len(reports) - posts_failed} posts written, "
            f"{posts_failed} failed, {total_time_ms}ms"
        )

        return BuildResult(
            posts_written=len(reports) - posts_failed,
            posts_failed=posts_failed,
            images_saved=images_saved,
            images_failed=images_failed,
            total_time_ms=total_time_ms,
            post_reports=list(reports),
        )

    async def _write_post(self, post: Post, downloader: ImageDownloader) -> PostReport:
        """Write a post's Markdown file and download its images concurrently."""
        document = self.converter.render(post)
        report = PostReport(
            post_id=post.meta.id,
            slug=post.frontmatter.slug,
            output_file=str(document.path),
            status="success",
        )

        image_dir = document.directory / IMAGES_DIRNAME
        try:
            document.directory.mkdir(parents=True, exist_ok=True)
            if post.has_images:
                image_dir.mkdir(exist_ok=True)
        except OSError as e:
            logger.error(f"Unable to create directory for '{post.frontmatter.slug}': {e}")
            report.status = "failed"
            report.errors.append(str(e))
            return report

        image_urls, skipped = self._unique_image_urls(post.meta.image_urls, image_dir)

        results = await asyncio.gather(
            asyncio.to_thread(document.path.write_text, document.content, encoding="utf-8"),
            *(downloader.download(url, image_dir) for url in image_urls),
            return_exceptions=True,
        )

        write_result, image_reports = results[0], results[1:]
        if isinstance(write_result, OSError):
            logger.error(f"Unable to write file {document.path}: {write_result}")
            report.status = "failed"
            report.errors.append(str(write_result))
        elif isinstance(write_result, BaseException):
            raise write_result
        else:
            logger.info(f"Wrote {document.path}.")

        for image_report in image_reports:
            if isinstance(image_report, BaseException):
                raise image_report
            report.image_reports.append(image_report)
        report.image_reports.extend(skipped)

        return report

    def _unique_image_urls(
        self, urls: list[str], image_dir: Path
    ) -> tuple[list[str], list[ImageReport]]:
        """Split image URLs into ones to download and ones whose filename is taken.

        Only the first URL for each filename is downloaded.
        """
        unique: dict[str, str] = {}
        skipped: list[ImageReport] = []

        for url in urls:
            filename = filename_from_url(url)
            if filename in unique:
                logger.warning(
                    f"Skipping image {url}: {image_dir / filename} is already used by {unique[filename]}"
                )
                skipped.append(
                    ImageReport(
                        url,
                        str(image_dir / filename),
                        "skipped",
                        error=f"Filename already used by {unique[filename]}",
                    )
                )
                continue
            unique[filename] = url

        return list(unique.values()), skipped

    def _assign_slugs(self, posts: list[Post]) -> None:
        """Give every post a non-empty slug that no other post uses."""
        seen: set[str] = set()

        for post in posts:
            slug = post.frontmatter.slug.strip()
            if not slug:
                slug = self._slugify(post.frontmatter.title) or f"post-{post.meta.id}"
                logger.warning(f"Post {post.meta.id} has no slug, using '{slug}'")

            if slug in seen:
                if self.settings.output.duplicate_slugs == "error":
                    raise ExportError(f"Duplicate slug in export: {slug}")
                base = slug
                counter = 1
                while slug in seen:
                    slug = f"{base}_{counter}"
                    counter += 1
                logger.warning(f"Slug '{base}' already used, writing post {post.meta.id} to '{slug}'")

            seen.add(slug)
            post.frontmatter.slug = slug

    def _slugify(self, text: str) -> str:
        """Convert text to kebab-case slug."""
        text = text.lower()
        text = re.sub(r"[^\w\s-]", "", text)
        text = re.sub(r"[\s_]+", "-", text)
        text = re.sub(r"-+", "-", text)
        return text.strip("-")
