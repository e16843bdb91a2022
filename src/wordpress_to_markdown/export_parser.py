"""Parse WordPress WXR exports into post and attachment records."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from datetime import timezone
from email.utils import parsedate_to_datetime
from pathlib import Path
from typing import Iterator

from lxml import etree

logger = logging.getLogger(__name__)

IMAGE_URL_PATTERN = re.compile(r"\.(gif|jpg|png)$", re.IGNORECASE)
THUMBNAIL_META_KEY = "_thumbnail_id"

WEEKDAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
RFC2822_DATE_PATTERN = re.compile(
    r"(?:(?P<weekday>Mon|Tue|Wed|Thu|Fri|Sat|Sun),\s*)?"
    r"\d{1,2}\s+(?:Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec)\s+\d{4}\s+"
    r"\d{2}:\d{2}(?::\d{2})?\s+"
    r"(?:[+-]\d{4}|UT|GMT|[ECMP][SD]T|Z)"
)


class ExportError(ValueError):
    """The export document cannot be turned into posts."""


class StructuralError(ExportError):
    """An export item is missing an element the extractor needs."""

    def __init__(self, message: str, item_index: int | None = None):
        if item_index is not None:
            message = f"Item {item_index}: {message}"
        super().__init__(message)
        self.item_index = item_index


class DateParseError(ExportError):
    """A post's publish date is not a valid RFC 2822 date."""


class DuplicatePostIdError(ExportError):
    """Two posts in the export share the same post id."""


@dataclass(frozen=True)
class AttachmentImage:
    """An image attachment and the post it belongs to."""

    id: str
    post_id: str
    url: str


@dataclass
class PostMeta:
    """Bookkeeping for a post that does not end up in the frontmatter."""

    id: str
    cover_image_id: str | None = None
    image_urls: list[str] = field(default_factory=list)
    cover_image_url: str | None = None


@dataclass
class Frontmatter:
    """Metadata written at the top of the post's Markdown file."""

    slug: str
    title: str
    date: str
    cover_image_filename: str | None = None

    def items(self) -> Iterator[tuple[str, str]]:
        """Yield (key, value) pairs in output order."""
        yield "slug", self.slug
        yield "title", self.title
        yield "date", self.date
        if self.cover_image_filename is not None:
            yield "coverImageFilename", self.cover_image_filename


@dataclass
class Post:
    """A blog post extracted from the export."""

    meta: PostMeta
    frontmatter: Frontmatter
    content: str

    @property
    def has_images(self) -> bool:
        return bool(self.meta.image_urls)


@dataclass
class WordPressExport:
    """Represents a parsed WordPress export."""

    path: Path
    images: list[AttachmentImage]
    posts: list[Post]


def read_export_tree(source: bytes) -> etree._Element:
    """Parse export bytes and strip namespace prefixes from every tag.

    Args:
        source: Raw XML document.

    Returns:
        Root element whose tags are plain local names (``post_id``,
        ``encoded``, ...).

    Raises:
        ExportError: If the document is not well-formed XML.
    """
    parser = etree.XMLParser(huge_tree=True, resolve_entities=False)
    try:
        root = etree.fromstring(source, parser)
    except etree.XMLSyntaxError as e:
        raise ExportError(f"Unable to parse export: {e}") from e

    for elem in root.iter():
        # Comments and processing instructions have no string tag
        if isinstance(elem.tag, str):
            elem.tag = etree.QName(elem).localname
    etree.cleanup_namespaces(root)
    return root


def collect_images(tree: etree._Element) -> list[AttachmentImage]:
    """Collect image attachments (gif, jpg, png) from the export tree."""
    images = []
    for index, item in _items_of_type(tree, "attachment"):
        url = _required_text(item, "attachment_url", index)
        if not IMAGE_URL_PATTERN.search(url):
            continue
        images.append(
            AttachmentImage(
                id=_required_text(item, "post_id", index),
                post_id=_required_text(item, "post_parent", index),
                url=url,
            )
        )
    return images


def collect_posts(tree: etree._Element) -> list[Post]:
    """Collect posts from the export tree.

    Raises:
        StructuralError: If a post item lacks a required element.
        DateParseError: If a post's ``pubDate`` is not RFC 2822.
    """
    posts = []
    for index, item in _items_of_type(tree, "post"):
        posts.append(
            Post(
                meta=PostMeta(
                    id=_required_text(item, "post_id", index),
                    cover_image_id=_cover_image_id(item, index),
                ),
                frontmatter=Frontmatter(
                    slug=_required_text(item, "post_name", index),
                    title=_required_text(item, "title", index),
                    date=_post_date(item, index),
                ),
                content=_required_text(item, "encoded", index).strip(),
            )
        )
    return posts


def parse_rfc2822_date(value: str) -> str:
    """Convert an RFC 2822 date to an ISO 8601 UTC timestamp.

    >>> parse_rfc2822_date("Tue, 01 Jan 2019 12:00:00 +0000")
    '2019-01-01T12:00:00.000Z'
    """
    match = RFC2822_DATE_PATTERN.fullmatch(value.strip())
    if match is None:
        raise DateParseError(f"Invalid RFC 2822 date: {value!r}")

    try:
        parsed = parsedate_to_datetime(value.strip())
    except (TypeError, ValueError, IndexError) as e:
        raise DateParseError(f"Invalid RFC 2822 date: {value!r}") from e

    weekday = match.group("weekday")
    if weekday is not None and WEEKDAYS[parsed.weekday()] != weekday:
        raise DateParseError(f"Weekday does not match date: {value!r}")

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    parsed = parsed.astimezone(timezone.utc)
    return parsed.strftime("%Y-%m-%dT%H:%M:%S") + f".{parsed.microsecond // 1000:03d}Z"


class ExportParser:
    """Reads a WordPress export file and extracts its records."""

    def parse(self, path: str | Path) -> WordPressExport:
        """Parse an export file.

        Args:
            path: Path to the WXR export document.

        Returns:
            WordPressExport with image attachments and posts.

        Raises:
            FileNotFoundError: If the path doesn't exist.
            ExportError: If the export can't be read, parsed or extracted.
        """
        path = Path(path)
        if not path.is_file():
            raise FileNotFoundError(f"Export not found: {path}")

        try:
            source = path.read_bytes()
        except OSError as e:
            raise ExportError(f"Unable to read export {path}: {e}") from e

        tree = read_export_tree(source)
        images = collect_images(tree)
        posts = collect_posts(tree)
        logger.debug(f"Extracted {len(posts)} posts and {len(images)} images from {path}")

        return WordPressExport(path=path, images=images, posts=posts)


def _items_of_type(
    tree: etree._Element, post_type: str
) -> Iterator[tuple[int, etree._Element]]:
    """Yield (position, item) for every channel item of the given post type."""
    channel = tree.find("channel") if tree.tag == "rss" else None
    if channel is None:
        raise StructuralError("Export has no rss/channel element")

    for index, item in enumerate(channel.findall("item")):
        if _required_text(item, "post_type", index) == post_type:
            yield index, item


def _required_text(item: etree._Element, tag: str, index: int) -> str:
    """Get the text of the first child with the given tag."""
    elem = item.find(tag)
    if elem is None:
        raise StructuralError(f"missing <{tag}>", index)
    return elem.text or ""


def _post_date(item: etree._Element, index: int) -> str:
    try:
        return parse_rfc2822_date(_required_text(item, "pubDate", index))
    except DateParseError as e:
        raise DateParseError(f"Item {index}: {e}") from e


def _cover_image_id(item: etree._Element, index: int) -> str | None:
    """Get the attachment id stored under the ``_thumbnail_id`` post meta key."""
    for postmeta in item.findall("postmeta"):
        if _required_text(postmeta, "meta_key", index) == THUMBNAIL_META_KEY:
            return _required_text(postmeta, "meta_value", index)
    return None
