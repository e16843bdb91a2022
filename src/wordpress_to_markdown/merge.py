"""Associate image attachments with the posts that own them."""

from __future__ import annotations

import logging
from typing import Iterable

from wordpress_to_markdown.export_parser import AttachmentImage, DuplicatePostIdError, Post

logger = logging.getLogger(__name__)


def merge_images_into_posts(
    images: Iterable[AttachmentImage], posts: list[Post]
) -> list[Post]:
    """Attach each image to its owning post, resolving cover images.

    Posts are updated in place. Images whose owner is not in the export
    are dropped. Image order is preserved per post.

    Args:
        images: Image attachments in export order.
        posts: Posts extracted from the same export.

    Returns:
        The same list of posts.

    Raises:
        DuplicatePostIdError: If two posts share an id.
    """
    posts_by_id: dict[str, Post] = {}
    for post in posts:
        if post.meta.id in posts_by_id:
            raise DuplicatePostIdError(f"Duplicate post id in export: {post.meta.id}")
        posts_by_id[post.meta.id] = post

    for image in images:
        post = posts_by_id.get(image.post_id)
        if post is None:
            logger.debug(f"Skipping image {image.url}: post {image.post_id} not in export")
            continue

        post.meta.image_urls.append(image.url)

        if image.id == post.meta.cover_image_id:
            post.meta.cover_image_url = image.url
            post.frontmatter.cover_image_filename = filename_from_url(image.url)

    return posts


def filename_from_url(url: str) -> str:
    """Return the last path segment of a URL."""
    return url.split("/")[-1]
