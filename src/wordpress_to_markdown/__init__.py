"""WordPress XML Export to Markdown Converter.

A Python library and CLI tool for converting WordPress (WXR) exports to
per-post Markdown files with frontmatter and downloaded images.
"""

from wordpress_to_markdown.config import Settings
from wordpress_to_markdown.export_parser import (
    AttachmentImage,
    DateParseError,
    DuplicatePostIdError,
    ExportError,
    ExportParser,
    Frontmatter,
    Post,
    PostMeta,
    StructuralError,
    WordPressExport,
    collect_images,
    collect_posts,
    read_export_tree,
)
from wordpress_to_markdown.merge import merge_images_into_posts
from wordpress_to_markdown.converter import MarkdownConverter, RenderedDocument
from wordpress_to_markdown.builder import BuildResult, ConversionBuilder

__version__ = "0.1.0"

__all__ = [
    "Settings",
    "ExportParser",
    "WordPressExport",
    "AttachmentImage",
    "Post",
    "PostMeta",
    "Frontmatter",
    "ExportError",
    "StructuralError",
    "DateParseError",
    "DuplicatePostIdError",
    "read_export_tree",
    "collect_images",
    "collect_posts",
    "merge_images_into_posts",
    "MarkdownConverter",
    "RenderedDocument",
    "ConversionBuilder",
    "BuildResult",
]
