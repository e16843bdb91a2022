"""Render merged posts as Markdown documents."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from wordpress_to_markdown.config import Settings
from wordpress_to_markdown.export_parser import Post

INDEX_FILENAME = "index.md"


@dataclass
class RenderedDocument:
    """A post ready to be written to disk."""

    directory: Path
    content: str

    @property
    def path(self) -> Path:
        return self.directory / INDEX_FILENAME


class MarkdownConverter:
    """Converts posts to Markdown with a frontmatter block."""

    def __init__(self, settings: Settings):
        self.settings = settings

    def render(self, post: Post) -> RenderedDocument:
        """Render a single post.

        Args:
            post: The post, with images already merged in.

        Returns:
            RenderedDocument with the post directory and file content.
        """
        frontmatter = "".join(
            f'{key}: "{self._format_value(value)}"\n'
            for key, value in post.frontmatter.items()
        )
        content = f"---\n{frontmatter}---\n\n{post.content}\n"

        return RenderedDocument(
            directory=self.settings.output_dir / post.frontmatter.slug,
            content=content,
        )

    def _format_value(self, value: str) -> str:
        """Escape a value for a double-quoted frontmatter string."""
        if not self.settings.output.escape_quotes:
            return value
        return value.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")
