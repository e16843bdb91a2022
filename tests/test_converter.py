"""Tests for the Markdown converter module."""

from pathlib import Path

import pytest

from wordpress_to_markdown.config import Settings
from wordpress_to_markdown.converter import MarkdownConverter, RenderedDocument
from wordpress_to_markdown.export_parser import Frontmatter, Post, PostMeta


@pytest.fixture
def settings() -> Settings:
    """Default settings for testing."""
    settings = Settings.default()
    settings.output_dir = Path("site")
    return settings


@pytest.fixture
def post() -> Post:
    """A post without images."""
    return Post(
        meta=PostMeta(id="5"),
        frontmatter=Frontmatter(
            slug="hello-world",
            title="Hello World",
            date="2019-01-01T12:00:00.000Z",
        ),
        content="<p>Hello</p>",
    )


class TestMarkdownConverter:
    """Tests for MarkdownConverter class."""

    def test_render_document(self, settings: Settings, post: Post) -> None:
        """Document has frontmatter followed by the body."""
        document = MarkdownConverter(settings).render(post)

        assert isinstance(document, RenderedDocument)
        assert document.content == (
            "---\n"
            'slug: "hello-world"\n'
            'title: "Hello World"\n'
            'date: "2019-01-01T12:00:00.000Z"\n'
            "---\n"
            "\n"
            "<p>Hello</p>\n"
        )

    def test_render_paths(self, settings: Settings, post: Post) -> None:
        """Post is placed in a directory named after its slug."""
        document = MarkdownConverter(settings).render(post)

        assert document.directory == Path("site/hello-world")
        assert document.path == Path("site/hello-world/index.md")

    def test_cover_image_filename(self, settings: Settings, post: Post) -> None:
        """Cover image filename is the last frontmatter line."""
        post.frontmatter.cover_image_filename = "cover.jpg"

        document = MarkdownConverter(settings).render(post)

        assert 'date: "2019-01-01T12:00:00.000Z"\ncoverImageFilename: "cover.jpg"\n---\n' in (
            document.content
        )

    def test_render_is_deterministic(self, settings: Settings, post: Post) -> None:
        """Rendering the same post twice gives identical output."""
        converter = MarkdownConverter(settings)

        assert converter.render(post) == converter.render(post)

    def test_quotes_escaped(self, settings: Settings, post: Post) -> None:
        """Quotes and backslashes in values are escaped."""
        post.frontmatter.title = 'Say "hi" C:\\temp'

        document = MarkdownConverter(settings).render(post)

        assert 'title: "Say \\"hi\\" C:\\\\temp"\n' in document.content

    def test_newline_escaped(self, settings: Settings, post: Post) -> None:
        """Newlines in values don't break the frontmatter."""
        post.frontmatter.title = "Line one\nLine two"

        document = MarkdownConverter(settings).render(post)

        assert 'title: "Line one\\nLine two"\n' in document.content

    def test_escaping_disabled(self, settings: Settings, post: Post) -> None:
        """Values are written raw when escaping is off."""
        settings.output.escape_quotes = False
        post.frontmatter.title = 'Say "hi"'

        document = MarkdownConverter(settings).render(post)

        assert 'title: "Say "hi""\n' in document.content
