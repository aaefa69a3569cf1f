"""DocServer: serve a directory (optionally a synced git checkout) as a documentation site."""

from DocServer.content_types import ContentType, ContentTyper, RenderStrategy
from DocServer.rendering import MarkdownRenderer, convert_markdown, load_template, sanitize_html
from DocServer.schemas import RepoConfig, ServerConfig

__all__ = [
    "ContentType",
    "ContentTyper",
    "MarkdownRenderer",
    "RenderStrategy",
    "RepoConfig",
    "ServerConfig",
    "convert_markdown",
    "load_template",
    "sanitize_html",
]
