# src/DocServer/rendering.py
"""Markdown to sanitized HTML, wrapped in the page template."""

import logging
from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Optional, Protocol, Union

import markdown
import nh3
from jinja2 import Template, TemplateError
from markdown.extensions.codehilite import CodeHiliteExtension
from markdown.extensions.fenced_code import FencedCodeExtension
from markdown.extensions.tables import TableExtension
from pygments.formatters import HtmlFormatter
from pygments.util import ClassNotFound
from starlette.templating import Jinja2Templates

from DocServer.utils.exceptions import FatalStartupError, RenderError

logger = logging.getLogger(__name__)

CODEHILITE_CSS_CLASS = "codehilite"


class MarkdownConverter(Protocol):
    def __call__(self, text: str) -> str: ...


class HtmlSanitizer(Protocol):
    def __call__(self, fragment: str) -> str: ...


class TemplateRenderer(Protocol):
    def render(self, *args: Any, **kwargs: Any) -> str: ...


def convert_markdown(text: str) -> str:
    """
    Convert Markdown source to an HTML fragment with highlighted fenced code.

    A new ``markdown.Markdown`` instance is built for every call: instances keep
    per-document state and are not safe to share between threads.
    """
    md = markdown.Markdown(
        extensions=[
            FencedCodeExtension(),
            CodeHiliteExtension(css_class=CODEHILITE_CSS_CLASS, guess_lang=False),
            TableExtension(),
        ]
    )
    return md.convert(text)


def _attributes_with_classes() -> Dict[str, set]:
    attributes = {tag: set(attrs) for tag, attrs in nh3.ALLOWED_ATTRIBUTES.items()}
    attributes.setdefault("*", set()).add("class")
    return attributes


_SANITIZER_ATTRIBUTES = _attributes_with_classes()


def sanitize_html(fragment: str) -> str:
    """
    Strip unsafe markup from an HTML fragment.

    nh3's default tag and attribute policy applies, except that ``class`` is
    allowed on every element: Pygments encodes token styling through classes.
    """
    return nh3.clean(fragment, attributes=_SANITIZER_ATTRIBUTES)


def highlight_stylesheet(style_name: str) -> str:
    """
    Return the Pygments CSS for ``style_name`` scoped to highlighted code blocks.

    Raises
    ------
    FatalStartupError
        If Pygments has no style by that name.
    """
    try:
        formatter = HtmlFormatter(style=style_name)
    except ClassNotFound as exc:
        raise FatalStartupError(f'Unknown code highlight style "{style_name}": {exc}') from exc
    return formatter.get_style_defs(f".{CODEHILITE_CSS_CLASS}")


def load_template(path: Union[str, Path]) -> Template:
    """
    Compile a template file once for reuse across requests.

    Parameters
    ----------
    path : str or Path
        Location of the Jinja template file.

    Returns
    -------
    Template
        The compiled template. Autoescaping is enabled, so raw HTML fields must
        be marked with the ``safe`` filter inside the template.

    Raises
    ------
    FatalStartupError
        If the file is missing, unreadable or does not compile.
    """
    template_path = Path(path).expanduser().resolve()
    try:
        templates = Jinja2Templates(directory=str(template_path.parent))
        return templates.get_template(template_path.name)
    except (OSError, UnicodeDecodeError, TemplateError) as exc:
        raise FatalStartupError(f'Failed to initialize template at "{path}": {exc}') from exc


class MarkdownRenderer:
    """
    Render Markdown documents into complete HTML pages.

    Parameters
    ----------
    template : TemplateRenderer
        The compiled main page template.
    highlight_style : str
        Pygments style name, exposed to the template as ``highlightJsStyle``.
    converter : MarkdownConverter, optional
        Markdown to HTML fragment conversion; ``convert_markdown`` by default.
    sanitizer : HtmlSanitizer, optional
        HTML fragment sanitization; ``sanitize_html`` by default.
    """

    def __init__(
        self,
        template: TemplateRenderer,
        highlight_style: str,
        converter: Optional[MarkdownConverter] = None,
        sanitizer: Optional[HtmlSanitizer] = None,
    ) -> None:
        self.template = template
        self.highlight_style = highlight_style
        self.highlight_css = highlight_stylesheet(highlight_style)
        self.converter: Callable[[str], str] = converter or convert_markdown
        self.sanitizer: Callable[[str], str] = sanitizer or sanitize_html

    def render_page(self, title: str, markdown_text: str) -> str:
        """
        Produce the full HTML document for a Markdown source.

        Parameters
        ----------
        title : str
            Page title, escaped by the template.
        markdown_text : str
            The Markdown source.

        Returns
        -------
        str
            The rendered page.

        Raises
        ------
        RenderError
            If conversion, sanitization or template rendering fails.
        """
        try:
            fragment = self.sanitizer(self.converter(markdown_text))
            context: Mapping[str, Any] = {
                "title": title,
                "highlightJsStyle": self.highlight_style,
                "highlightCss": self.highlight_css,
                "mdHtml": fragment,
            }
            return self.template.render(context)
        except Exception as exc:
            logger.error("Rendering %s failed: %s", title, exc)
            raise RenderError(f"Server Error: {exc}") from exc
