# src/DocServer/content_types.py
"""Classify served files by extension into a MIME type and a render strategy."""

import mimetypes
import os
from dataclasses import dataclass
from enum import Enum, auto

from DocServer.utils.exceptions import UnsupportedMediaTypeError

DEFAULT_MIME_TYPE = "application/octet-stream"
MARKDOWN_MIME_TYPES = frozenset({"text/markdown", "text/x-markdown"})
MARKDOWN_EXTENSIONS = (".md", ".markdown", ".mdown", ".mkd", ".mkdn")

# A compressed file is served as its archive type, whatever it decompresses to.
ENCODING_MIME_TYPES = {
    "gzip": "application/gzip",
    "bzip2": "application/x-bzip2",
    "xz": "application/x-xz",
    "compress": "application/x-compress",
    "br": "application/x-brotli",
}


class RenderStrategy(Enum):
    """How a file is turned into a response body."""

    MARKDOWN = auto()
    RAW = auto()


@dataclass(frozen=True)
class ContentType:
    """Result of classifying a path."""

    mime_type: str
    strategy: RenderStrategy

    @property
    def is_markdown(self) -> bool:
        return self.strategy is RenderStrategy.MARKDOWN


def _build_mime_table() -> mimetypes.MimeTypes:
    # A private table keeps lookups independent of the host's mime.types files.
    table = mimetypes.MimeTypes(filenames=())
    for ext in MARKDOWN_EXTENSIONS:
        table.add_type("text/markdown", ext)
    return table


class ContentTyper:
    """
    Extension-driven content classification.

    Parameters
    ----------
    strict : bool
        When True, an extension without a known MIME type raises
        ``UnsupportedMediaTypeError`` instead of falling back to
        ``application/octet-stream``.
    """

    def __init__(self, strict: bool = False) -> None:
        self.strict = strict
        self._table = _build_mime_table()

    def classify(self, path: str) -> ContentType:
        """
        Determine the MIME type and render strategy of ``path``.

        Parameters
        ----------
        path : str
            A resolved filesystem path. Only its name is inspected.

        Returns
        -------
        ContentType
            The MIME type and whether the file is rendered as Markdown.

        Raises
        ------
        UnsupportedMediaTypeError
            If ``strict`` is set and the extension is unknown.
        """
        mime_type, encoding = self._table.guess_type(os.path.basename(path), strict=False)
        if encoding is not None:
            return ContentType(
                mime_type=ENCODING_MIME_TYPES.get(encoding, DEFAULT_MIME_TYPE), strategy=RenderStrategy.RAW
            )
        if mime_type is None:
            if self.strict:
                raise UnsupportedMediaTypeError(
                    f"Unsupported file type: {os.path.splitext(path)[1] or os.path.basename(path)}"
                )
            mime_type = DEFAULT_MIME_TYPE

        if mime_type in MARKDOWN_MIME_TYPES:
            return ContentType(mime_type=mime_type, strategy=RenderStrategy.MARKDOWN)
        return ContentType(mime_type=mime_type, strategy=RenderStrategy.RAW)
