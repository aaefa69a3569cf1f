"""Custom exceptions for the DocServer package."""


class DocServerError(Exception):
    """Base class for every error raised by DocServer.

    Each subclass carries the HTTP status code that the error page should embed.
    """

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ForbiddenError(DocServerError):
    """Raised when a requested path escapes the serving root."""

    status_code = 403


class NotFoundError(DocServerError):
    """Raised when a requested file is absent or cannot be read."""

    status_code = 404


class UnsupportedMediaTypeError(DocServerError):
    """Raised in strict mode when a file extension has no known MIME type."""

    status_code = 501


class RenderError(DocServerError):
    """Raised when the Markdown-to-HTML pipeline or template rendering fails."""

    status_code = 500


class GitError(DocServerError):
    """Exception raised for errors during Git operations."""


class FatalStartupError(DocServerError):
    """Raised when the server cannot start (templates, credentials, initial clone)."""
