"""Uniform HTML error pages."""

import logging

from fastapi.responses import HTMLResponse, PlainTextResponse
from starlette.responses import Response

from DocServer.rendering import TemplateRenderer
from server.server_config import ERROR_PAGE_TITLE, LEGACY_ERROR_STATUS

logger = logging.getLogger(__name__)


class ErrorPresenter:
    """
    Render the error template for a status code and a message.

    Parameters
    ----------
    template : TemplateRenderer
        The compiled error template. It receives ``title``, ``errorCode`` and
        ``msg``; ``msg`` is inserted unescaped, so callers pass escaped text.
    legacy_status : bool
        Send ``404`` on the status line of every error page. The body still
        carries the logical code.
    """

    def __init__(self, template: TemplateRenderer, legacy_status: bool = False) -> None:
        self.template = template
        self.legacy_status = legacy_status

    def status_line(self, status_code: int) -> int:
        return LEGACY_ERROR_STATUS if self.legacy_status else status_code

    def present(self, status_code: int, message: str) -> Response:
        """
        Build the error response.

        Parameters
        ----------
        status_code : int
            The logical HTTP status of the failure.
        message : str
            Human readable, already HTML-safe message.

        Returns
        -------
        Response
            An HTML page, or a plain-text fallback if the error template itself
            cannot be rendered.
        """
        sent_status = self.status_line(status_code)
        try:
            html = self.template.render(
                {"title": ERROR_PAGE_TITLE, "errorCode": status_code, "msg": message}
            )
        except Exception as exc:
            logger.error("Error template failed to render: %s", exc, exc_info=True)
            return PlainTextResponse(f"Error {status_code}", status_code=sent_status)
        return HTMLResponse(content=html, status_code=sent_status)
