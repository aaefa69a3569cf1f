# src/server/routers/documents.py
"""This module defines the catch-all router that serves files from the document root."""

import logging
import os

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse, Response
from starlette.datastructures import State

from DocServer.utils.exceptions import DocServerError, NotFoundError
from DocServer.utils.path_utils import is_inside_git_dir, resolve_request_path

router = APIRouter()

logger = logging.getLogger(__name__)


def serve_document(state: State, url_path: str) -> Response:
    """
    Resolve, read, classify and render one requested document.

    Parameters
    ----------
    state : State
        The application state holding ``config``, ``content_typer`` and ``renderer``.
    url_path : str
        The decoded URL path, e.g. ``/guide/intro.md``. Query strings are not part of it.

    Returns
    -------
    Response
        Rendered HTML for Markdown files, the unmodified bytes otherwise.

    Raises
    ------
    ForbiddenError
        If the path escapes the serving root. The file is never opened.
    NotFoundError
        If the file is missing or cannot be read, directories included.
    UnsupportedMediaTypeError
        If strict content typing is enabled and the extension is unknown.
    RenderError
        If the Markdown pipeline fails.
    """
    config = state.config
    filename = resolve_request_path(config.root, url_path)
    logger.debug("Request for: %s", filename)

    if config.repo is not None and is_inside_git_dir(config.root, filename):
        raise NotFoundError(f"Can't find: {url_path}")

    try:
        with open(filename, "rb") as f:
            content = f.read()
    except (OSError, ValueError) as exc:
        logger.debug("Cannot read %s: %s", filename, exc)
        raise NotFoundError(f"Can't find: {url_path}") from exc

    content_type = state.content_typer.classify(filename)
    if content_type.is_markdown:
        html = state.renderer.render_page(
            os.path.basename(filename), content.decode("utf-8", errors="replace")
        )
        return HTMLResponse(content=html)

    return Response(content=content, media_type=content_type.mime_type)


@router.api_route("/{full_path:path}", methods=["GET", "HEAD"])
def get_document(request: Request, full_path: str) -> Response:
    """
    Serve any GET or HEAD path from the document root.

    This is a plain (non-async) endpoint so FastAPI runs it in its threadpool:
    file reads and Markdown rendering block only the request being served.

    Parameters
    ----------
    request : Request
        The incoming request, used to reach the application state.
    full_path : str
        The path below ``/``.

    Returns
    -------
    Response
        The document response. Failures are raised as ``DocServerError`` and
        turned into error pages by the application's exception handler.
    """
    try:
        return serve_document(request.app.state, "/" + full_path)
    except DocServerError:
        raise
    except Exception as exc:
        logger.error("Unhandled error serving /%s: %s", full_path, exc, exc_info=True)
        raise DocServerError(f"Server Error: {exc}") from exc
