"""Utility functions for the server."""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable, Optional

from fastapi import FastAPI, Request
from fastapi.responses import Response
from markupsafe import escape
from starlette.exceptions import HTTPException as StarletteHTTPException

from DocServer.cloning import RepoSyncer
from DocServer.utils.exceptions import DocServerError

logger = logging.getLogger(__name__)


async def docserver_exception_handler(request: Request, exc: Exception) -> Response:
    """
    Turn a ``DocServerError`` into the HTML error page for its status code.

    Parameters
    ----------
    request : Request
        The incoming HTTP request.
    exc : Exception
        The exception raised, expected to be a DocServerError.

    Returns
    -------
    Response
        The rendered error page.

    Raises
    ------
    exc
        If the exception is not a DocServerError, it is re-raised.
    """
    if not isinstance(exc, DocServerError):
        raise exc
    logger.debug("%s %s -> %s: %s", request.method, request.url.path, exc.status_code, exc.message)
    presenter = request.app.state.error_presenter
    return presenter.present(exc.status_code, str(escape(exc.message)))


async def http_exception_handler(request: Request, exc: Exception) -> Response:
    """
    Render routing failures such as ``405 Method Not Allowed`` as error pages.

    Headers carried by the exception (``Allow`` for a 405) are kept.
    """
    if not isinstance(exc, StarletteHTTPException):
        raise exc
    logger.debug("%s %s -> %s: %s", request.method, request.url.path, exc.status_code, exc.detail)
    response = request.app.state.error_presenter.present(exc.status_code, str(escape(exc.detail)))
    if exc.headers:
        response.headers.update(exc.headers)
    return response


def make_lifespan(syncer: Optional[RepoSyncer]) -> Callable[[FastAPI], AsyncIterator[None]]:
    """
    Build the lifespan manager that runs the repository sync loop.

    Parameters
    ----------
    syncer : RepoSyncer, optional
        The syncer whose ``run`` loop is started as a background task. Plain
        directory serving passes ``None`` and no task is started.

    Returns
    -------
    Callable
        An async context manager factory suitable for ``FastAPI(lifespan=...)``.
    """

    @asynccontextmanager
    async def lifespan(_: FastAPI):
        task = asyncio.create_task(syncer.run()) if syncer is not None else None

        yield
        # Cancel the background task on shutdown
        if task is not None:
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass

    return lifespan
