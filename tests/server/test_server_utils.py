import asyncio
from unittest.mock import MagicMock

import pytest
from fastapi import FastAPI, Request
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import HTMLResponse

from DocServer.utils.exceptions import ForbiddenError, NotFoundError
from server.server_utils import docserver_exception_handler, http_exception_handler, make_lifespan


class FakeSyncer:
    def __init__(self):
        self.started = False
        self.cancelled = False

    async def run(self):
        self.started = True
        try:
            await asyncio.sleep(3600)
        except asyncio.CancelledError:
            self.cancelled = True
            raise


def _request_with_presenter(presenter) -> MagicMock:
    mock_req = MagicMock(spec=Request)
    mock_req.app.state.error_presenter = presenter
    mock_req.method = "GET"
    mock_req.url.path = "/x"
    return mock_req


# Tests for docserver_exception_handler
@pytest.mark.asyncio
async def test_exception_handler_presents_docserver_errors():
    presenter = MagicMock()
    presenter.present.return_value = "page"
    mock_req = _request_with_presenter(presenter)

    response = await docserver_exception_handler(mock_req, ForbiddenError("keep out"))

    assert response == "page"
    presenter.present.assert_called_once_with(403, "keep out")


@pytest.mark.asyncio
async def test_exception_handler_escapes_messages():
    presenter = MagicMock()
    mock_req = _request_with_presenter(presenter)

    await docserver_exception_handler(mock_req, NotFoundError("Can't find: /<b>.md"))

    presenter.present.assert_called_once_with(404, "Can&#39;t find: /&lt;b&gt;.md")


@pytest.mark.asyncio
async def test_exception_handler_reraises_other_exceptions():
    mock_req = _request_with_presenter(MagicMock())
    with pytest.raises(ValueError, match="Some other error"):
        await docserver_exception_handler(mock_req, ValueError("Some other error"))


# Tests for http_exception_handler
@pytest.mark.asyncio
async def test_http_exception_handler_keeps_allow_header():
    presenter = MagicMock()
    presenter.present.return_value = HTMLResponse("page", status_code=405)
    mock_req = _request_with_presenter(presenter)

    exc = StarletteHTTPException(status_code=405, headers={"Allow": "GET, HEAD"})
    response = await http_exception_handler(mock_req, exc)

    presenter.present.assert_called_once_with(405, "Method Not Allowed")
    assert response.headers["allow"] == "GET, HEAD"


@pytest.mark.asyncio
async def test_http_exception_handler_reraises_other_exceptions():
    mock_req = _request_with_presenter(MagicMock())
    with pytest.raises(KeyError):
        await http_exception_handler(mock_req, KeyError("nope"))


# Tests for make_lifespan
@pytest.mark.asyncio
async def test_lifespan_runs_and_cancels_sync_loop():
    syncer = FakeSyncer()
    async with make_lifespan(syncer)(FastAPI()):
        await asyncio.sleep(0)
        assert syncer.started
    assert syncer.cancelled


@pytest.mark.asyncio
async def test_lifespan_without_syncer():
    async with make_lifespan(None)(FastAPI()):
        pass
