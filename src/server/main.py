# src/server/main.py
"""Assemble the FastAPI application that serves the document root."""

import logging
from typing import Optional

from fastapi import FastAPI
from starlette.exceptions import HTTPException as StarletteHTTPException

from DocServer.cloning import RepoSyncer
from DocServer.content_types import ContentTyper
from DocServer.rendering import MarkdownRenderer, load_template
from DocServer.schemas import ServerConfig
from DocServer.utils.exceptions import DocServerError
from server.error_pages import ErrorPresenter
from server.routers import documents_router
from server.server_utils import docserver_exception_handler, http_exception_handler, make_lifespan

logger = logging.getLogger(__name__)


def create_app(
    config: ServerConfig,
    renderer: MarkdownRenderer,
    error_presenter: ErrorPresenter,
    content_typer: Optional[ContentTyper] = None,
    syncer: Optional[RepoSyncer] = None,
) -> FastAPI:
    """
    Create the application from already initialized components.

    The interactive API docs are disabled: every path belongs to the document root.
    """
    app = FastAPI(
        title="DocServer",
        lifespan=make_lifespan(syncer),
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.config = config
    app.state.renderer = renderer
    app.state.error_presenter = error_presenter
    app.state.content_typer = content_typer or ContentTyper(strict=config.strict_content_types)
    app.state.syncer = syncer

    app.add_exception_handler(DocServerError, docserver_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.include_router(documents_router)
    return app


def build_app(config: ServerConfig, syncer: Optional[RepoSyncer] = None) -> FastAPI:
    """
    Load the templates named by ``config`` and create the application.

    Raises
    ------
    FatalStartupError
        If a template cannot be loaded or the highlight style is unknown.
    """
    main_template = load_template(config.main_template_path)
    error_template = load_template(config.error_template_path)
    renderer = MarkdownRenderer(main_template, config.highlight_style)
    error_presenter = ErrorPresenter(error_template, legacy_status=config.legacy_error_status)

    if config.repo is None and not config.root.is_dir():
        logger.warning("Serving root %s is not a directory; every request will fail.", config.root)

    return create_app(config, renderer, error_presenter, syncer=syncer)
