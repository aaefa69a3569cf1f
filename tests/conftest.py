"""Shared fixtures: a document root on disk, test templates and an app built from them."""

from pathlib import Path

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from DocServer.rendering import MarkdownRenderer, load_template
from DocServer.schemas import ServerConfig
from server.error_pages import ErrorPresenter
from server.main import create_app

MAIN_TEMPLATE = (
    "<!DOCTYPE html><html><head><title>{{ title }}</title>"
    '<meta name="style" content="{{ highlightJsStyle }}"></head>'
    "<body>{{ mdHtml | safe }}</body></html>"
)
ERROR_TEMPLATE = "<html><body><h1>{{ title }} {{ errorCode }}</h1><p>{{ msg | safe }}</p></body></html>"

GUIDE_MD = "# Hi\n<script>alert(1)</script>\n"
STYLE_CSS = b"body { color: #333; }\n"


@pytest.fixture
def docs_root(tmp_path: Path) -> Path:
    """A serving root with a few documents, plus files next to it that must stay unreachable."""
    root = tmp_path / "docs"
    root.mkdir()
    (root / "guide.md").write_text(GUIDE_MD, encoding="utf-8")
    (root / "style.css").write_bytes(STYLE_CSS)
    (root / "notes").mkdir()
    (root / "notes" / "code.md").write_text(
        "# Code\n\n```python\ndef greet():\n    return 'hi'\n```\n", encoding="utf-8"
    )
    (root / "data.unknownext").write_bytes(b"\x00\x01\x02binary")

    (tmp_path / "secret.txt").write_text("top secret", encoding="utf-8")
    sibling = tmp_path / "docs-private"
    sibling.mkdir()
    (sibling / "leak.txt").write_text("sibling secret", encoding="utf-8")
    return root


@pytest.fixture
def template_paths(tmp_path: Path):
    templates_dir = tmp_path / "templates"
    templates_dir.mkdir()
    main_path = templates_dir / "main.jinja"
    error_path = templates_dir / "error.jinja"
    main_path.write_text(MAIN_TEMPLATE, encoding="utf-8")
    error_path.write_text(ERROR_TEMPLATE, encoding="utf-8")
    return main_path, error_path


@pytest.fixture
def server_config(docs_root: Path, template_paths) -> ServerConfig:
    main_path, error_path = template_paths
    return ServerConfig(root=docs_root, main_template_path=main_path, error_template_path=error_path)


@pytest.fixture
def renderer(server_config: ServerConfig) -> MarkdownRenderer:
    return MarkdownRenderer(load_template(server_config.main_template_path), server_config.highlight_style)


@pytest.fixture
def error_presenter(server_config: ServerConfig) -> ErrorPresenter:
    return ErrorPresenter(load_template(server_config.error_template_path))


@pytest.fixture
def app(server_config: ServerConfig, renderer: MarkdownRenderer, error_presenter: ErrorPresenter) -> FastAPI:
    return create_app(server_config, renderer, error_presenter)


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app)
