"""Configuration defaults for the DocServer package."""

from pathlib import Path

DEFAULT_HOST: str = "0.0.0.0"
DEFAULT_PORT: int = 80
DEFAULT_ROOT_DIR: str = "."
DEFAULT_PULL_INTERVAL_SEC: float = 60
DEFAULT_HIGHLIGHT_STYLE: str = "vs"

TEMPLATES_DIR: Path = Path(__file__).resolve().parent.parent / "server" / "templates"
DEFAULT_MAIN_TEMPLATE_PATH: Path = TEMPLATES_DIR / "main_template.jinja"
DEFAULT_ERROR_TEMPLATE_PATH: Path = TEMPLATES_DIR / "error_template.jinja"
