"""Build the immutable ``ServerConfig`` from command-line values."""

import logging
from pathlib import Path
from typing import Optional

from pydantic import SecretStr, ValidationError

from DocServer.config import (
    DEFAULT_ERROR_TEMPLATE_PATH,
    DEFAULT_HIGHLIGHT_STYLE,
    DEFAULT_HOST,
    DEFAULT_MAIN_TEMPLATE_PATH,
    DEFAULT_PORT,
    DEFAULT_PULL_INTERVAL_SEC,
    DEFAULT_ROOT_DIR,
)
from DocServer.schemas import RepoConfig, ServerConfig
from DocServer.utils.exceptions import FatalStartupError

logger = logging.getLogger(__name__)


def resolve_password(password: Optional[str], password_file: Optional[str]) -> Optional[SecretStr]:
    """
    Pick the git password: a literal value wins over the password file.

    The file is read once; a trailing line break is dropped.

    Raises
    ------
    FatalStartupError
        If the password file cannot be read.
    """
    if password:
        return SecretStr(password)
    if not password_file:
        return None
    try:
        content = Path(password_file).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise FatalStartupError(f'Failed to read Git password file "{password_file}": {exc}') from exc
    return SecretStr(content.rstrip("\r\n"))


def build_server_config(
    *,
    root: str = DEFAULT_ROOT_DIR,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
    main_template_path: Optional[str] = None,
    error_template_path: Optional[str] = None,
    highlight_style: str = DEFAULT_HIGHLIGHT_STYLE,
    repo_url: Optional[str] = None,
    repo_branch: Optional[str] = None,
    auth_username: Optional[str] = None,
    auth_password: Optional[str] = None,
    auth_password_file: Optional[str] = None,
    pull_interval_sec: float = DEFAULT_PULL_INTERVAL_SEC,
    strict_content_types: bool = False,
    legacy_error_status: bool = False,
) -> ServerConfig:
    """
    Assemble and validate the server configuration.

    Repository settings are only considered when ``repo_url`` is given; the
    password file is therefore only read for repository-backed serving.

    Returns
    -------
    ServerConfig
        The frozen configuration with a canonical serving root.

    Raises
    ------
    FatalStartupError
        If the password file is unreadable or a value fails validation.
    """
    repo: Optional[RepoConfig] = None
    try:
        if repo_url:
            repo = RepoConfig(
                url=repo_url,
                branch=repo_branch or None,
                username=auth_username or None,
                password=resolve_password(auth_password, auth_password_file),
                pull_interval_sec=pull_interval_sec,
            )
        elif repo_branch or auth_username or auth_password or auth_password_file:
            logger.warning("Git options were given without --git_repo_url; they are ignored.")

        config = ServerConfig(
            root=Path(root),
            host=host,
            port=port,
            main_template_path=Path(main_template_path) if main_template_path else DEFAULT_MAIN_TEMPLATE_PATH,
            error_template_path=Path(error_template_path) if error_template_path else DEFAULT_ERROR_TEMPLATE_PATH,
            highlight_style=highlight_style,
            repo=repo,
            strict_content_types=strict_content_types,
            legacy_error_status=legacy_error_status,
        )
    except ValidationError as exc:
        raise FatalStartupError(f"Invalid configuration: {exc}") from exc

    logger.debug("Serving root resolved to %s", config.root)
    return config
