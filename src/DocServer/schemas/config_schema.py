"""Immutable configuration models built once at startup."""

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator

from DocServer.config import (
    DEFAULT_HIGHLIGHT_STYLE,
    DEFAULT_HOST,
    DEFAULT_MAIN_TEMPLATE_PATH,
    DEFAULT_ERROR_TEMPLATE_PATH,
    DEFAULT_PORT,
    DEFAULT_PULL_INTERVAL_SEC,
)


class RepoConfig(BaseModel):
    """
    Remote repository that backs the served directory.

    Attributes
    ----------
    url : str
        The remote URL to clone and pull from.
    branch : str, optional
        Branch to track. ``None`` selects the remote's default branch.
    username : str, optional
        Username for HTTP basic authentication.
    password : SecretStr, optional
        Password or token for HTTP basic authentication.
    pull_interval_sec : float
        Seconds between two pull attempts.
    """

    model_config = ConfigDict(frozen=True)

    url: str = Field(min_length=1)
    branch: Optional[str] = None
    username: Optional[str] = None
    password: Optional[SecretStr] = None
    pull_interval_sec: float = Field(default=DEFAULT_PULL_INTERVAL_SEC, gt=0)


class ServerConfig(BaseModel):
    """Process-wide server settings. ``root`` is always canonical and absolute."""

    model_config = ConfigDict(frozen=True)

    root: Path
    host: str = DEFAULT_HOST
    port: int = Field(default=DEFAULT_PORT, ge=0, le=65535)
    main_template_path: Path = DEFAULT_MAIN_TEMPLATE_PATH
    error_template_path: Path = DEFAULT_ERROR_TEMPLATE_PATH
    highlight_style: str = DEFAULT_HIGHLIGHT_STYLE
    repo: Optional[RepoConfig] = None
    strict_content_types: bool = False
    legacy_error_status: bool = False

    @field_validator("root", mode="after")
    @classmethod
    def _canonicalize_root(cls, value: Path) -> Path:
        return value.expanduser().resolve()
