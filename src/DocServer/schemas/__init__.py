"""This module contains the schemas for the DocServer package."""

from DocServer.schemas.config_schema import RepoConfig, ServerConfig

__all__ = ["RepoConfig", "ServerConfig"]
