# src/DocServer/cli.py
"""Command-line interface for the DocServer package."""

# pylint: disable=no-value-for-parameter

import asyncio
import logging
from typing import Optional

import click
import uvicorn

from DocServer.cloning import RepoSyncer
from DocServer.config import (
    DEFAULT_ERROR_TEMPLATE_PATH,
    DEFAULT_HIGHLIGHT_STYLE,
    DEFAULT_HOST,
    DEFAULT_MAIN_TEMPLATE_PATH,
    DEFAULT_PORT,
    DEFAULT_PULL_INTERVAL_SEC,
    DEFAULT_ROOT_DIR,
)
from DocServer.config_loader import build_server_config
from DocServer.utils.exceptions import DocServerError, GitError
from server.main import build_app
from server.server_config import DEFAULT_LOG_LEVEL

LOG_LEVELS = ["critical", "error", "warning", "info", "debug"]

logger = logging.getLogger(__name__)


@click.command()
@click.option("--port", type=click.IntRange(0, 65535), default=DEFAULT_PORT, show_default=True, help="TCP port to serve HTTP on.")
@click.option("--host", default=DEFAULT_HOST, show_default=True, help="Address to bind the HTTP listener to.")
@click.option(
    "--dir",
    "root_dir",
    default=DEFAULT_ROOT_DIR,
    show_default=True,
    help="Directory to clone git to and serve from. It may already hold files; the checkout is made in place.",
)
@click.option(
    "--git_pull_interval_sec",
    type=click.FloatRange(min=0, min_open=True),
    default=DEFAULT_PULL_INTERVAL_SEC,
    show_default=True,
    help="Git pulling interval in seconds.",
)
@click.option("--git_repo_url", default=None, help="URL of the Git repository to watch and serve from.")
@click.option("--git_repo_branch", default=None, help="The branch to watch (default: the repository's default branch).")
@click.option("--git_auth_username", default=None, help="Git repository credentials - username.")
@click.option(
    "--git_auth_pass",
    default=None,
    help="Git repository credentials - password. Takes precedence over --git_auth_pass_file.",
)
@click.option("--git_auth_pass_file", default=None, help="Git repository credentials - path to a password file.")
@click.option(
    "--main_template_html_path",
    default=str(DEFAULT_MAIN_TEMPLATE_PATH),
    show_default=True,
    help="Jinja template for Markdown pages. Fields: title, highlightJsStyle, highlightCss (raw), mdHtml (raw).",
)
@click.option(
    "--error_template_html_path",
    default=str(DEFAULT_ERROR_TEMPLATE_PATH),
    show_default=True,
    help="Jinja template for error pages. Fields: title, errorCode (optional), msg (raw).",
)
@click.option("--code_highlight_style", default=DEFAULT_HIGHLIGHT_STYLE, show_default=True, help="Pygments style for code blocks.")
@click.option("--strict_content_types", is_flag=True, default=False, help="Answer 501 for files with an unknown extension.")
@click.option("--legacy_error_status", is_flag=True, default=False, help="Send status 404 on every error page.")
@click.option("--log_level", type=click.Choice(LOG_LEVELS, case_sensitive=False), default=DEFAULT_LOG_LEVEL, show_default=True)
def main(
    port: int,
    host: str,
    root_dir: str,
    git_pull_interval_sec: float,
    git_repo_url: Optional[str],
    git_repo_branch: Optional[str],
    git_auth_username: Optional[str],
    git_auth_pass: Optional[str],
    git_auth_pass_file: Optional[str],
    main_template_html_path: str,
    error_template_html_path: str,
    code_highlight_style: str,
    strict_content_types: bool,
    legacy_error_status: bool,
    log_level: str,
):
    """
    Serve a directory, optionally synced from a git repository, as a documentation site.

    Markdown files are rendered to sanitized HTML; every other file is served as-is.
    """
    logging.basicConfig(
        level=log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = build_server_config(
            root=root_dir,
            host=host,
            port=port,
            main_template_path=main_template_html_path,
            error_template_path=error_template_html_path,
            highlight_style=code_highlight_style,
            repo_url=git_repo_url,
            repo_branch=git_repo_branch,
            auth_username=git_auth_username,
            auth_password=git_auth_pass,
            auth_password_file=git_auth_pass_file,
            pull_interval_sec=git_pull_interval_sec,
            strict_content_types=strict_content_types,
            legacy_error_status=legacy_error_status,
        )
        syncer = RepoSyncer(config.repo, config.root) if config.repo is not None else None
        app = build_app(config, syncer=syncer)
        if syncer is not None:
            asyncio.run(syncer.clone())
    except GitError as exc:
        click.echo(f"Error: {exc}", err=True)
        click.echo("Nothing to serve, exiting.", err=True)
        raise click.Abort()
    except DocServerError as exc:
        click.echo(f"Error: {exc}", err=True)
        raise click.Abort()

    logger.info("Serving %s on %s:%s", config.root, config.host, config.port)
    uvicorn.run(app, host=config.host, port=config.port, log_level=log_level.lower())


if __name__ == "__main__":
    main()
