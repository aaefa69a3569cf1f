# tests/test_cli.py
"""Tests for the DocServer cli."""

from pathlib import Path
from unittest.mock import AsyncMock, patch

from click.testing import CliRunner
from fastapi import FastAPI

from DocServer.cli import main
from DocServer.utils.exceptions import GitError


@patch("DocServer.cli.uvicorn.run")
def test_cli_serves_plain_directory(mock_uvicorn_run, tmp_path: Path):
    runner = CliRunner()
    result = runner.invoke(main, ["--dir", str(tmp_path), "--port", "8080", "--host", "127.0.0.1"])

    assert result.exit_code == 0, result.output
    mock_uvicorn_run.assert_called_once()
    app = mock_uvicorn_run.call_args.args[0]
    assert isinstance(app, FastAPI)
    assert app.state.config.root == tmp_path.resolve()
    assert app.state.syncer is None
    assert mock_uvicorn_run.call_args.kwargs["port"] == 8080
    assert mock_uvicorn_run.call_args.kwargs["host"] == "127.0.0.1"


@patch("DocServer.cli.uvicorn.run")
@patch("DocServer.cli.RepoSyncer.clone", new_callable=AsyncMock)
def test_cli_clones_before_serving(mock_clone, mock_uvicorn_run, tmp_path: Path):
    runner = CliRunner()
    result = runner.invoke(
        main,
        [
            "--dir", str(tmp_path / "checkout"),
            "--git_repo_url", "https://example.com/team/docs.git",
            "--git_repo_branch", "main",
            "--git_pull_interval_sec", "30",
        ],
    )

    assert result.exit_code == 0, result.output
    mock_clone.assert_awaited_once()
    app = mock_uvicorn_run.call_args.args[0]
    assert app.state.syncer.repo.branch == "main"
    assert app.state.syncer.repo.pull_interval_sec == 30


@patch("DocServer.cli.uvicorn.run")
@patch("DocServer.cli.RepoSyncer.clone", new_callable=AsyncMock)
def test_cli_exits_when_clone_fails(mock_clone, mock_uvicorn_run, tmp_path: Path):
    mock_clone.side_effect = GitError("authentication failed")
    runner = CliRunner()
    result = runner.invoke(main, ["--dir", str(tmp_path), "--git_repo_url", "https://example.com/r.git"])

    assert result.exit_code != 0
    assert "authentication failed" in result.output
    assert "Nothing to serve" in result.output
    mock_uvicorn_run.assert_not_called()


@patch("DocServer.cli.uvicorn.run")
def test_cli_exits_on_unreadable_password_file(mock_uvicorn_run, tmp_path: Path):
    runner = CliRunner()
    result = runner.invoke(
        main,
        [
            "--dir", str(tmp_path),
            "--git_repo_url", "https://example.com/r.git",
            "--git_auth_pass_file", str(tmp_path / "missing"),
        ],
    )

    assert result.exit_code != 0
    assert "Failed to read Git password file" in result.output
    mock_uvicorn_run.assert_not_called()


@patch("DocServer.cli.uvicorn.run")
def test_cli_exits_on_missing_template(mock_uvicorn_run, tmp_path: Path):
    runner = CliRunner()
    result = runner.invoke(main, ["--dir", str(tmp_path), "--main_template_html_path", str(tmp_path / "nope.jinja")])

    assert result.exit_code != 0
    assert "Failed to initialize template" in result.output
    mock_uvicorn_run.assert_not_called()


@patch("DocServer.cli.uvicorn.run")
def test_cli_exits_on_unknown_highlight_style(mock_uvicorn_run, tmp_path: Path):
    runner = CliRunner()
    result = runner.invoke(main, ["--dir", str(tmp_path), "--code_highlight_style", "no-such-style"])

    assert result.exit_code != 0
    assert "no-such-style" in result.output
    mock_uvicorn_run.assert_not_called()


def test_cli_rejects_invalid_port():
    runner = CliRunner()
    result = runner.invoke(main, ["--port", "99999"])
    assert result.exit_code == 2
