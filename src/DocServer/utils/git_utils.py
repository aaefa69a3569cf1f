"""Utility functions for interacting with Git repositories."""

import asyncio
import base64
import logging
import os
from typing import Dict, Optional, Tuple

from DocServer.utils.exceptions import GitError

logger = logging.getLogger(__name__)


async def run_command(*args: str, env: Optional[Dict[str, str]] = None) -> Tuple[bytes, bytes]:
    """
    Execute a command asynchronously and return (stdout, stderr) bytes.

    Parameters
    ----------
    *args : str
        The command and its arguments to execute.
    env : Dict[str, str], optional
        Environment for the child process. Inherits the current one when omitted.

    Returns
    -------
    Tuple[bytes, bytes]
        A tuple containing the stdout and stderr of the command.

    Raises
    ------
    GitError
        If the command cannot be started or exits with a non-zero status.
    """
    try:
        proc = await asyncio.create_subprocess_exec(
            *args,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            env=env,
        )
    except OSError as exc:
        raise GitError(f"Command '{args[0]}' could not be started: {exc}") from exc

    stdout, stderr = await proc.communicate()
    if proc.returncode != 0:
        error_message = stderr.decode(errors="replace").strip()
        logger.debug("Command '%s' exited with %s", " ".join(args), proc.returncode)
        raise GitError(f"Command '{' '.join(args)}' failed with error: {error_message}")

    return stdout, stderr


async def ensure_git_installed() -> str:
    """
    Check that a ``git`` executable can be run and report its version.

    Returns
    -------
    str
        The version line printed by ``git --version``.

    Raises
    ------
    GitError
        If ``git`` cannot be started or fails to report a version.
    """
    try:
        stdout, _ = await run_command("git", "--version")
    except GitError as exc:
        raise GitError(f"A working git executable is required to sync the repository: {exc}") from exc
    version = stdout.decode(errors="replace").strip()
    logger.debug("Using %s", version)
    return version


def build_git_env(username: Optional[str] = None, password: Optional[str] = None) -> Dict[str, str]:
    """
    Build the environment for git child processes.

    Credentials travel as an HTTP ``Authorization`` header injected through
    ``GIT_CONFIG_*`` variables, so they never appear in argv or ``.git/config``.

    Parameters
    ----------
    username : str, optional
        HTTP basic auth username.
    password : str, optional
        HTTP basic auth password or token.

    Returns
    -------
    Dict[str, str]
        A copy of the current environment with prompts disabled and, when
        credentials are given, the extra header configured.
    """
    env = dict(os.environ)
    env["GIT_TERMINAL_PROMPT"] = "0"
    if username or password:
        token = base64.b64encode(f"{username or ''}:{password or ''}".encode("utf-8")).decode("ascii")
        env["GIT_CONFIG_COUNT"] = "1"
        env["GIT_CONFIG_KEY_0"] = "http.extraHeader"
        env["GIT_CONFIG_VALUE_0"] = f"Authorization: Basic {token}"
    return env
