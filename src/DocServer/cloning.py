# src/DocServer/cloning.py
"""Keep the serving root in sync with a remote git repository."""

import asyncio
import logging
import shutil
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import List, Optional

from DocServer.schemas import RepoConfig
from DocServer.utils.exceptions import GitError
from DocServer.utils.git_utils import build_git_env, ensure_git_installed, run_command

logger = logging.getLogger(__name__)


class SyncStatus(str, Enum):
    UNINITIALIZED = "uninitialized"
    CLONED = "cloned"
    SYNCED = "synced"
    SYNC_FAILED = "sync_failed"


@dataclass
class SyncState:
    """Outcome of the most recent clone or pull. Used for logging only."""

    status: SyncStatus = SyncStatus.UNINITIALIZED
    last_attempt: Optional[datetime] = None
    last_success: Optional[datetime] = None
    last_error: Optional[str] = None

    def record(self, status: SyncStatus, error: Optional[str] = None) -> None:
        now = datetime.now(timezone.utc)
        self.status = status
        self.last_attempt = now
        self.last_error = error
        if error is None:
            self.last_success = now


class RepoSyncer:
    """
    Own one checkout of a remote repository: clone once, then pull periodically.

    The checkout is mutated in place while requests may read from it; readers
    can observe a file mid-update.

    Parameters
    ----------
    repo : RepoConfig
        Remote, branch, credentials and pull interval.
    directory : Path
        The serving root the repository is cloned into.
    """

    def __init__(self, repo: RepoConfig, directory: Path) -> None:
        self.repo = repo
        self.directory = directory
        self.state = SyncState()
        password = repo.password.get_secret_value() if repo.password is not None else None
        self._env = build_git_env(repo.username, password)

    def _clone_command(self) -> List[str]:
        command = ["git", "clone", "--single-branch"]
        if self.repo.branch:
            command += ["--branch", self.repo.branch]
        command += ["--", self.repo.url, str(self.directory)]
        return command

    def _pull_command(self) -> List[str]:
        command = ["git", "-C", str(self.directory), "pull", "--ff-only"]
        if self.repo.branch:
            command += ["origin", self.repo.branch]
        return command

    async def clone(self) -> None:
        """
        Clone the remote into the serving root, or adopt an existing checkout.

        A root that already holds files but no ``.git`` is turned into a
        checkout in place; files that the repository does not track are left
        alone.

        Raises
        ------
        GitError
            If git is missing or the clone fails. There is nothing to serve in
            that case, so callers treat it as fatal.
        """
        if (self.directory / ".git").is_dir():
            logger.info("Reusing existing git checkout in %s", self.directory)
            self.state.record(SyncStatus.CLONED)
            return

        await ensure_git_installed()
        logger.info("Cloning git repository: %s", self.repo.url)
        try:
            if self.directory.is_dir() and any(self.directory.iterdir()):
                await self._clone_into_existing()
            else:
                await run_command(*self._clone_command(), env=self._env)
        except GitError as exc:
            logger.error("Failed cloning %s: %s", self.repo.url, exc)
            self.state.record(SyncStatus.UNINITIALIZED, error=str(exc))
            raise
        self.state.record(SyncStatus.CLONED)
        logger.info("Done cloning.")

    async def _remote_default_branch(self) -> str:
        stdout, _ = await run_command("git", "ls-remote", "--symref", self.repo.url, "HEAD", env=self._env)
        for line in stdout.decode(errors="replace").splitlines():
            if line.startswith("ref: refs/heads/"):
                return line[len("ref: refs/heads/"):].split("\t", 1)[0]
        raise GitError(f"Could not determine the default branch of {self.repo.url}")

    async def _clone_into_existing(self) -> None:
        # git clone refuses non-empty destinations: init, fetch and check out instead.
        logger.info("%s is not empty, checking out %s in place", self.directory, self.repo.url)
        branch = self.repo.branch or await self._remote_default_branch()
        git = ("git", "-C", str(self.directory))
        await run_command("git", "init", "-q", str(self.directory), env=self._env)
        try:
            await run_command(*git, "remote", "add", "-t", branch, "origin", self.repo.url, env=self._env)
            await run_command(*git, "fetch", "-q", "origin", env=self._env)
            await run_command(*git, "checkout", "-q", "-B", branch, "--track", f"origin/{branch}", env=self._env)
        except GitError:
            shutil.rmtree(self.directory / ".git", ignore_errors=True)
            raise

    async def pull(self) -> bool:
        """
        Fast-forward the checkout to the remote branch.

        Failures are logged and swallowed; the current tree stays in place
        until a later pull succeeds.

        Returns
        -------
        bool
            True if the pull succeeded.
        """
        logger.info("Pulling git repository: %s", self.repo.url)
        try:
            await run_command(*self._pull_command(), env=self._env)
        except GitError as exc:
            logger.warning("Failed pulling %s: %s", self.repo.url, exc)
            self.state.record(SyncStatus.SYNC_FAILED, error=str(exc))
            return False
        except Exception as exc:
            logger.error("Unexpected error while pulling %s: %s", self.repo.url, exc, exc_info=True)
            self.state.record(SyncStatus.SYNC_FAILED, error=str(exc))
            return False

        self.state.record(SyncStatus.SYNCED)
        logger.info("Done pulling.")
        return True

    async def run(self) -> None:
        """Pull on a fixed interval until cancelled."""
        while True:
            await asyncio.sleep(self.repo.pull_interval_sec)
            await self.pull()
