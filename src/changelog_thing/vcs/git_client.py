"""
Git client implementation for changelog_thing.

This module wraps the few read-only Git operations the report needs:
checking that a directory is a repository root, reading a remote URL and
fetching formatted log lines. All subprocess calls go through
:meth:`GitClient._run` so that unit tests can mock them easily.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import List, Union

from changelog_thing.parsing.commit_parser import LOG_FORMAT


logger = logging.getLogger(__name__)
# Attach a null handler to avoid logging errors when the root logger is not
# configured. Logs will propagate to the root when configured by the CLI.
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


class GitError(Exception):
    """Raised when a Git command fails."""

    pass


class GitClient:
    """Client for reading history from a Git repository."""

    def __init__(self, repo_dir: Union[str, Path]) -> None:
        self.repo_dir = Path(repo_dir)

    # ------------------------------------------------------------------
    # Basic Git commands
    # ------------------------------------------------------------------
    def _run(self, args: List[str], check: bool = True) -> subprocess.CompletedProcess:
        """Run a Git command inside the repository directory.

        Raises
        ------
        GitError
            If Git is not installed, or the command exits with a non-zero
            status when ``check`` is True.
        """
        full_cmd = ["git"] + args
        logger.debug("Executing Git command in %s: %s", self.repo_dir, " ".join(full_cmd))
        try:
            result = subprocess.run(
                full_cmd,
                cwd=self.repo_dir,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",  # Replace invalid characters instead of failing
            )
        except (FileNotFoundError, NotADirectoryError) as e:
            logger.error("Unable to run Git in %s: %s", self.repo_dir, e)
            raise GitError(f"Unable to run git in {self.repo_dir}: {e}") from e

        if check and result.returncode != 0:
            logger.error(
                "Git command failed: %s\nSTDOUT: %s\nSTDERR: %s",
                " ".join(full_cmd),
                result.stdout,
                result.stderr,
            )
            raise GitError(
                result.stderr.strip()
                or result.stdout.strip()
                or f"'{' '.join(full_cmd)}' exited with status {result.returncode}"
            )
        return result

    # ------------------------------------------------------------------
    # Repository information
    # ------------------------------------------------------------------
    def is_repo_root(self) -> bool:
        """Return True if the directory is the top level of a Git work tree.

        A subdirectory of another repository is rejected so that its
        parent's history is never reported under the wrong name.
        """
        result = self._run(["rev-parse", "--show-toplevel"], check=False)
        toplevel = result.stdout.strip()
        if result.returncode != 0 or not toplevel:
            return False
        return Path(toplevel).resolve() == self.repo_dir.resolve()

    def get_remote_url(self, remote: str = "origin") -> str:
        """Return the configured URL of ``remote``.

        Raises
        ------
        GitError
            If the remote does not exist.
        """
        result = self._run(["config", "--get", f"remote.{remote}.url"], check=False)
        url = result.stdout.strip()
        if result.returncode != 0 or not url:
            raise GitError(f"No URL configured for remote '{remote}' in {self.repo_dir}")
        return url

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------
    def get_log_lines(self, age_days: int) -> List[str]:
        """Return formatted log lines of the last ``age_days`` days.

        Lines follow :data:`~changelog_thing.parsing.commit_parser.LOG_FORMAT`
        and are ordered newest first.
        """
        result = self._run(
            ["log", f"--since={age_days} days ago", f"--pretty=format:{LOG_FORMAT}"],
            check=True,
        )
        return result.stdout.splitlines()
