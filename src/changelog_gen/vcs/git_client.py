"""
Git client implementation for changelog_gen.

This module wraps the handful of read-only Git queries the changelog
generator needs: locating the latest tag, naming it, dumping the log since
that tag in a custom format, and listing the files touched by a commit.
All subprocess calls go through :meth:`GitClient._run` so that unit tests
can mock them easily. The client never mutates repository state.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import List, Optional


logger = logging.getLogger(__name__)
# Attach a null handler to avoid logging errors when the root logger is not
# configured. The CLI re-enables propagation when it sets up logging.
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


class GitError(Exception):
    """Raised when a Git command fails."""

    pass


class GitClient:
    """Read-only client for the history of a Git repository."""

    def __init__(self, repo_root: Path) -> None:
        self.repo_root = repo_root

    # ------------------------------------------------------------------
    # Static helpers
    # ------------------------------------------------------------------
    @staticmethod
    def find_repo_root(start: Path) -> Optional[Path]:
        """Find the root of the Git repository starting from ``start``.

        Walk upwards until a ``.git`` entry is found or the filesystem
        root is reached.
        """
        current = start.resolve()
        while True:
            if (current / ".git").exists():
                return current
            if current.parent == current:
                # reached filesystem root
                return None
            current = current.parent

    # ------------------------------------------------------------------
    # Basic Git commands
    # ------------------------------------------------------------------
    def _run(self, args: List[str], check: bool = True) -> subprocess.CompletedProcess:
        """Run a Git command in the repository root.

        Raises
        ------
        GitError
            If the command exits with a non-zero status when ``check`` is True,
            or if the ``git`` executable cannot be started.
        """
        full_cmd = ["git"] + args
        logger.debug("Executing Git command: %s", " ".join(full_cmd))
        try:
            result = subprocess.run(
                full_cmd,
                cwd=self.repo_root,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding='utf-8',
                errors='surrogateescape',  # Non-UTF-8 bytes round-trip into the changelog
            )
        except OSError as e:
            logger.error("Unable to run git: %s", e)
            raise GitError(f"Unable to run git: {e}") from e

        if check and result.returncode != 0:
            logger.error(
                "Git command failed: %s\nSTDOUT: %s\nSTDERR: %s",
                " ".join(full_cmd),
                result.stdout,
                result.stderr,
            )
            raise GitError(result.stderr.strip() or result.stdout.strip())
        return result

    # ------------------------------------------------------------------
    # Tags
    # ------------------------------------------------------------------
    def latest_tag_commit(self) -> str:
        """Return the commit id of the most recent tag.

        Raises
        ------
        GitError
            If the query fails or the repository has no tags.
        """
        result = self._run(["rev-list", "--tags", "--max-count=1"], check=True)
        commit = result.stdout.strip()
        if not commit:
            raise GitError("No tags found in repository")
        return commit

    def describe_tag(self, commit: str) -> str:
        """Return the tag name for ``commit`` as reported by ``git describe``."""
        result = self._run(["describe", "--tags", commit], check=True)
        return result.stdout.strip()

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------
    def log_since(self, tag: str, log_format: str) -> str:
        """Return the log of commits not shared between ``tag`` and HEAD.

        Parameters
        ----------
        tag : str
            Tag (or any revision) the log starts from.
        log_format : str
            Value passed to ``--pretty``.

        Returns
        -------
        str
            Raw log output, newest commit first.
        """
        result = self._run(["log", f"--pretty={log_format}", f"{tag}..."], check=True)
        return result.stdout

    def changed_files(self, commit_hash: str) -> List[str]:
        """List the paths changed by a single commit.

        Uses ``git diff-tree --no-commit-id --name-only -r`` so the order is
        the one Git reports. Empty lines are dropped.
        """
        result = self._run(
            ["diff-tree", "--no-commit-id", "--name-only", "-r", commit_hash],
            check=True,
        )
        return [line for line in result.stdout.splitlines() if line.strip()]
