"""
Read-only history queries consumed by the changelog pipeline.

The pipeline never talks to ``git`` directly. It receives an object that
implements :class:`CommitHistory` so that parsing, scope inference and the
CLI can be exercised against an in-memory fake.
"""

from __future__ import annotations

from typing import List, Protocol


class CommitHistory(Protocol):
    """The four history queries the changelog pipeline relies on."""

    def latest_tag_commit(self) -> str:
        """Return the commit id of the most recently created tag."""
        ...

    def describe_tag(self, commit: str) -> str:
        """Return the human readable tag name pointing at ``commit``."""
        ...

    def log_since(self, tag: str, log_format: str) -> str:
        """Return the raw log of commits since ``tag`` rendered with ``log_format``."""
        ...

    def changed_files(self, commit_hash: str) -> List[str]:
        """Return the paths touched by a single commit, in VCS listing order."""
        ...
