"""
Version control system (VCS) integrations.

This package contains the read-only history interface used by the
changelog pipeline and its Git implementation.
"""

from .git_client import GitClient, GitError  # noqa: F401
from .history import CommitHistory  # noqa: F401
