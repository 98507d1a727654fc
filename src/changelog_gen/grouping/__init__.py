"""
Grouping logic for changelog entries.

This package infers commit scopes from changed paths, filters out ignored
commits and groups the rest into changelog sections. See
:mod:`changelog_gen.grouping.scope_inference`,
:mod:`changelog_gen.grouping.ignore_filter` and
:mod:`changelog_gen.grouping.commit_grouper` for details.
"""

from .commit_grouper import GROUP_ORDER, CommitGroup, create_commit_groups  # noqa: F401
from .ignore_filter import filter_ignored, is_ignored  # noqa: F401
from .scope_inference import infer_scope  # noqa: F401
