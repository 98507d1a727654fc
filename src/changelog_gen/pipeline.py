"""
Commit collection for a changelog run.

Ties the history queries to the parser: find the starting tag, dump the
log since that tag, tokenize it, classify every record and drop ignored
commits. Errors from the history source and malformed log fields are not
handled here; they abort the run.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from changelog_gen.config.loader import ChangelogConfig
from changelog_gen.grouping.ignore_filter import filter_ignored
from changelog_gen.parsing.commit_parser import CommitRecord, classify_records
from changelog_gen.parsing.tokenizer import build_log_format, tokenize
from changelog_gen.vcs.history import CommitHistory


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


def resolve_latest_tag(history: CommitHistory) -> str:
    """Return the name of the most recent tag."""
    commit = history.latest_tag_commit()
    tag = history.describe_tag(commit)
    logger.debug("Latest tag is %s (%s)", tag, commit)
    return tag


def collect_commits(
    history: CommitHistory,
    config: ChangelogConfig,
    since: Optional[str] = None,
) -> List[CommitRecord]:
    """Return the classified, non-ignored commits since ``since``.

    Parameters
    ----------
    history : CommitHistory
        Source of tags, log and changed files.
    config : ChangelogConfig
        Markers, field names and ignore list.
    since : Optional[str]
        Starting revision. Defaults to the most recent tag.

    Returns
    -------
    List[CommitRecord]
        Commits in log order (newest first).
    """
    tag = since if since else resolve_latest_tag(history)
    raw_log = history.log_since(tag, build_log_format(config))
    field_sets = tokenize(raw_log, config)
    logger.debug("Parsed %d log records since %s", len(field_sets), tag)

    commits = classify_records(field_sets, config, history)
    kept = filter_ignored(commits, config.ignore_list)
    logger.debug("Kept %d of %d commits after ignore filter", len(kept), len(commits))
    return kept
