"""
Removal of commits that should never reach the changelog.

Routine commits (configuration regeneration and the like) are recognised
by a configured list of literal substrings matched against the parsed
subject.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterable, List

if TYPE_CHECKING:
    from changelog_gen.parsing.commit_parser import CommitRecord


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


def is_ignored(subject: str, ignore_list: Iterable[str]) -> bool:
    """Return True if any entry of ``ignore_list`` occurs in ``subject`` (case-sensitive)."""
    return any(substring in subject for substring in ignore_list)


def filter_ignored(commits: Iterable[CommitRecord], ignore_list: Iterable[str]) -> List[CommitRecord]:
    """Drop ignored commits, keeping the order of the rest."""
    ignore_list = tuple(ignore_list)
    kept: List[CommitRecord] = []
    for commit in commits:
        if is_ignored(commit.subject, ignore_list):
            logger.debug("Ignoring commit %s: %s", commit.hash, commit.subject)
            continue
        kept.append(commit)
    return kept
