"""
Grouping of classified commits into changelog sections.

Only bug fixes and features make it into the changelog. The section order
is fixed; a section without commits is still produced so every release
entry has the same structure.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, Iterable, List, Tuple

if TYPE_CHECKING:
    from changelog_gen.parsing.commit_parser import CommitRecord


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


# Commit type and section title, in display order.
GROUP_ORDER: Tuple[Tuple[str, str], ...] = (
    ("fix", "Bugfixes"),
    ("feat", "Features"),
)


@dataclass
class CommitGroup:
    """A titled changelog section.

    Attributes
    ----------
    title : str
        Section heading, e.g. ``Bugfixes``.
    commits : List[CommitRecord]
        Commits of the section in log order.
    """

    title: str
    commits: List[CommitRecord] = field(default_factory=list)


def create_commit_groups(commits: Iterable[CommitRecord]) -> List[CommitGroup]:
    """Partition ``commits`` by type into the sections of :data:`GROUP_ORDER`.

    Commits whose type has no section, including unclassified commits with
    an empty type, are dropped.
    """
    groups: Dict[str, CommitGroup] = {
        commit_type: CommitGroup(title=title) for commit_type, title in GROUP_ORDER
    }
    for commit in commits:
        group = groups.get(commit.type)
        if group is None:
            logger.debug("Dropping commit %s of type %r", commit.hash, commit.type)
            continue
        group.commits.append(commit)
    return [groups[commit_type] for commit_type, _ in GROUP_ORDER]
