"""
Scope inference from the files a commit touched.

Plugin code lives under ``<root>/<category>/<component>/`` (for example
``plugins/inputs/mqtt/mqtt.go``). A commit without an explicit scope gets
``category.component`` from the first changed path that follows this
layout. Generic paths such as ``plugins/outputs/all/...`` are skipped.
Failing to infer a scope is a normal outcome and yields an empty string.
"""

from __future__ import annotations

import logging
from typing import Optional

from changelog_gen.vcs.git_client import GitError
from changelog_gen.vcs.history import CommitHistory


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


# Placeholder component that aggregates every plugin of a category.
_PLACEHOLDER_COMPONENT = "all"


def scope_from_path(path: str, scope_root: str = "plugins") -> Optional[str]:
    """Return ``category.component`` for ``path``, or ``None`` if it does not qualify.

    Only paths with a file or directory below the component directory
    qualify, i.e. ``<root>/<category>/<component>/<anything>``.
    """
    parts = path.split("/")
    if parts[0] != scope_root:
        return None
    # The component must be a directory: drop the final segment.
    directories = parts[:-1]
    if len(directories) < 3:
        return None
    category, component = directories[1], directories[2]
    if not component or component == _PLACEHOLDER_COMPONENT:
        return None
    return f"{category}.{component}"


def infer_scope(commit_hash: str, history: CommitHistory, scope_root: str = "plugins") -> str:
    """Infer a scope for ``commit_hash`` from its changed files.

    Parameters
    ----------
    commit_hash : str
        Commit to inspect.
    history : CommitHistory
        Source of the changed file listing.
    scope_root : str
        Top-level directory of the plugin layout.

    Returns
    -------
    str
        The scope of the first qualifying path in listing order, or ``""``
        when the query fails or nothing qualifies.
    """
    if not commit_hash:
        return ""
    try:
        changed = history.changed_files(commit_hash)
    except GitError as exc:
        logger.debug("Could not list files of %s: %s", commit_hash, exc)
        return ""

    for path in changed:
        scope = scope_from_path(path, scope_root)
        if scope is not None:
            logger.debug("Inferred scope %s for %s from %s", scope, commit_hash, path)
            return scope
    return ""
