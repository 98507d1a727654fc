"""
Merging of a rendered release entry into the changelog document.

The document is anchored on a heading line (``# Changelog``). Everything
above the heading is replaced by a fixed header block, the new entry is
inserted right below the heading, and every line after the heading is
carried over verbatim. If the heading is missing, the whole existing
document is kept below the new entry.

The write is a plain overwrite without locking or atomic replacement; an
interrupted run has to be recovered from version control.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


DEFAULT_HEADING = "# Changelog"
DEFAULT_HEADER = "<!-- markdownlint-disable MD024 -->\n\n"


class ChangelogError(Exception):
    """Raised when the changelog document cannot be read or written."""

    pass


def _split_lines(document: str) -> List[str]:
    """Split on ``\\n`` only, without a trailing empty element."""
    if not document:
        return []
    lines = document.split("\n")
    if document.endswith("\n"):
        lines.pop()
    return lines


def extract_tail(document: str, heading: str = DEFAULT_HEADING) -> str:
    """Return the part of ``document`` after the first line equal to ``heading``.

    A trailing carriage return on a line is ignored for the comparison.
    Each retained line is terminated with a newline. When no line matches,
    the whole document is returned in the same form.
    """
    lines = _split_lines(document)
    # A CRLF document still matches the heading; tail lines keep their "\r".
    start = next((index + 1 for index, line in enumerate(lines) if line.rstrip("\r") == heading), None)
    if start is None:
        logger.warning("Heading %r not found; keeping the whole document below the new entry", heading)
        start = 0
    return "".join(line + "\n" for line in lines[start:])


def merge_changelog(
    document: str,
    fragment: str,
    heading: str = DEFAULT_HEADING,
    header: str = DEFAULT_HEADER,
) -> str:
    """Insert ``fragment`` below ``heading`` in ``document``.

    The result is ``header + heading + blank line + fragment + tail``.
    """
    return f"{header}{heading}\n\n{fragment}{extract_tail(document, heading)}"


def update_changelog_file(
    path: Path,
    fragment: str,
    heading: str = DEFAULT_HEADING,
    header: str = DEFAULT_HEADER,
) -> str:
    """Merge ``fragment`` into the changelog at ``path`` and write it back.

    Returns
    -------
    str
        The new document content.

    Raises
    ------
    ChangelogError
        If the changelog does not exist, cannot be read, or cannot be
        written.
    """
    try:
        # newline="" and surrogateescape keep the existing bytes unchanged.
        with open(path, "r", encoding="utf-8", errors="surrogateescape", newline="") as handle:
            document = handle.read()
    except OSError as exc:
        logger.error("Failed to read changelog %s: %s", path, exc)
        raise ChangelogError(f"Cannot read changelog {path}: {exc}") from exc

    merged = merge_changelog(document, fragment, heading, header)

    try:
        with open(path, "w", encoding="utf-8", errors="surrogateescape", newline="") as handle:
            handle.write(merged)
    except (OSError, UnicodeError) as exc:
        logger.error("Failed to write changelog %s: %s", path, exc)
        raise ChangelogError(f"Cannot write changelog {path}: {exc}") from exc

    logger.debug("Wrote %d characters to %s", len(merged), path)
    return merged
