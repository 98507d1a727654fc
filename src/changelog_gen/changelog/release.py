"""
Release metadata for a changelog entry.

The version comes from a one-line version file maintained by the build
(``build_version.txt`` by default); the date is the day of the run.
"""

from __future__ import annotations

import datetime
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


class VersionFileError(Exception):
    """Raised when the release version cannot be read."""

    pass


@dataclass(frozen=True)
class ReleaseMetadata:
    """Version and date printed in the heading of a changelog entry."""

    version: str
    date: str


def read_release_version(path: Path) -> str:
    """Read the version file and return the version prefixed with ``v``.

    Trailing newlines are removed; the rest of the content is used as is.

    Raises
    ------
    VersionFileError
        If the file is missing, unreadable, not UTF-8 or empty.
    """
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logger.error("Failed to read version file %s: %s", path, exc)
        raise VersionFileError(f"Cannot read version file {path}: {exc}") from exc

    version = content.rstrip("\r\n")
    if not version:
        raise VersionFileError(f"Version file {path} is empty")
    return f"v{version}"


def build_release_metadata(version_file: Path, today: Optional[datetime.date] = None) -> ReleaseMetadata:
    """Combine the version from ``version_file`` with ``today`` (defaults to the current date)."""
    if today is None:
        today = datetime.date.today()
    return ReleaseMetadata(version=read_release_version(version_file), date=today.isoformat())
