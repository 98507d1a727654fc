"""
Changelog document handling.

Release metadata, template rendering and merging of the rendered entry
into the existing ``CHANGELOG.md``.
"""

from .merger import ChangelogError, merge_changelog, update_changelog_file  # noqa: F401
from .release import ReleaseMetadata, VersionFileError, build_release_metadata  # noqa: F401
from .render import RenderError, render_fragment  # noqa: F401
