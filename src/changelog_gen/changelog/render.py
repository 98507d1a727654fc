"""
Rendering of a changelog entry with jinja2.

The template receives three variables:

- ``version``: release version, e.g. ``v1.30.0``.
- ``date``: release date in ISO format.
- ``commit_groups``: list of :class:`~changelog_gen.grouping.commit_grouper.CommitGroup`.

A default template ships with the package (``templates/CHANGELOG.md.j2``);
projects may point the configuration at their own file.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

from jinja2 import (
    BaseLoader,
    Environment,
    FileSystemLoader,
    PackageLoader,
    StrictUndefined,
    TemplateError,
)

from changelog_gen.changelog.release import ReleaseMetadata
from changelog_gen.grouping.commit_grouper import CommitGroup


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


DEFAULT_TEMPLATE_NAME = "CHANGELOG.md.j2"


class RenderError(Exception):
    """Raised when the changelog template cannot be loaded or rendered."""

    pass


def _build_environment(loader: BaseLoader) -> Environment:
    # Markdown output: no HTML escaping.
    return Environment(
        loader=loader,
        autoescape=False,
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
        undefined=StrictUndefined,
    )


def render_fragment(
    metadata: ReleaseMetadata,
    groups: List[CommitGroup],
    template_path: Optional[Path] = None,
) -> str:
    """Render the changelog entry for one release.

    Args:
        metadata: Version and date of the release.
        groups: Changelog sections in display order.
        template_path: Custom template file. ``None`` uses the packaged one.

    Returns:
        The rendered Markdown fragment.

    Raises:
        RenderError: If the template is missing or fails to render.
    """
    if template_path is None:
        env = _build_environment(PackageLoader("changelog_gen", "templates"))
        template_name = DEFAULT_TEMPLATE_NAME
    else:
        if not template_path.is_file():
            raise RenderError(f"Changelog template not found: {template_path}")
        env = _build_environment(FileSystemLoader(str(template_path.parent)))
        template_name = template_path.name

    try:
        template = env.get_template(template_name)
        rendered = template.render(
            version=metadata.version,
            date=metadata.date,
            commit_groups=groups,
        )
    except TemplateError as exc:
        logger.error("Failed to render changelog template %s: %s", template_name, exc)
        raise RenderError(f"Failed to render changelog template {template_name}: {exc}") from exc

    logger.debug("Rendered changelog entry for %s (%d characters)", metadata.version, len(rendered))
    return rendered
