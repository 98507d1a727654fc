"""
Configuration loading for changelog_gen.

Provides the :class:`ChangelogConfig` value and a loader for the optional
JSON configuration file in the repository root. See
:mod:`changelog_gen.config.loader` for implementation details.
"""

from .loader import ChangelogConfig, ConfigError, load_config  # noqa: F401
