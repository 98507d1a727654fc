"""
Configuration loader for changelog_gen.

The tool reads an optional JSON configuration file named
``.changelog_config.json`` located in the repository root. Every key is
optional; anything not given falls back to the defaults declared on
:class:`ChangelogConfig`. The loaded configuration is a single immutable
value that is built once at startup and passed explicitly to the
tokenizer, classifier, filter and merger.

If an explicitly requested configuration file is missing, or any file is
malformed or contains keys of the wrong type, a :class:`ConfigError` is
raised.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from changelog_gen.changelog.merger import DEFAULT_HEADER, DEFAULT_HEADING


logger = logging.getLogger(__name__)
# Attach a null handler to avoid "No handler" warnings or logging errors in
# environments where the root logger may be closed.
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


CONFIG_FILE_NAME = ".changelog_config.json"

DEFAULT_IGNORE_LIST: Tuple[str, ...] = (
    "update etc/telegraf.conf and etc/telegraf_windows.conf",
    "update configs",
)


class ConfigError(Exception):
    """Raised when the changelog configuration file is missing or invalid."""

    pass


@dataclass(frozen=True)
class ChangelogConfig:
    """Settings for one changelog run.

    Attributes
    ----------
    record_separator : str
        Marker written by ``git log`` in front of every commit record.
    field_delimiter : str
        Marker written between the fields of one record.
    hash_field, author_field, subject_field, body_field : str
        Field names used in the log format and recognised by the parser.
    ignore_list : Tuple[str, ...]
        Substrings; a commit whose parsed subject contains any of them is
        left out of the changelog.
    changelog_path : str
        Changelog document, relative to the repository root.
    version_file : str
        File holding the release version number.
    template_path : Optional[str]
        Custom jinja2 template. ``None`` selects the packaged template.
    heading : str
        Line in the changelog after which new sections are inserted.
    header : str
        Text written above the heading on every merge.
    scope_root : str
        First path segment of the ``<root>/<category>/<component>/``
        convention used to infer scopes.
    """

    record_separator: str = "@@__CHGLOG__@@"
    field_delimiter: str = "@@__CHGLOG_DELIMITER__@@"
    hash_field: str = "HASH"
    author_field: str = "AUTHOR"
    subject_field: str = "SUBJECT"
    body_field: str = "BODY"
    ignore_list: Tuple[str, ...] = DEFAULT_IGNORE_LIST
    changelog_path: str = "CHANGELOG.md"
    version_file: str = "build_version.txt"
    template_path: Optional[str] = None
    heading: str = DEFAULT_HEADING
    header: str = DEFAULT_HEADER
    scope_root: str = "plugins"


# Keys that may appear in the JSON file. Field names are fixed by the log
# parser and are not user configurable.
_STRING_KEYS = (
    "record_separator",
    "field_delimiter",
    "changelog_path",
    "version_file",
    "heading",
    "header",
    "scope_root",
)
_OPTIONAL_STRING_KEYS = ("template_path",)
_LIST_KEYS = ("ignore_list",)


def _validate(data: Dict[str, Any], source: Path) -> Dict[str, Any]:
    """Check key names and value types, returning dataclass keyword arguments."""
    known = set(_STRING_KEYS) | set(_OPTIONAL_STRING_KEYS) | set(_LIST_KEYS)
    unknown = sorted(key for key in data if key not in known)
    if unknown:
        logger.error("Configuration file %s has unknown keys: %s", source, unknown)
        raise ConfigError(f"Unknown configuration keys: {', '.join(unknown)}")

    values: Dict[str, Any] = {}
    for key in _STRING_KEYS:
        if key in data:
            if not isinstance(data[key], str):
                raise ConfigError(f"'{key}' must be a string")
            values[key] = data[key]
    for key in _OPTIONAL_STRING_KEYS:
        if key in data:
            if data[key] is not None and not isinstance(data[key], str):
                raise ConfigError(f"'{key}' must be a string or null")
            values[key] = data[key]
    if "ignore_list" in data:
        ignore_list = data["ignore_list"]
        if not isinstance(ignore_list, list) or not all(isinstance(item, str) for item in ignore_list):
            raise ConfigError("'ignore_list' must be a list of strings")
        values["ignore_list"] = tuple(ignore_list)
    return values


def _check_markers(config: ChangelogConfig) -> None:
    if not config.record_separator or not config.field_delimiter:
        raise ConfigError("'record_separator' and 'field_delimiter' must not be empty")
    if config.record_separator == config.field_delimiter:
        raise ConfigError("'record_separator' and 'field_delimiter' must differ")
    if not config.heading:
        raise ConfigError("'heading' must not be empty")


def load_config(repo_root: Path, config_path: Optional[Path] = None) -> ChangelogConfig:
    """Load the changelog configuration for ``repo_root``.

    Args:
        repo_root: Repository root; the default configuration file is
                   looked up here.
        config_path: Explicit configuration file. When given it must exist.

    Returns:
        A validated :class:`ChangelogConfig`. When no explicit path is given
        and the default file does not exist, the defaults are returned.

    Raises:
        ConfigError: If the configuration file is missing (explicit path
                     only), malformed, or invalid.
    """
    explicit = config_path is not None
    path = config_path if config_path is not None else repo_root / CONFIG_FILE_NAME

    if not path.exists():
        if explicit:
            logger.error("Configuration file '%s' does not exist", path)
            raise ConfigError(f"Missing changelog configuration file: {path}")
        logger.debug("No configuration file at %s, using defaults", path)
        return ChangelogConfig()

    try:
        content = path.read_text(encoding="utf-8")
        data = json.loads(content)
    except (OSError, json.JSONDecodeError) as exc:
        logger.error("Failed to read or parse configuration file: %s", exc)
        raise ConfigError(f"Invalid JSON in {path.name}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"{path.name} must contain a JSON object")

    config = replace(ChangelogConfig(), **_validate(data, path))
    _check_markers(config)

    logger.debug("Loaded changelog configuration from: %s", path)
    logger.debug("Configuration data: %s", config)
    return config
