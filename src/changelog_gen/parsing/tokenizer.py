"""
Splitting of a custom formatted ``git log`` dump into raw field maps.

The log is produced with a format string built by :func:`build_log_format`:
every record starts with the record separator and its fields are joined by
the field delimiter, each field rendered as ``NAME:value``. Both markers are
assumed never to appear in commit metadata; if one does, the fields of that
record are misaligned and nothing here detects it.
"""

from __future__ import annotations

from typing import Dict, List, Tuple

from changelog_gen.config.loader import ChangelogConfig


RawFieldSet = Dict[str, str]


class MalformedFieldError(ValueError):
    """Raised when a field token does not have the ``NAME:value`` shape."""

    pass


def build_log_format(config: ChangelogConfig) -> str:
    """Return the ``--pretty`` format that :func:`tokenize` understands."""
    fields = [
        f"{config.hash_field}:%h",
        f"{config.author_field}:%an",
        f"{config.subject_field}:%s",
        f"{config.body_field}:%b",
    ]
    return config.record_separator + config.field_delimiter.join(fields)


def split_records(raw: str, config: ChangelogConfig) -> List[str]:
    """Split ``raw`` on the record separator.

    The segment in front of the first separator never holds a record and
    is discarded.
    """
    return raw.split(config.record_separator)[1:]


def parse_field(token: str) -> Tuple[str, str]:
    """Split one ``NAME:value`` token.

    The name is everything before the first colon; the value is the rest,
    stripped of surrounding whitespace.

    Raises
    ------
    MalformedFieldError
        If the token contains no colon.
    """
    name, sep, value = token.partition(":")
    if not sep:
        raise MalformedFieldError(f"Malformed log field (missing ':'): {token!r}")
    return name, value.strip()


def tokenize(raw: str, config: ChangelogConfig) -> List[RawFieldSet]:
    """Turn a raw log dump into one field map per record, in log order."""
    records: List[RawFieldSet] = []
    for record in split_records(raw, config):
        fields: RawFieldSet = {}
        for token in record.split(config.field_delimiter):
            name, value = parse_field(token)
            fields[name] = value
        records.append(fields)
    return records
