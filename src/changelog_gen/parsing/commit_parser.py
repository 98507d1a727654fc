"""
Classification of raw log records into :class:`CommitRecord` objects.

Subjects are parsed against the Conventional Commit header grammar
``type(scope): subject``. A subject that does not follow the grammar is not
an error: the record is kept with empty ``type``, ``scope`` and
``subject`` and is later left out of every changelog group. When the header
carries no scope, one is inferred from the files the commit touched.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Iterable, List, Optional

from changelog_gen.config.loader import ChangelogConfig
from changelog_gen.grouping.scope_inference import infer_scope
from changelog_gen.parsing.tokenizer import RawFieldSet
from changelog_gen.vcs.history import CommitHistory


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


_HEADER_PATTERN = re.compile(r"^(\w*)(?:\(([\w$.\-*\s]*)\))?:\s(.*)$", re.ASCII)


@dataclass(frozen=True)
class ConventionalHeader:
    """The parts of a subject line that follows the Conventional Commit grammar."""

    type: str
    scope: str
    subject: str


@dataclass(frozen=True)
class CommitRecord:
    """A single classified commit.

    Attributes
    ----------
    hash : str
        Abbreviated commit hash.
    author_name : str
        Author as recorded by Git.
    type : str
        Conventional Commit type (``feat``, ``fix``, ...), empty when the
        subject did not follow the grammar.
    scope : str
        Explicit or inferred scope, possibly empty.
    subject : str
        Subject text after the ``type(scope):`` prefix.
    """

    hash: str
    author_name: str = ""
    type: str = ""
    scope: str = ""
    subject: str = ""

    @property
    def is_conventional(self) -> bool:
        return bool(self.type)


def parse_subject(subject: str) -> Optional[ConventionalHeader]:
    """Parse a subject line, returning ``None`` if it is not a Conventional Commit header.

    >>> parse_subject("fix(api.client): retry on timeout")
    ConventionalHeader(type='fix', scope='api.client', subject='retry on timeout')
    >>> parse_subject("update configs") is None
    True
    """
    match = _HEADER_PATTERN.match(subject)
    if match is None:
        return None
    commit_type, scope, rest = match.groups()
    return ConventionalHeader(type=commit_type, scope=scope or "", subject=rest)


def classify_record(
    fields: RawFieldSet,
    config: ChangelogConfig,
    history: CommitHistory,
) -> CommitRecord:
    """Build a :class:`CommitRecord` from one raw field map.

    Fields other than hash, author and subject are ignored; the body is
    read by the log format but not kept.
    """
    commit_hash = fields.get(config.hash_field, "")
    author_name = fields.get(config.author_field, "")
    header: Optional[ConventionalHeader] = None
    if config.subject_field in fields:
        header = parse_subject(fields[config.subject_field])
        if header is None:
            logger.debug(
                "Commit %s subject is not a conventional header: %r",
                commit_hash,
                fields[config.subject_field],
            )

    commit_type = header.type if header else ""
    scope = header.scope if header else ""
    subject = header.subject if header else ""

    if not scope:
        scope = infer_scope(commit_hash, history, config.scope_root)

    return CommitRecord(
        hash=commit_hash,
        author_name=author_name,
        type=commit_type,
        scope=scope,
        subject=subject,
    )


def classify_records(
    field_sets: Iterable[RawFieldSet],
    config: ChangelogConfig,
    history: CommitHistory,
) -> List[CommitRecord]:
    """Classify every record, keeping log order."""
    return [classify_record(fields, config, history) for fields in field_sets]
