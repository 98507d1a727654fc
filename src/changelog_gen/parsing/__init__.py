"""
Parsing of raw ``git log`` output.

:mod:`changelog_gen.parsing.tokenizer` splits the custom formatted log into
field maps and :mod:`changelog_gen.parsing.commit_parser` turns those into
classified commit records.
"""

from .commit_parser import CommitRecord, classify_record, parse_subject  # noqa: F401
from .tokenizer import MalformedFieldError, build_log_format, tokenize  # noqa: F401
