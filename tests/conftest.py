from typing import Dict, List, Optional

import pytest

from changelog_gen.config.loader import ChangelogConfig
from changelog_gen.vcs.git_client import GitError


class FakeHistory:
    """In-memory stand-in for :class:`changelog_gen.vcs.git_client.GitClient`."""

    def __init__(
        self,
        files: Optional[Dict[str, List[str]]] = None,
        log: str = "",
        tag_commit: str = "1a2b3c4",
        tag: str = "v1.0.0",
        failing: Optional[set] = None,
    ) -> None:
        self.files = files or {}
        self.log = log
        self.tag_commit = tag_commit
        self.tag = tag
        self.failing = failing or set()
        self.log_calls = []
        self.file_queries = []

    def latest_tag_commit(self) -> str:
        if not self.tag_commit:
            raise GitError("No tags found in repository")
        return self.tag_commit

    def describe_tag(self, commit: str) -> str:
        assert commit == self.tag_commit
        return self.tag

    def log_since(self, tag: str, log_format: str) -> str:
        self.log_calls.append((tag, log_format))
        return self.log

    def changed_files(self, commit_hash: str) -> List[str]:
        self.file_queries.append(commit_hash)
        if commit_hash in self.failing:
            raise GitError(f"bad object {commit_hash}")
        return list(self.files.get(commit_hash, []))


def make_log(records: List[Dict[str, str]], config: ChangelogConfig) -> str:
    """Render records the way ``git log --pretty=<build_log_format()>`` would."""
    chunks = []
    for record in records:
        fields = [
            f"{config.hash_field}:{record.get('hash', '')}",
            f"{config.author_field}:{record.get('author', '')}",
            f"{config.subject_field}:{record.get('subject', '')}",
            f"{config.body_field}:{record.get('body', '')}",
        ]
        chunks.append(config.record_separator + config.field_delimiter.join(fields) + "\n")
    return "".join(chunks)


@pytest.fixture
def config() -> ChangelogConfig:
    return ChangelogConfig()


@pytest.fixture
def history_factory():
    """Return the fake history class so tests can build it with their own data."""
    return FakeHistory


@pytest.fixture
def log_builder(config):
    def build(records):
        return make_log(records, config)

    return build
