from pathlib import Path

import pytest

from changelog_gen.changelog.release import ReleaseMetadata
from changelog_gen.changelog.render import RenderError, render_fragment
from changelog_gen.grouping.commit_grouper import create_commit_groups
from changelog_gen.parsing.commit_parser import CommitRecord


METADATA = ReleaseMetadata(version="v1.30.0", date="2024-03-05")


def test_default_template_renders_groups():
    commits = [
        CommitRecord(hash="aaa1111", author_name="Jane", type="feat", scope="inputs.mqtt", subject="add tls"),
        CommitRecord(hash="bbb2222", author_name="John", type="fix", scope="", subject="handle nil"),
    ]
    text = render_fragment(METADATA, create_commit_groups(commits))

    assert text.startswith("## v1.30.0 [2024-03-05]\n")
    assert text.index("### Bugfixes") < text.index("### Features")
    assert "- [bbb2222] handle nil (John)\n" in text
    assert "- [aaa1111] `inputs.mqtt` add tls (Jane)\n" in text
    assert text.endswith("\n")


def test_default_template_with_empty_groups():
    text = render_fragment(METADATA, create_commit_groups([]))
    assert "### Bugfixes" in text
    assert "### Features" in text
    assert "- [" not in text


def test_markdown_is_not_escaped():
    commits = [CommitRecord(hash="c", author_name="A & B", type="fix", subject="handle <nil> & \"quotes\"")]
    text = render_fragment(METADATA, create_commit_groups(commits))
    assert "handle <nil> & \"quotes\" (A & B)" in text


def test_custom_template(tmp_path: Path):
    template = tmp_path / "entry.j2"
    template.write_text(
        "{{ version }}|{{ date }}|{% for g in commit_groups %}{{ g.title }}={{ g.commits|length }};{% endfor %}\n",
        encoding="utf-8",
    )
    commits = [CommitRecord(hash="1", type="fix", subject="x")]
    # trim_blocks drops the newline that follows the closing block tag.
    assert render_fragment(METADATA, create_commit_groups(commits), template) == (
        "v1.30.0|2024-03-05|Bugfixes=1;Features=0;"
    )


def test_missing_custom_template(tmp_path: Path):
    with pytest.raises(RenderError):
        render_fragment(METADATA, [], tmp_path / "missing.j2")


def test_undefined_variable_is_an_error(tmp_path: Path):
    template = tmp_path / "bad.j2"
    template.write_text("{{ release_name }}\n", encoding="utf-8")
    with pytest.raises(RenderError):
        render_fragment(METADATA, [], template)


def test_syntax_error_is_an_error(tmp_path: Path):
    template = tmp_path / "broken.j2"
    template.write_text("{% for x in %}\n", encoding="utf-8")
    with pytest.raises(RenderError):
        render_fragment(METADATA, [], template)
