from changelog_gen.config.loader import DEFAULT_IGNORE_LIST
from changelog_gen.grouping.ignore_filter import filter_ignored, is_ignored
from changelog_gen.parsing.commit_parser import CommitRecord


def test_prefix_and_interior_matches():
    ignore = ["update configs"]
    assert is_ignored("update configs", ignore)
    assert is_ignored("update configs for 1.30", ignore)
    assert is_ignored("chore: update configs", ignore)


def test_match_is_case_sensitive():
    assert not is_ignored("Update Configs", ["update configs"])


def test_empty_ignore_list_keeps_everything():
    assert not is_ignored("anything", [])


def test_filter_keeps_order_of_remaining_commits():
    commits = [
        CommitRecord(hash="1", type="fix", subject="real fix"),
        CommitRecord(hash="2", type="chore", subject="update etc/telegraf.conf and etc/telegraf_windows.conf"),
        CommitRecord(hash="3", type="feat", subject="new input"),
        CommitRecord(hash="4", type="fix", subject="regenerate, update configs"),
    ]
    kept = filter_ignored(commits, DEFAULT_IGNORE_LIST)
    assert [c.hash for c in kept] == ["1", "3"]


def test_filter_uses_parsed_subject():
    # The raw subject "chore: skip me" is stored as "skip me".
    commits = [CommitRecord(hash="1", type="chore", subject="skip me")]
    assert filter_ignored(commits, ["chore: skip"]) == commits
    assert filter_ignored(commits, ["skip me"]) == []
