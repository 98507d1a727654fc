import unittest
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import patch

from changelog_gen.vcs.git_client import GitClient, GitError


class DummyProc(SimpleNamespace):
    returncode: int = 0
    stdout: str = ""
    stderr: str = ""


class TestGitClient(unittest.TestCase):
    def _client_with(self, outputs):
        calls = []

        def fake_run(self, args, check=True):
            calls.append(args)
            return DummyProc(returncode=0, stdout=outputs.get(args[0], ""), stderr="")

        patcher = patch.object(GitClient, "_run", autospec=True)
        mock_run = patcher.start()
        self.addCleanup(patcher.stop)
        mock_run.side_effect = fake_run
        return GitClient(Path("/repo")), calls

    def test_latest_tag_commit(self) -> None:
        client, calls = self._client_with({"rev-list": "9f8e7d6c\n"})
        self.assertEqual(client.latest_tag_commit(), "9f8e7d6c")
        self.assertEqual(calls, [["rev-list", "--tags", "--max-count=1"]])

    def test_latest_tag_commit_without_tags(self) -> None:
        client, _ = self._client_with({"rev-list": "\n"})
        with self.assertRaises(GitError):
            client.latest_tag_commit()

    def test_describe_tag(self) -> None:
        client, calls = self._client_with({"describe": "v1.29.0\n"})
        self.assertEqual(client.describe_tag("9f8e7d6c"), "v1.29.0")
        self.assertEqual(calls, [["describe", "--tags", "9f8e7d6c"]])

    def test_log_since_uses_format_and_range(self) -> None:
        client, calls = self._client_with({"log": "@@R@@HASH:a\n"})
        self.assertEqual(client.log_since("v1.29.0", "@@R@@HASH:%h"), "@@R@@HASH:a\n")
        self.assertEqual(calls, [["log", "--pretty=@@R@@HASH:%h", "v1.29.0..."]])

    def test_changed_files(self) -> None:
        output = "plugins/inputs/mqtt/mqtt.go\n\nREADME.md\n"
        client, calls = self._client_with({"diff-tree": output})
        self.assertEqual(client.changed_files("abc"), ["plugins/inputs/mqtt/mqtt.go", "README.md"])
        self.assertEqual(calls, [["diff-tree", "--no-commit-id", "--name-only", "-r", "abc"]])


class TestGitClientRun(unittest.TestCase):
    @patch("changelog_gen.vcs.git_client.subprocess.run")
    def test_run_raises_on_failure(self, mock_run) -> None:
        mock_run.return_value = DummyProc(returncode=128, stdout="", stderr="fatal: bad revision\n")
        with self.assertRaises(GitError) as ctx:
            GitClient(Path("/repo")).describe_tag("nope")
        self.assertIn("bad revision", str(ctx.exception))

    @patch("changelog_gen.vcs.git_client.subprocess.run")
    def test_run_passes_repo_root(self, mock_run) -> None:
        mock_run.return_value = DummyProc(returncode=0, stdout="v1\n", stderr="")
        GitClient(Path("/repo")).describe_tag("abc")
        args, kwargs = mock_run.call_args
        self.assertEqual(args[0], ["git", "describe", "--tags", "abc"])
        self.assertEqual(kwargs["cwd"], Path("/repo"))

    @patch("changelog_gen.vcs.git_client.subprocess.run")
    def test_run_keeps_non_utf8_bytes(self, mock_run) -> None:
        mock_run.return_value = DummyProc(returncode=0, stdout="HASH:abc\n", stderr="")
        GitClient(Path("/repo")).log_since("v1", "%H")
        _, kwargs = mock_run.call_args
        self.assertEqual(kwargs["encoding"], "utf-8")
        self.assertEqual(kwargs["errors"], "surrogateescape")
        # The decoded text encodes back to the exact bytes git produced.
        raw = b"fix: caf\xe9"
        self.assertEqual(raw.decode(kwargs["encoding"], kwargs["errors"]).encode("utf-8", "surrogateescape"), raw)

    @patch("changelog_gen.vcs.git_client.subprocess.run")
    def test_missing_git_binary(self, mock_run) -> None:
        mock_run.side_effect = FileNotFoundError("git")
        with self.assertRaises(GitError):
            GitClient(Path("/repo")).changed_files("abc")

    @patch("changelog_gen.vcs.git_client.subprocess.run")
    def test_run_without_check_returns_result(self, mock_run) -> None:
        mock_run.return_value = DummyProc(returncode=1, stdout="", stderr="err")
        result = GitClient(Path("/repo"))._run(["status"], check=False)
        self.assertEqual(result.returncode, 1)


def test_find_repo_root(tmp_path: Path):
    (tmp_path / ".git").mkdir()
    nested = tmp_path / "a" / "b"
    nested.mkdir(parents=True)
    assert GitClient.find_repo_root(nested) == tmp_path.resolve()


def test_find_repo_root_none(tmp_path: Path):
    with patch.object(Path, "exists", return_value=False):
        assert GitClient.find_repo_root(tmp_path) is None


if __name__ == "__main__":
    unittest.main()
