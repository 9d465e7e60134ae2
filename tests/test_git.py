"""Tests for the git wrapper and the GitHub client."""

import json
import shutil

import httpx
import pytest

from tools.forge import ForgeError, GitHubClient, parse_github_remote
from tools.git_manager import GitManager, parse_status

requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")


class TestParseStatus:
    def test_branch_with_tracking_and_counts(self):
        status = parse_status("## main...origin/main [ahead 2, behind 1]\n")

        assert status.branch == "main"
        assert status.tracking == "origin/main"
        assert status.ahead == 2
        assert status.behind == 1
        assert status.is_clean

    def test_files(self):
        output = "\n".join(
            [
                "## feature",
                "M  index.js",
                " M README.md",
                "?? notes.txt",
                "R  old.js -> new.js",
            ]
        )

        status = parse_status(output)

        assert status.branch == "feature"
        assert status.tracking is None
        assert [f.path for f in status.files] == ["index.js", "README.md", "notes.txt", "new.js"]
        assert status.files[0].index == "M"
        assert status.files[1].working_tree == "M"
        assert status.files[2].is_untracked
        assert not status.is_clean

    def test_fresh_repository(self):
        status = parse_status("## No commits yet on main\n?? manifest.json\n")

        assert status.branch == "main"
        assert [f.path for f in status.files] == ["manifest.json"]


@requires_git
class TestGitManager:
    @pytest.fixture(autouse=True)
    def git_identity(self, monkeypatch):
        monkeypatch.setenv("GIT_AUTHOR_NAME", "Test")
        monkeypatch.setenv("GIT_AUTHOR_EMAIL", "test@example.com")
        monkeypatch.setenv("GIT_COMMITTER_NAME", "Test")
        monkeypatch.setenv("GIT_COMMITTER_EMAIL", "test@example.com")

    def test_init_stage_commit(self, tmp_path):
        git = GitManager(tmp_path)
        assert not git.is_repo()

        assert git.init_repo().success
        assert git.is_repo()

        (tmp_path / "index.js").write_text("x", encoding="utf-8")
        assert git.stage_all().success
        assert [f.path for f in git.status().files] == ["index.js"]

        result = git.commit("Initial commit")
        assert result.success
        assert result.message.startswith("Committed: ")
        assert git.status().is_clean

    def test_current_branch_matches_status(self, tmp_path):
        git = GitManager(tmp_path)
        git.init_repo()
        (tmp_path / "index.js").write_text("x", encoding="utf-8")
        git.stage_all()
        git.commit("Initial commit")

        assert git.get_current_branch() == git.status().branch

    def test_init_twice_is_harmless(self, tmp_path):
        git = GitManager(tmp_path)
        git.init_repo()

        assert git.init_repo().message == "Repository already initialized"

    def test_remotes(self, tmp_path):
        git = GitManager(tmp_path)
        git.init_repo()
        assert not git.has_remote()
        assert git.get_remote_url() is None

        git.add_remote("git@github.com:octo/one.git")
        assert git.get_remote_url() == "git@github.com:octo/one.git"

        result = git.add_remote("git@github.com:octo/two.git")
        assert result.message.startswith("Updated remote")
        assert git.get_remote_url() == "git@github.com:octo/two.git"

    def test_push_without_remote_fails_softly(self, tmp_path):
        git = GitManager(tmp_path)
        git.init_repo()

        result = git.push("origin", "main")

        assert not result.success
        assert result.message.startswith("Failed to push")

    def test_clone_local_repository(self, tmp_path):
        upstream = tmp_path / "upstream"
        upstream.mkdir()
        git = GitManager(upstream)
        git.init_repo()
        (upstream / "manifest.json").write_text("{}", encoding="utf-8")
        git.stage_all()
        git.commit("Initial commit")

        target = tmp_path / "installed" / "copy"
        result = GitManager(target).clone(str(upstream))

        assert result.success
        assert (target / "manifest.json").exists()

    def test_clone_failure(self, tmp_path):
        result = GitManager(tmp_path / "copy").clone(str(tmp_path / "missing"))

        assert not result.success


class TestParseGithubRemote:
    @pytest.mark.parametrize(
        "url",
        [
            "git@github.com:octo/word-count.git",
            "https://github.com/octo/word-count.git",
            "https://github.com/octo/word-count",
            "ssh://git@github.com/octo/word-count.git",
        ],
    )
    def test_github_urls(self, url):
        assert parse_github_remote(url) == ("octo", "word-count")

    def test_other_hosts(self):
        assert parse_github_remote("git@gitlab.com:octo/word-count.git") is None


class TestGitHubClient:
    def test_create_release(self):
        seen = {}

        def handler(request):
            seen["method"] = request.method
            seen["url"] = str(request.url)
            seen["auth"] = request.headers["Authorization"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(201, json={"id": 1, "html_url": "https://github.com/octo/wc/releases/v1"})

        client = GitHubClient("secret", transport=httpx.MockTransport(handler))
        release = client.create_release("octo", "wc", tag_name="v1.0.0", name="Release 1.0.0", body="Notes")

        assert release["id"] == 1
        assert seen["method"] == "POST"
        assert seen["url"] == "https://api.github.com/repos/octo/wc/releases"
        assert seen["auth"] == "Bearer secret"
        assert seen["body"] == {
            "tag_name": "v1.0.0",
            "name": "Release 1.0.0",
            "body": "Notes",
            "draft": False,
            "prerelease": False,
        }

    def test_api_message_is_surfaced(self):
        client = GitHubClient(
            "secret",
            transport=httpx.MockTransport(
                lambda r: httpx.Response(422, json={"message": "Validation Failed"})
            ),
        )

        with pytest.raises(ForgeError, match="Validation Failed"):
            client.create_release("octo", "wc", tag_name="v1.0.0", name="Release 1.0.0")

    def test_status_fallback_message(self):
        client = GitHubClient(
            "secret", transport=httpx.MockTransport(lambda r: httpx.Response(500, text="oops"))
        )

        with pytest.raises(ForgeError, match="GitHub API error: 500"):
            client.create_release("octo", "wc", tag_name="v1.0.0", name="Release 1.0.0")

    def test_connection_error(self):
        def handler(request):
            raise httpx.ConnectError("unreachable", request=request)

        client = GitHubClient("secret", transport=httpx.MockTransport(handler))

        with pytest.raises(ForgeError, match="Connection error"):
            client.create_release("octo", "wc", tag_name="v1.0.0", name="Release 1.0.0")

    def test_custom_api_url(self):
        urls = []

        def handler(request):
            urls.append(str(request.url))
            return httpx.Response(201, json={})

        GitHubClient(
            "t", api_url="https://ghe.example.com/api/v3/", transport=httpx.MockTransport(handler)
        ).create_release("octo", "wc", tag_name="v1", name="Release 1")

        assert urls == ["https://ghe.example.com/api/v3/repos/octo/wc/releases"]
