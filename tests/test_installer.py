"""Tests for the extension installer."""

import shutil
import subprocess
import sys

import pytest

from conftest import RecordingReporter, ScriptedPrompter, write_extension
from extensions import ExtensionInstaller, InstallError
from extensions.installer import install_dependencies, is_remote_source, remote_folder_name
from tools.git_manager import GitResult

# Portable stand-ins for `npm install`
SUCCEEDING_COMMAND = (sys.executable, "-c", "pass")
FAILING_COMMAND = (sys.executable, "-c", "import sys; sys.stderr.write('boom'); sys.exit(3)")


@pytest.fixture
def install_root(tmp_path):
    return tmp_path / "installed"


def _installer(install_root, prompter=None, reporter=None, **kwargs):
    return ExtensionInstaller(
        install_root,
        prompter or ScriptedPrompter(),
        reporter or RecordingReporter(),
        dependency_command=kwargs.pop("dependency_command", SUCCEEDING_COMMAND),
        **kwargs,
    )


class TestSourceHelpers:
    @pytest.mark.parametrize(
        "source",
        ["https://github.com/octo/word-count.git", "http://host/x", "git@github.com:octo/wc.git"],
    )
    def test_remote_sources(self, source):
        assert is_remote_source(source)

    @pytest.mark.parametrize("source", ["./extensions/wc", "/abs/path", "github.com/octo/wc"])
    def test_local_sources(self, source):
        assert not is_remote_source(source)

    def test_remote_folder_name(self):
        assert remote_folder_name("https://github.com/octo/word-count.git") == "word-count"
        assert remote_folder_name("https://github.com/octo/word-count") == "word-count"
        assert remote_folder_name("git@github.com:octo/wc.git") == "wc"

    def test_remote_folder_name_fallback(self):
        assert remote_folder_name("git@host:") == "extension"


class TestLocalInstall:
    def test_copies_extension(self, tmp_path, install_root):
        source = write_extension(tmp_path / "src" / "word-count")
        (source / "node_modules").mkdir()
        (source / "node_modules" / "dep.js").write_text("x", encoding="utf-8")
        (source / ".git").mkdir()
        (source / "lib").mkdir()
        (source / "lib" / "util.js").write_text("x", encoding="utf-8")
        (source / "lib" / "node_modules").mkdir()

        result = _installer(install_root).install(str(source))

        target = install_root / "word-count"
        assert result.path == target
        assert result.manifest.id == "word-count"
        assert not result.cancelled
        assert (target / "manifest.json").exists()
        assert (target / "lib" / "util.js").exists()
        assert not (target / "node_modules").exists()
        assert not (target / ".git").exists()
        assert not (target / "lib" / "node_modules").exists()

    def test_missing_source(self, tmp_path, install_root):
        with pytest.raises(InstallError, match="Directory not found"):
            _installer(install_root).install(str(tmp_path / "nope"))

    def test_file_source_is_rejected(self, tmp_path, install_root):
        source = tmp_path / "notes.txt"
        source.write_text("not an extension", encoding="utf-8")

        with pytest.raises(InstallError, match="Not a directory"):
            _installer(install_root).install(str(source))

    def test_copy_failure_is_install_error(self, tmp_path, install_root, monkeypatch):
        source = write_extension(tmp_path / "src" / "word-count")

        def broken_copytree(*args, **kwargs):
            raise shutil.Error([(str(source), "dest", "permission denied")])

        monkeypatch.setattr(shutil, "copytree", broken_copytree)

        with pytest.raises(InstallError, match="Failed to copy extension"):
            _installer(install_root).install(str(source))

    def test_declined_overwrite_leaves_install_untouched(self, tmp_path, install_root):
        source = write_extension(tmp_path / "src" / "word-count")
        existing = install_root / "word-count"
        existing.mkdir(parents=True)
        (existing / "marker.txt").write_text("original", encoding="utf-8")
        prompter = ScriptedPrompter(confirms=[False])
        reporter = RecordingReporter()

        result = _installer(install_root, prompter, reporter).install(str(source))

        assert result.cancelled
        assert sorted(p.name for p in existing.iterdir()) == ["marker.txt"]
        assert (existing / "marker.txt").read_text(encoding="utf-8") == "original"
        assert reporter.messages("fail") == ["Installation cancelled"]
        assert "Overwrite?" in prompter.questions[0]

    def test_accepted_overwrite_replaces_install(self, tmp_path, install_root):
        source = write_extension(tmp_path / "src" / "word-count")
        existing = install_root / "word-count"
        existing.mkdir(parents=True)
        (existing / "marker.txt").write_text("original", encoding="utf-8")

        result = _installer(install_root, ScriptedPrompter(confirms=[True])).install(str(source))

        assert not result.cancelled
        assert not (existing / "marker.txt").exists()
        assert (existing / "manifest.json").exists()

    def test_missing_manifest_is_not_rolled_back(self, tmp_path, install_root):
        source = tmp_path / "src" / "plain"
        source.mkdir(parents=True)
        (source / "index.js").write_text("x", encoding="utf-8")

        with pytest.raises(InstallError, match="Invalid extension: missing manifest.json"):
            _installer(install_root).install(str(source))

        assert (install_root / "plain" / "index.js").exists()

    def test_runs_dependency_install_when_package_json_exists(self, tmp_path, install_root):
        source = write_extension(tmp_path / "src" / "wc", package={"name": "wc"})
        reporter = RecordingReporter()

        _installer(install_root, reporter=reporter).install(str(source))

        assert "Installing dependencies..." in reporter.messages("phase")
        assert reporter.messages("succeed") == ["Extension installed: Word Count"]

    def test_dependency_failure_is_fatal(self, tmp_path, install_root):
        source = write_extension(tmp_path / "src" / "wc", package={"name": "wc"})

        with pytest.raises(InstallError, match="Command failed with code 3: boom"):
            _installer(install_root, dependency_command=FAILING_COMMAND).install(str(source))


class FakeCloner:
    """git_factory replacement that materializes a folder instead of cloning."""

    def __init__(self, with_manifest=True, success=True):
        self.with_manifest = with_manifest
        self.success = success
        self.cloned = []

    def __call__(self, target):
        cloner = self

        class _Git:
            def clone(self, url):
                cloner.cloned.append((url, target))
                if not cloner.success:
                    return GitResult(success=False, message=f"Failed to clone {url}: denied")
                if cloner.with_manifest:
                    write_extension(target)
                else:
                    target.mkdir(parents=True)
                return GitResult(success=True, message=f"Cloned {url}")

        return _Git()


class TestRemoteInstall:
    def test_clones_into_named_folder(self, install_root):
        cloner = FakeCloner()

        result = _installer(install_root, git_factory=cloner).install(
            "https://github.com/octo/word-count.git"
        )

        assert result.path == install_root / "word-count"
        assert cloner.cloned == [("https://github.com/octo/word-count.git", install_root / "word-count")]

    def test_existing_folder_is_replaced_without_asking(self, install_root):
        stale = install_root / "word-count"
        stale.mkdir(parents=True)
        (stale / "stale.txt").write_text("old", encoding="utf-8")
        prompter = ScriptedPrompter()

        _installer(install_root, prompter, git_factory=FakeCloner()).install(
            "git@github.com:octo/word-count.git"
        )

        assert not (stale / "stale.txt").exists()
        assert prompter.questions == []

    def test_clone_failure(self, install_root):
        with pytest.raises(InstallError, match="denied"):
            _installer(install_root, git_factory=FakeCloner(success=False)).install(
                "https://github.com/octo/word-count.git"
            )

    def test_clone_without_manifest(self, install_root):
        with pytest.raises(InstallError, match="missing manifest.json"):
            _installer(install_root, git_factory=FakeCloner(with_manifest=False)).install(
                "https://github.com/octo/word-count.git"
            )


class TestInstallDependencies:
    def test_missing_command(self, tmp_path):
        with pytest.raises(InstallError, match="Command not found"):
            install_dependencies(tmp_path, ("definitely-not-a-real-binary-xyz",))

    def test_success(self, tmp_path):
        install_dependencies(tmp_path, SUCCEEDING_COMMAND)

    def test_uses_extension_folder_as_cwd(self, tmp_path, monkeypatch):
        seen = {}

        def fake_run(command, cwd, check, capture_output):
            seen["cwd"] = cwd
            return subprocess.CompletedProcess(command, 0)

        monkeypatch.setattr(subprocess, "run", fake_run)
        install_dependencies(tmp_path, ("npm", "install"))

        assert seen["cwd"] == tmp_path
