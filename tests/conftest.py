"""Shared fixtures and in-memory fakes for the CodeInspector CLI tests."""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import pytest

from tools.git_manager import GitResult, GitStatus, StatusEntry


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path, monkeypatch):
    """Point every run at a temporary home and working directory."""
    import settings.config

    home = tmp_path / "home"
    work = tmp_path / "work"
    work.mkdir()

    monkeypatch.setenv("CODEINSPECTOR_HOME", str(home))
    monkeypatch.setenv("CODEINSPECTOR_NO_UPDATE_CHECK", "1")
    for name in (
        "CODEINSPECTOR_CONFIG",
        "CODEINSPECTOR_EXTENSIONS_DIR",
        "CODEINSPECTOR_LOG_LEVEL",
        "NPM_REGISTRY_URL",
        "GITHUB_TOKEN",
    ):
        monkeypatch.delenv(name, raising=False)

    monkeypatch.chdir(work)
    monkeypatch.setattr(settings.config, "_config", None)
    yield


@pytest.fixture
def home_dir(tmp_path) -> Path:
    return tmp_path / "home"


@pytest.fixture
def work_dir(tmp_path) -> Path:
    return tmp_path / "work"


def write_extension(
    ext_dir: Path,
    manifest: Optional[dict] = None,
    package: Optional[dict] = None,
    main_file: bool = True,
) -> Path:
    """Create an extension folder with a manifest and an entry file."""
    ext_dir.mkdir(parents=True, exist_ok=True)
    data = {
        "id": "word-count",
        "name": "Word Count",
        "version": "1.0.0",
        "description": "Counts words",
        "author": "Ada",
        "main": "index.js",
    }
    if manifest is not None:
        data = manifest
    (ext_dir / "manifest.json").write_text(json.dumps(data, indent=2), encoding="utf-8")
    if main_file and data.get("main"):
        (ext_dir / str(data["main"])).write_text("export default {};\n", encoding="utf-8")
    if package is not None:
        (ext_dir / "package.json").write_text(json.dumps(package, indent=2), encoding="utf-8")
    return ext_dir


class ScriptedPrompter:
    """Prompter answering from queues and recording every question."""

    def __init__(self, answers=None, confirms=None, choices=None, secrets=None):
        self.answers = list(answers or [])
        self.confirms = list(confirms or [])
        self.choices = list(choices or [])
        self.secrets = list(secrets or [])
        self.questions: list[str] = []

    def ask(self, message, default=None, validate=None):
        self.questions.append(message)
        answer = self.answers.pop(0) if self.answers else None
        if answer is None:
            answer = default
        if answer is None:
            raise AssertionError(f"No scripted answer for {message!r}")
        if validate is not None and validate(answer) is not None:
            raise AssertionError(f"Scripted answer {answer!r} rejected: {validate(answer)}")
        return answer

    def confirm(self, message, default=False):
        self.questions.append(message)
        return self.confirms.pop(0) if self.confirms else default

    def choose(self, message, choices, default=None):
        self.questions.append(message)
        return self.choices.pop(0) if self.choices else default

    def secret(self, message, validate=None):
        self.questions.append(message)
        if not self.secrets:
            raise AssertionError(f"No scripted secret for {message!r}")
        return self.secrets.pop(0)


class RecordingReporter:
    """Progress reporter keeping (kind, message) pairs."""

    def __init__(self):
        self.events: list[tuple[str, str]] = []

    def phase(self, message):
        self.events.append(("phase", message))

    def succeed(self, message):
        self.events.append(("succeed", message))

    def warn(self, message):
        self.events.append(("warn", message))

    def fail(self, message):
        self.events.append(("fail", message))

    def info(self, message):
        self.events.append(("info", message))

    def messages(self, kind: str) -> list[str]:
        return [message for k, message in self.events if k == kind]


@dataclass
class FakeGit:
    """In-memory stand-in for GitManager."""

    repo: bool = False
    remotes: dict[str, str] = field(default_factory=dict)
    changed: list[str] = field(default_factory=list)
    failing_branches: set[str] = field(default_factory=set)
    calls: list[tuple] = field(default_factory=list)
    commits: list[str] = field(default_factory=list)
    pushes: list[tuple[str, str]] = field(default_factory=list)
    current_branch: Optional[str] = "main"

    def is_repo(self) -> bool:
        return self.repo

    def init_repo(self) -> GitResult:
        self.calls.append(("init",))
        self.repo = True
        return GitResult(success=True, message="Initialized git repository")

    def has_remote(self, name="origin") -> bool:
        return name in self.remotes

    def get_remote_url(self, name="origin"):
        return self.remotes.get(name)

    def add_remote(self, url, name="origin") -> GitResult:
        self.calls.append(("add_remote", name, url))
        self.remotes[name] = url
        return GitResult(success=True, message=f"Added remote '{name}': {url}")

    def stage_all(self) -> GitResult:
        self.calls.append(("stage_all",))
        return GitResult(success=True, message="Staged all changes")

    def status(self) -> GitStatus:
        return GitStatus(
            branch="main",
            files=[StatusEntry(path=p, index="A", working_tree=" ") for p in self.changed],
        )

    def commit(self, message) -> GitResult:
        self.commits.append(message)
        self.changed = []
        return GitResult(success=True, message="Committed: abc1234")

    def get_current_branch(self) -> Optional[str]:
        return self.current_branch

    def push(self, remote, branch, set_upstream=True) -> GitResult:
        self.pushes.append((remote, branch))
        if branch in self.failing_branches:
            return GitResult(success=False, message=f"Failed to push: no branch {branch}")
        return GitResult(success=True, message=f"Pushed to {remote}/{branch}")


@pytest.fixture
def reporter() -> RecordingReporter:
    return RecordingReporter()
