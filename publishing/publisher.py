"""Publish extensions to a git remote and as GitHub releases."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, Iterable

from extensions.interaction import Prompter, ProgressReporter, SilentReporter, required
from extensions.manifest import (
    PACKAGE_FILENAME,
    ManifestError,
    ManifestValidationError,
    read_json,
    validate_extension,
)
from tools.forge import GitHubClient, parse_github_remote
from tools.git_manager import GitError, GitManager

logger = logging.getLogger(__name__)

PUSH_WARNING = "Could not push to remote (you may need to set up branch)"

# Branches tried in order when pushing a release commit
PUSH_BRANCHES = ("main", "master")


class PublishTarget(str, Enum):
    """Where an extension gets published."""

    GIT = "git"
    GITHUB = "github"


class PublishError(Exception):
    """Raised when publishing cannot proceed."""

    pass


@dataclass
class PublishResult:
    """Outcome of a publish run."""

    version: str
    targets: list[PublishTarget] = field(default_factory=list)
    committed: bool = False
    pushed: bool = False
    release: dict | None = None
    repository: str | None = None  # owner/repo when a release was created
    warnings: list[str] = field(default_factory=list)


class Publisher:
    """Validate an extension, push it and optionally create a GitHub release.

    Example:
        >>> publisher = Publisher(Path("my-ext"), prompter, reporter)
        >>> result = publisher.publish([PublishTarget.GITHUB])
        >>> result.release["html_url"]
    """

    def __init__(
        self,
        ext_dir: Path,
        prompter: Prompter,
        reporter: ProgressReporter | None = None,
        git: GitManager | None = None,
        forge_factory: Callable[[str], GitHubClient] | None = None,
        token: str | None = None,
    ) -> None:
        """Initialize the publisher.

        Args:
            ext_dir: Extension directory to publish.
            prompter: Asks for the remote URL and the token.
            reporter: Receives progress updates.
            git: Git manager for the extension directory.
            forge_factory: Builds a GitHub client from a token.
            token: GitHub token; prompted for when empty.
        """
        self.ext_dir = Path(ext_dir)
        self.prompter = prompter
        self.reporter = reporter or SilentReporter()
        self.git = git or GitManager(self.ext_dir)
        self.forge_factory = forge_factory or (lambda t: GitHubClient(token=t))
        self.token = token

    def publish(self, targets: Iterable[PublishTarget | str]) -> PublishResult:
        """Run the publish workflow.

        Args:
            targets: GIT pushes the repository; GITHUB also creates a release.

        Returns:
            PublishResult describing what happened.

        Raises:
            PublishError: If validation fails or the repository is unusable.
            GitError: If a git command (other than push) fails.
            ForgeError: If the release request fails.
        """
        selected = [PublishTarget(t) for t in targets]
        if not selected:
            raise PublishError("Select at least one target")

        package = self.prepare()
        version = str(package.get("version", ""))
        result = PublishResult(version=version, targets=selected)

        # A release needs the pushed commit
        self.push_repository(package, result)

        if PublishTarget.GITHUB in selected:
            self.create_release(package, result)

        return result

    def prepare(self) -> dict:
        """Validate the manifest and load package.json.

        Raises:
            PublishError: If the extension is not publishable.
        """
        self.reporter.phase("Validating extension...")
        try:
            validate_extension(self.ext_dir).raise_for_errors()
        except ManifestValidationError as e:
            raise PublishError(f"Cannot publish: {'; '.join(e.result.errors)}")
        except ManifestError as e:
            raise PublishError(f"Cannot publish: {e}")

        package_path = self.ext_dir / PACKAGE_FILENAME
        if not package_path.exists():
            raise PublishError(f"{PACKAGE_FILENAME} not found in extension directory")

        try:
            package = read_json(package_path)
        except ValueError as e:
            raise PublishError(f"Invalid JSON in {PACKAGE_FILENAME}: {e}")

        self.reporter.succeed("Extension validated")
        return package

    def push_repository(self, package: dict, result: PublishResult) -> None:
        """Initialize, commit and push the extension repository."""
        self.reporter.phase("Setting up git repository...")

        if not self.git.is_repo():
            self.reporter.phase("Initializing git repository...")
            init = self.git.init_repo()
            if not init.success:
                raise GitError(init.message)

        if not self.git.has_remote("origin"):
            url = self.prompter.ask(
                "Repository URL (e.g., git@github.com:username/repo.git):",
                validate=required("Repository URL"),
            )
            self.reporter.phase("Adding remote origin...")
            added = self.git.add_remote(url, name="origin")
            if not added.success:
                raise GitError(added.message)

        self.reporter.phase("Staging changes...")
        staged = self.git.stage_all()
        if not staged.success:
            raise GitError(staged.message)

        if not self.git.status().is_clean:
            version = result.version
            self.reporter.phase("Creating commit...")
            committed = self.git.commit(f"v{version}: Release {version}")
            if not committed.success:
                raise GitError(committed.message)
            result.committed = True

        self.reporter.phase("Pushing to repository...")
        for branch in PUSH_BRANCHES:
            pushed = self.git.push("origin", branch)
            if pushed.success:
                result.pushed = True
                break
            logger.debug("Push to origin/%s failed: %s", branch, pushed.message)

        if not result.pushed:
            result.warnings.append(PUSH_WARNING)
            self.reporter.warn(PUSH_WARNING)

        self.reporter.succeed("Git repository updated")

    def create_release(self, package: dict, result: PublishResult) -> None:
        """Create a GitHub release tagged v<version>."""
        self.reporter.phase("Configuring GitHub...")

        url = self.git.get_remote_url("origin")
        if not url:
            raise PublishError("Please set up git remote first")

        parsed = parse_github_remote(url)
        if parsed is None:
            raise PublishError("Repository must be on GitHub")
        owner, repo = parsed

        token = self.token or self.prompter.secret(
            "GitHub token (create at https://github.com/settings/tokens):",
            validate=required("Token"),
        )

        version = result.version
        self.reporter.phase("Creating GitHub release...")
        client = self.forge_factory(token)
        result.release = client.create_release(
            owner,
            repo,
            tag_name=f"v{version}",
            name=f"Release {version}",
            body=package.get("description") or f"Version {version}",
            draft=False,
            prerelease=False,
        )
        result.repository = f"{owner}/{repo}"
        self.reporter.succeed(f"Release published: {owner}/{repo} v{version}")
