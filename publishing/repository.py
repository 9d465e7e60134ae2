"""Interactive git workflow for an extension folder."""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path

from extensions.interaction import Prompter, ProgressReporter, SilentReporter, required
from tools.git_manager import GitError, GitManager, GitResult, GitStatus

logger = logging.getLogger(__name__)


class RepositoryAction(str, Enum):
    """Actions offered by the `git` command."""

    INIT = "init"
    ADD_REMOTE = "add-remote"
    COMMIT = "commit"
    PUSH = "push"
    STATUS = "status"


def _checked(result: GitResult) -> GitResult:
    """Turn a failed GitResult into a GitError."""
    if not result.success:
        raise GitError(result.message)
    return result


class RepositoryManager:
    """Run one git action against an extension folder.

    Every action except `status` reports through the progress reporter and
    returns None; `status` returns the parsed working tree summary for the
    caller to render.

    Example:
        >>> manager = RepositoryManager(Path("my-ext"), prompter, reporter)
        >>> manager.run(RepositoryAction.INIT)
        >>> status = manager.run(RepositoryAction.STATUS)
    """

    def __init__(
        self,
        repo_dir: Path,
        prompter: Prompter,
        reporter: ProgressReporter | None = None,
        git: GitManager | None = None,
    ) -> None:
        self.repo_dir = Path(repo_dir)
        self.prompter = prompter
        self.reporter = reporter or SilentReporter()
        self.git = git or GitManager(self.repo_dir)

    def run(self, action: RepositoryAction | str) -> GitStatus | None:
        """Dispatch an action.

        Raises:
            GitError: If the underlying git command fails.
            ValueError: If the action is unknown.
        """
        action = RepositoryAction(action)
        logger.debug("Running git action %s in %s", action.value, self.repo_dir)

        handlers = {
            RepositoryAction.INIT: self.init,
            RepositoryAction.ADD_REMOTE: self.add_remote,
            RepositoryAction.COMMIT: self.commit,
            RepositoryAction.PUSH: self.push,
            RepositoryAction.STATUS: self.status,
        }
        return handlers[action]()

    def init(self) -> None:
        self.reporter.phase("Initializing git repository...")
        if self.git.is_repo():
            self.reporter.warn("Already a git repository")
            return None

        _checked(self.git.init_repo())
        self.reporter.succeed("Git repository initialized")
        return None

    def add_remote(self) -> None:
        name = self.prompter.ask("Remote name:", default="origin")
        url = self.prompter.ask("Repository URL:", validate=required("URL"))

        self.reporter.phase(f"Adding remote {name}...")
        _checked(self.git.add_remote(url, name=name))
        self.reporter.succeed(f"Remote added: {name}")
        return None

    def commit(self) -> None:
        """Stage everything and commit it with a prompted message."""
        self.reporter.phase("Staging all changes...")
        _checked(self.git.stage_all())

        status = self.git.status()
        if status.is_clean:
            self.reporter.warn("No changes to commit")
            return None

        self.reporter.info("Files staged:")
        for entry in status.files:
            self.reporter.info(f"  - {entry.path}")

        message = self.prompter.ask("Commit message:", validate=required("Message"))

        self.reporter.phase("Creating commit...")
        _checked(self.git.commit(message))
        self.reporter.succeed(f'Commit created: "{message}"')
        return None

    def push(self) -> None:
        remote = self.prompter.ask("Remote name:", default="origin")
        branch = self.prompter.ask(
            "Branch name:", default=self.git.get_current_branch() or "main"
        )

        self.reporter.phase(f"Pushing to {remote}/{branch}...")
        _checked(self.git.push(remote, branch))
        self.reporter.succeed("Push successful")
        return None

    def status(self) -> GitStatus:
        self.reporter.phase("Checking status...")
        return self.git.status()
