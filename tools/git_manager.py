"""Git manager for extension repositories."""

import logging
import subprocess
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)


class GitError(Exception):
    """Raised when a git operation fails."""

    pass


@dataclass
class GitResult:
    """Result of a git operation."""
    success: bool
    message: str
    output: str = ""


@dataclass
class StatusEntry:
    """One changed path from `git status --porcelain`."""

    path: str
    index: str  # staged state, "?" for untracked
    working_tree: str

    @property
    def is_untracked(self) -> bool:
        return self.index == "?"


@dataclass
class GitStatus:
    """Working tree summary."""

    branch: str | None = None
    tracking: str | None = None
    ahead: int = 0
    behind: int = 0
    files: list[StatusEntry] = field(default_factory=list)

    @property
    def is_clean(self) -> bool:
        return not self.files


class GitManager:
    """Manages git operations for an extension directory.

    Handles:
    - Repository initialization
    - Remotes
    - Staging, committing and pushing
    - Status inspection
    - Cloning into the extensions directory
    """

    def __init__(self, project_dir: Path) -> None:
        """Initialize git manager.

        Args:
            project_dir: Path to the extension directory
        """
        self.project_dir = Path(project_dir)

    def _run_git(self, *args: str, check: bool = True, cwd: Path | None = None) -> subprocess.CompletedProcess:
        """Run a git command in the project directory.

        Args:
            *args: Git command arguments
            check: Whether to raise on non-zero exit
            cwd: Working directory override

        Returns:
            CompletedProcess result

        Raises:
            GitError: If the git executable is not available
        """
        logger.debug("git %s", " ".join(args))
        try:
            return subprocess.run(
                ["git", *args],
                cwd=cwd or self.project_dir,
                capture_output=True,
                text=True,
                check=check,
            )
        except FileNotFoundError:
            raise GitError("git executable not found. Install git and retry.")

    def is_repo(self) -> bool:
        """Check if the project directory is inside a git work tree."""
        if not self.project_dir.is_dir():
            return False
        result = self._run_git("rev-parse", "--is-inside-work-tree", check=False)
        return result.returncode == 0 and result.stdout.strip() == "true"

    def init_repo(self) -> GitResult:
        """Initialize a new git repository.

        Returns:
            GitResult with success status
        """
        if self.is_repo():
            return GitResult(
                success=True,
                message="Repository already initialized",
            )

        try:
            self._run_git("init")
            return GitResult(
                success=True,
                message="Initialized git repository",
            )
        except subprocess.CalledProcessError as e:
            return GitResult(
                success=False,
                message=f"Failed to initialize repository: {e.stderr}",
                output=e.stderr,
            )

    def get_current_branch(self) -> str | None:
        """Get the current branch name."""
        try:
            result = self._run_git("branch", "--show-current")
            return result.stdout.strip() or None
        except subprocess.CalledProcessError:
            return None

    def stage_all(self) -> GitResult:
        """Stage all changes for commit."""
        try:
            self._run_git("add", ".")
            return GitResult(success=True, message="Staged all changes")
        except subprocess.CalledProcessError as e:
            return GitResult(
                success=False,
                message=f"Failed to stage changes: {e.stderr}",
                output=e.stderr,
            )

    def status(self) -> GitStatus:
        """Read branch, tracking and changed files.

        Raises:
            GitError: If git status fails (e.g. not a repository)
        """
        try:
            result = self._run_git("status", "--porcelain=v1", "--branch")
        except subprocess.CalledProcessError as e:
            raise GitError(f"Failed to read status: {e.stderr.strip()}")

        return parse_status(result.stdout)

    def commit(self, message: str) -> GitResult:
        """Commit whatever is staged.

        Args:
            message: Commit message

        Returns:
            GitResult with success status
        """
        try:
            result = self._run_git("commit", "-m", message)

            hash_result = self._run_git("rev-parse", "--short", "HEAD")
            commit_hash = hash_result.stdout.strip()

            return GitResult(
                success=True,
                message=f"Committed: {commit_hash}",
                output=result.stdout,
            )
        except subprocess.CalledProcessError as e:
            return GitResult(
                success=False,
                message=f"Failed to commit: {e.stderr or e.stdout}",
                output=e.stderr,
            )

    def has_remote(self, name: str = "origin") -> bool:
        """Check if a remote exists."""
        result = self._run_git("remote", "get-url", name, check=False)
        return result.returncode == 0

    def get_remote_url(self, name: str = "origin") -> str | None:
        """Get the push URL of a remote, or None if it does not exist."""
        result = self._run_git("remote", "get-url", "--push", name, check=False)
        if result.returncode != 0:
            return None
        return result.stdout.strip() or None

    def add_remote(self, url: str, name: str = "origin") -> GitResult:
        """Add a remote repository.

        Args:
            url: Remote repository URL
            name: Remote name

        Returns:
            GitResult with success status
        """
        try:
            if self.has_remote(name):
                # Update existing remote
                self._run_git("remote", "set-url", name, url)
                return GitResult(
                    success=True,
                    message=f"Updated remote '{name}' to {url}",
                )
            else:
                self._run_git("remote", "add", name, url)
                return GitResult(
                    success=True,
                    message=f"Added remote '{name}': {url}",
                )
        except subprocess.CalledProcessError as e:
            return GitResult(
                success=False,
                message=f"Failed to add remote: {e.stderr}",
                output=e.stderr,
            )

    def push(self, remote: str, branch: str, set_upstream: bool = True) -> GitResult:
        """Push to remote repository.

        Args:
            remote: Remote name
            branch: Branch to push
            set_upstream: Whether to set upstream tracking

        Returns:
            GitResult with success status
        """
        try:
            args = ["push"]
            if set_upstream:
                args.extend(["-u", remote, branch])
            else:
                args.extend([remote, branch])

            result = self._run_git(*args)

            return GitResult(
                success=True,
                message=f"Pushed to {remote}/{branch}",
                output=result.stdout,
            )
        except subprocess.CalledProcessError as e:
            return GitResult(
                success=False,
                message=f"Failed to push: {e.stderr}",
                output=e.stderr,
            )

    def clone(self, url: str) -> GitResult:
        """Clone a repository into the project directory.

        Args:
            url: Repository URL

        Returns:
            GitResult with success status
        """
        self.project_dir.parent.mkdir(parents=True, exist_ok=True)
        try:
            result = self._run_git(
                "clone", url, str(self.project_dir), cwd=self.project_dir.parent
            )
            return GitResult(
                success=True,
                message=f"Cloned {url}",
                output=result.stderr,
            )
        except subprocess.CalledProcessError as e:
            return GitResult(
                success=False,
                message=f"Failed to clone {url}: {e.stderr.strip()}",
                output=e.stderr,
            )


def parse_status(output: str) -> GitStatus:
    """Parse `git status --porcelain=v1 --branch` output."""
    status = GitStatus()

    for line in output.splitlines():
        if line.startswith("## "):
            _parse_branch_line(line[3:], status)
            continue
        if len(line) < 4:
            continue

        path = line[3:]
        if " -> " in path:
            path = path.split(" -> ", 1)[1]
        status.files.append(
            StatusEntry(path=path.strip('"'), index=line[0], working_tree=line[1])
        )

    return status


def _parse_branch_line(header: str, status: GitStatus) -> None:
    """Parse the '## branch...upstream [ahead 1, behind 2]' header."""
    if header.startswith("No commits yet on "):
        status.branch = header[len("No commits yet on "):].strip()
        return

    counts = ""
    if " [" in header:
        header, counts = header.split(" [", 1)
        counts = counts.rstrip("]")

    if "..." in header:
        branch, tracking = header.split("...", 1)
        status.branch = branch
        status.tracking = tracking
    else:
        status.branch = header.strip()

    for part in counts.split(","):
        part = part.strip()
        if part.startswith("ahead "):
            status.ahead = int(part[len("ahead "):])
        elif part.startswith("behind "):
            status.behind = int(part[len("behind "):])
