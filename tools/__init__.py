"""Tools for talking to git and GitHub.

Provides:
- GitManager: subprocess wrapper around the git CLI
- GitHubClient: release creation through the GitHub REST API
"""

from .forge import ForgeError, GitHubClient, parse_github_remote
from .git_manager import GitError, GitManager, GitResult, GitStatus, StatusEntry

__all__ = [
    "ForgeError",
    "GitError",
    "GitHubClient",
    "GitManager",
    "GitResult",
    "GitStatus",
    "StatusEntry",
    "parse_github_remote",
]
