"""Publishing workflows: git repository management and GitHub releases."""

from publishing.publisher import PublishError, Publisher, PublishResult, PublishTarget
from publishing.repository import RepositoryAction, RepositoryManager

__all__ = [
    "PublishError",
    "PublishResult",
    "PublishTarget",
    "Publisher",
    "RepositoryAction",
    "RepositoryManager",
]
