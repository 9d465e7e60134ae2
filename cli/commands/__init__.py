"""CLI command modules for the CodeInspector CLI."""

from cli.commands.extensions import create, dev, install, list_extensions, validate
from cli.commands.publish import git, publish
from cli.commands.updates import check_updates

__all__ = [
    "check_updates",
    "create",
    "dev",
    "git",
    "install",
    "list_extensions",
    "publish",
    "validate",
]
