"""Repository and release commands: publish and git."""

from pathlib import Path
from typing import Optional

import typer
from rich.markup import escape

from cli.codeinspector.output import (
    ConsolePrompter,
    SpinnerReporter,
    console,
    exit_with_error,
    print_git_status,
    print_success,
    print_warning,
)
from publishing.publisher import PublishTarget
from publishing.repository import RepositoryAction


def publish(
    path: Optional[Path] = typer.Argument(
        None,
        help="Extension directory (prompted when omitted)",
    ),
    target: Optional[PublishTarget] = typer.Option(
        None,
        "--target",
        "-t",
        case_sensitive=False,
        help="github (push + release) or git (push only)",
    ),
) -> None:
    """Publish an extension to its git remote and GitHub.

    Examples:
        codeinspector publish
        codeinspector publish ./extensions/word-count --target git
    """
    from publishing import PublishError, Publisher
    from settings import get_config
    from tools.forge import ForgeError, GitHubClient
    from tools.git_manager import GitError

    config = get_config()

    with SpinnerReporter() as reporter:
        prompter = ConsolePrompter(reporter)

        if path is None:
            path = Path(prompter.ask("Extension directory path:", default=str(Path.cwd())))

        if target is None:
            target = PublishTarget(
                prompter.choose(
                    "Where would you like to publish? (github, git)",
                    [t.value for t in PublishTarget],
                    default=PublishTarget.GITHUB.value,
                )
            )

        publisher = Publisher(
            path,
            prompter,
            reporter,
            forge_factory=lambda token: GitHubClient(token=token, api_url=config.forge.api_url),
            token=config.forge.token or None,
        )

        try:
            result = publisher.publish([target])
        except (PublishError, GitError, ForgeError) as e:
            reporter.fail("Publishing failed")
            exit_with_error(str(e))

    for warning in result.warnings:
        print_warning(warning)

    if result.release:
        url = result.release.get("html_url")
        if url:
            console.print(f"Release: {escape(str(url))}")

    print_success("Publishing complete!")


def git(
    path: Optional[Path] = typer.Argument(
        None,
        help="Repository directory (default: current directory)",
    ),
    action: Optional[RepositoryAction] = typer.Option(
        None,
        "--action",
        "-a",
        case_sensitive=False,
        help="init, add-remote, commit, push or status",
    ),
) -> None:
    """Manage the git repository of an extension.

    Examples:
        codeinspector git
        codeinspector git ./extensions/word-count --action status
    """
    from publishing import RepositoryManager
    from tools.git_manager import GitError

    repo_dir = path or Path.cwd()

    with SpinnerReporter() as reporter:
        prompter = ConsolePrompter(reporter)

        if action is None:
            action = RepositoryAction(
                prompter.choose(
                    "Git action (" + ", ".join(a.value for a in RepositoryAction) + ")",
                    [a.value for a in RepositoryAction],
                    default=RepositoryAction.STATUS.value,
                )
            )

        manager = RepositoryManager(repo_dir, prompter, reporter)
        try:
            status = manager.run(action)
        except GitError as e:
            reporter.fail(f"Failed: {e}")
            exit_with_error(str(e))

    if status is not None:
        print_git_status(status)
