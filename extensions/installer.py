"""Extension installer for the CodeInspector CLI.

Installs extensions into the per-user extensions directory from a git
repository URL or a local folder.
"""

from __future__ import annotations

import logging
import re
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Sequence

from extensions.interaction import Prompter, ProgressReporter, SilentReporter
from extensions.manifest import (
    MANIFEST_FILENAME,
    PACKAGE_FILENAME,
    ExtensionManifest,
)
from tools.git_manager import GitManager

logger = logging.getLogger(__name__)

DEFAULT_INSTALL_COMMAND = ("npm", "install")

# Never copied from a local source
COPY_EXCLUDES = (".git", "node_modules")

REMOTE_NAME_PATTERN = re.compile(r"/([^/]+?)(\.git)?$")


class InstallError(Exception):
    """Raised when extension installation fails."""

    pass


@dataclass
class InstallResult:
    """Outcome of an install."""

    path: Path
    manifest: ExtensionManifest | None = None
    cancelled: bool = False


def is_remote_source(source: str) -> bool:
    """Check whether a source should be cloned rather than copied."""
    return source.startswith("http") or source.startswith("git@")


def remote_folder_name(url: str) -> str:
    """Derive the install folder name from a repository URL."""
    match = REMOTE_NAME_PATTERN.search(url)
    if not match:
        return "extension"
    return match.group(1).replace(".git", "")


def install_dependencies(ext_dir: Path, command: Sequence[str] = DEFAULT_INSTALL_COMMAND) -> None:
    """Run the dependency install command inside an extension folder.

    Raises:
        InstallError: If the command is missing or exits non-zero.
    """
    logger.debug("Running %s in %s", " ".join(command), ext_dir)
    try:
        subprocess.run(
            list(command),
            cwd=ext_dir,
            check=True,
            capture_output=True,
        )
    except subprocess.CalledProcessError as e:
        stderr = e.stderr.decode(errors="replace").strip() if e.stderr else ""
        message = f"Command failed with code {e.returncode}"
        raise InstallError(f"{message}: {stderr}" if stderr else message)
    except FileNotFoundError:
        raise InstallError(f"Command not found: {command[0]}")


class ExtensionInstaller:
    """Install extensions into the local extensions directory.

    Example:
        >>> installer = ExtensionInstaller(Path.home() / ".codeinspector" / "extensions", prompter)
        >>> installer.install("https://github.com/octo/word-count.git")
        >>> installer.install("./extensions/word-count")
    """

    def __init__(
        self,
        extensions_dir: Path,
        prompter: Prompter,
        reporter: ProgressReporter | None = None,
        dependency_command: Sequence[str] = DEFAULT_INSTALL_COMMAND,
        git_factory: Callable[[Path], GitManager] = GitManager,
    ) -> None:
        """Initialize the installer.

        Args:
            extensions_dir: Install root, one folder per extension.
            prompter: Asks for overwrite confirmation.
            reporter: Receives progress updates.
            dependency_command: Run in folders that ship a package.json.
            git_factory: Builds a git manager for a target folder.
        """
        self.extensions_dir = Path(extensions_dir)
        self.prompter = prompter
        self.reporter = reporter or SilentReporter()
        self.dependency_command = tuple(dependency_command)
        self.git_factory = git_factory

    def install(self, source: str) -> InstallResult:
        """Install an extension from a repository URL or a local directory.

        Args:
            source: Git URL (http..., git@...) or local path.

        Returns:
            InstallResult; `cancelled` is set when the user declined to
            overwrite an existing install.

        Raises:
            InstallError: If cloning, copying, verification or dependency
                installation fails. A folder that was already copied is left
                in place.
        """
        self.extensions_dir.mkdir(parents=True, exist_ok=True)

        if is_remote_source(source):
            target_dir = self._clone(source)
        else:
            target_dir = self._copy(Path(source).expanduser())
            if target_dir is None:
                self.reporter.fail("Installation cancelled")
                name = Path(source).expanduser().resolve().name
                return InstallResult(path=self.extensions_dir / name, cancelled=True)

        self.reporter.phase("Verifying extension...")
        if not (target_dir / MANIFEST_FILENAME).exists():
            raise InstallError(f"Invalid extension: missing {MANIFEST_FILENAME}")

        manifest = ExtensionManifest.from_json(target_dir)

        if (target_dir / PACKAGE_FILENAME).exists():
            self.reporter.phase("Installing dependencies...")
            install_dependencies(target_dir, self.dependency_command)

        self.reporter.succeed(f"Extension installed: {manifest.name}")
        return InstallResult(path=target_dir, manifest=manifest)

    def _clone(self, url: str) -> Path:
        """Clone a remote repository, replacing any previous install."""
        self.reporter.phase("Cloning repository...")
        target_dir = self.extensions_dir / remote_folder_name(url)

        if target_dir.exists():
            logger.info("Removing previous install at %s", target_dir)
            _remove_tree(target_dir)

        result = self.git_factory(target_dir).clone(url)
        if not result.success:
            raise InstallError(result.message)
        return target_dir

    def _copy(self, source_dir: Path) -> Path | None:
        """Copy a local extension; None if the user keeps the existing one."""
        self.reporter.phase("Copying extension...")

        if not source_dir.exists():
            raise InstallError(f"Directory not found: {source_dir}")
        if not source_dir.is_dir():
            raise InstallError(f"Not a directory: {source_dir}")

        target_dir = self.extensions_dir / source_dir.resolve().name

        if target_dir.exists():
            overwrite = self.prompter.confirm(
                f'Extension "{target_dir.name}" already exists. Overwrite?',
                default=False,
            )
            if not overwrite:
                return None
            _remove_tree(target_dir)

        try:
            shutil.copytree(
                source_dir,
                target_dir,
                ignore=shutil.ignore_patterns(*COPY_EXCLUDES),
            )
        except OSError as e:
            # shutil.Error is an OSError
            raise InstallError(f"Failed to copy extension: {e}")
        return target_dir


def _remove_tree(path: Path) -> None:
    """Delete a previous install."""
    try:
        shutil.rmtree(path)
    except OSError as e:
        raise InstallError(f"Failed to remove {path}: {e}")
