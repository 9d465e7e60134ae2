"""Extension commands: create, list, validate, install and dev."""

from pathlib import Path
from typing import Optional

import typer
from rich.markup import escape

from cli.codeinspector.output import (
    ConsolePrompter,
    SpinnerReporter,
    console,
    exit_with_error,
    print_extensions,
    print_info,
    print_success,
    print_validation,
)
from extensions.interaction import Prompter, required
from extensions.manifest import is_valid_version
from scaffolding.templates import Language


def _version_check(value: str) -> Optional[str]:
    if is_valid_version(value):
        return None
    return "Invalid version format (should be semantic: x.y.z)"


def _prompt_path(path: Optional[Path], prompter: Prompter) -> Path:
    """Use the given path or ask for one (defaults to the current directory)."""
    if path is not None:
        return path
    return Path(prompter.ask("Extension directory path:", default=str(Path.cwd())))


def create(
    name: Optional[str] = typer.Argument(None, help="Extension name"),
    output_dir: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Parent directory (default: ./extensions)",
    ),
    language: Optional[Language] = typer.Option(
        None,
        "--language",
        "-l",
        case_sensitive=False,
        help="JavaScript or TypeScript",
    ),
    yes: bool = typer.Option(
        False,
        "--yes",
        "-y",
        help="Accept defaults for every question",
    ),
) -> None:
    """Create a new extension.

    Examples:
        codeinspector create "Word Count"
        codeinspector create word-count --language typescript --yes
    """
    from scaffolding import ExtensionGenerator, ScaffoldAnswers, default_description
    from settings import get_config

    config = get_config()
    prompter = ConsolePrompter()

    if not name:
        if yes:
            exit_with_error("Extension name required")
        name = prompter.ask("Extension name:", validate=required("Name"))

    parent = output_dir or Path.cwd() / config.extensions.workspace_dir
    if (parent / name).exists():
        exit_with_error(f'Extension "{name}" already exists')

    if yes:
        answers = ScaffoldAnswers(
            description=default_description(name),
            language=language or Language.JAVASCRIPT,
        )
    else:
        answers = ScaffoldAnswers(
            description=prompter.ask("Description:", default=default_description(name)),
            author=prompter.ask("Author:", default="Your Name"),
            version=prompter.ask("Version:", default="1.0.0", validate=_version_check),
            language=language
            or Language(
                prompter.choose(
                    "Language",
                    [lang.value for lang in Language],
                    default=Language.JAVASCRIPT.value,
                )
            ),
            scope=prompter.ask("npm scope (optional, e.g. myorg):", default=""),
        )

    try:
        generator = ExtensionGenerator(name, answers, parent)
        extension_dir = generator.generate()
    except FileExistsError as e:
        exit_with_error(str(e))
    except OSError as e:
        exit_with_error(f"Failed to create extension: {e}")

    print_success(f"Extension created at {escape(str(extension_dir))}")
    console.print("\n[bold]Next steps:[/bold]")
    console.print(f"  1. cd {escape(str(extension_dir))}")
    console.print("  2. npm install")
    console.print(f"  3. Edit {generator.template.entry_path} to customize your extension")
    if answers.language == Language.TYPESCRIPT:
        console.print("  4. Run 'npm run build' to compile TypeScript")
        console.print("  5. codeinspector dev")
    else:
        console.print("  4. codeinspector dev")


def list_extensions(
    installed: bool = typer.Option(
        False,
        "--installed",
        "-i",
        help="List extensions in the per-user install directory",
    ),
) -> None:
    """List extensions in ./extensions (or installed ones).

    Examples:
        codeinspector list
        codeinspector list --installed
    """
    from extensions import ExtensionLoader
    from settings import get_config

    config = get_config()
    if installed:
        root = config.extensions_path
    else:
        root = Path.cwd() / config.extensions.workspace_dir

    loader = ExtensionLoader(root)
    if not loader.exists():
        print_info("No extensions directory found")
        return

    found = loader.discover()
    if not found:
        print_info("No extensions found")
        return

    print_extensions(found, title="Installed Extensions" if installed else "Extensions")


def validate(
    path: Optional[Path] = typer.Argument(
        None,
        help="Extension directory (default: current directory)",
    ),
) -> None:
    """Validate an extension manifest.

    Example:
        codeinspector validate ./extensions/word-count
    """
    from extensions.manifest import ManifestError, validate_extension

    ext_dir = path or Path.cwd()

    with SpinnerReporter() as reporter:
        reporter.phase("Validating extension...")
        try:
            result = validate_extension(ext_dir)
        except ManifestError as e:
            reporter.fail("Validation failed")
            exit_with_error(str(e))

        if not result.valid:
            reporter.fail("Validation failed")

    print_validation(result)
    if not result.valid:
        exit_with_error("Manifest validation failed")


def install(
    source: Optional[str] = typer.Argument(
        None,
        help="Git repository URL or local extension directory",
    ),
) -> None:
    """Install an extension into the per-user extensions directory.

    Examples:
        codeinspector install https://github.com/octo/word-count.git
        codeinspector install ./extensions/word-count
    """
    from extensions import ExtensionInstaller, InstallError
    from extensions.manifest import ManifestError
    from settings import get_config

    config = get_config()

    with SpinnerReporter() as reporter:
        prompter = ConsolePrompter(reporter)

        if not source:
            kind = prompter.choose("Install from (git, local)", ["git", "local"], default="git")
            label = "Git repository URL:" if kind == "git" else "Local extension path:"
            source = prompter.ask(label, validate=required("Path"))

        installer = ExtensionInstaller(
            config.extensions_path,
            prompter,
            reporter,
            dependency_command=config.extensions.install_command,
        )

        reporter.phase("Installing extension...")
        try:
            result = installer.install(source)
        except (InstallError, ManifestError) as e:
            reporter.fail("Installation failed")
            exit_with_error(str(e))

    if result.cancelled:
        return

    console.print(f"\nExtension location: {escape(str(result.path))}")
    console.print(f"Extension ID: {escape(result.manifest.id)}")
    console.print("\nRestart CodeInspector to load the extension.")


def dev(
    path: Optional[Path] = typer.Argument(
        None,
        help="Extension directory (prompted when omitted)",
    ),
) -> None:
    """Watch an extension for changes while developing it.

    Example:
        codeinspector dev ./extensions/word-count
    """
    from extensions import ExtensionManifest, ExtensionWatcher, InstallError
    from extensions.installer import install_dependencies
    from extensions.manifest import MANIFEST_FILENAME, PACKAGE_FILENAME, ManifestError
    from settings import get_config

    config = get_config()
    ext_dir = _prompt_path(path, ConsolePrompter())

    if not (ext_dir / MANIFEST_FILENAME).exists():
        exit_with_error(f"{MANIFEST_FILENAME} not found in extension directory")

    try:
        manifest = ExtensionManifest.from_json(ext_dir)
    except ManifestError as e:
        exit_with_error(str(e))

    with SpinnerReporter() as reporter:
        reporter.phase(f"Starting dev mode for {manifest.name}...")

        if (ext_dir / PACKAGE_FILENAME).exists() and not (ext_dir / "node_modules").exists():
            reporter.phase("Installing dependencies...")
            try:
                install_dependencies(ext_dir, config.extensions.install_command)
            except InstallError as e:
                reporter.fail("Dev mode setup failed")
                exit_with_error(str(e))

        reporter.succeed(f"Dev mode ready for {manifest.name}")

    console.print(f"\nWatching for changes in: {escape(str(ext_dir))}")
    console.print("Press Ctrl+C to stop\n")

    def on_change(changed: str) -> None:
        console.print(f"\n[green]✓[/green] File changed: {escape(changed)}")
        console.print(f"  Extension: {escape(manifest.name)}")
        console.print("  Reload the extension in CodeInspector to test changes")

    watcher = ExtensionWatcher(
        ext_dir,
        on_change,
        suffixes=config.dev.watch_suffixes,
        interval=config.dev.poll_interval,
    )
    try:
        watcher.watch()
    except KeyboardInterrupt:
        watcher.stop()
        print_success("Dev mode stopped")
