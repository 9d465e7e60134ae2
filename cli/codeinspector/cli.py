"""CodeInspector CLI.

Main command-line interface for creating, validating, installing and
publishing CodeInspector extensions.
"""

from pathlib import Path
from typing import Optional

import click
import typer
from rich.markup import escape
from rich.table import Table
from typer.core import TyperGroup

from cli.codeinspector.output import (
    console,
    error_console,
    exit_with_error,
    print_error,
    print_info,
    print_success,
    print_update_notification,
    print_warning,
)
from cli.commands.extensions import create, dev, install, list_extensions, validate
from cli.commands.publish import git, publish
from cli.commands.updates import check_updates, start_background_check

# Commands that never trigger the background update check
NO_UPDATE_CHECK = {"check-updates", "help", "config"}

# Still run on a broken config file so it can be repaired
CONFIG_OPTIONAL = {None, "help", "config"}


class CodeInspectorGroup(TyperGroup):
    """Root command group that rejects unknown commands with exit code 1."""

    def resolve_command(self, ctx: click.Context, args: list[str]):
        cmd_name = args[0] if args else None
        if cmd_name and not cmd_name.startswith("-") and self.get_command(ctx, cmd_name) is None:
            error_console.print(f"[red]Unknown command: {escape(cmd_name)}[/red]")
            click.echo(ctx.get_help())
            ctx.exit(1)
        return super().resolve_command(ctx, args)


app = typer.Typer(
    name="codeinspector",
    help="CodeInspector CLI - create, validate and publish extensions",
    cls=CodeInspectorGroup,
    add_completion=False,
    context_settings={"help_option_names": ["-h", "--help"]},
)

# Config sub-app
config_app = typer.Typer(
    name="config",
    help="Manage configuration settings.",
)
app.add_typer(config_app, name="config")

app.command("create")(create)
app.command("list")(list_extensions)
app.command("validate")(validate)
app.command("install")(install)
app.command("publish")(publish)
app.command("git")(git)
app.command("dev")(dev)
app.command("check-updates")(check_updates)


def _version_callback(value: bool) -> None:
    if value:
        from cli.codeinspector import __version__

        console.print(__version__)
        raise typer.Exit()


@app.callback(invoke_without_command=True)
def root(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        help="Enable debug logging",
    ),
) -> None:
    """CodeInspector CLI - create, validate and publish extensions."""
    from settings import Config, ConfigError, get_config, setup_logging

    try:
        config = get_config()
    except ConfigError as e:
        if ctx.invoked_subcommand not in CONFIG_OPTIONAL:
            exit_with_error(str(e))
        print_warning(escape(str(e)))
        config = Config()

    setup_logging("DEBUG" if verbose else config.general.log_level)

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())
        raise typer.Exit()

    if ctx.invoked_subcommand in NO_UPDATE_CHECK or not config.updates.enabled:
        return

    background = start_background_check(config)
    ctx.call_on_close(lambda: print_update_notification(background.finish()))


@app.command("help")
def help_command(ctx: typer.Context) -> None:
    """Show this help message."""
    click.echo(ctx.parent.get_help())


@config_app.command("show")
def config_show(
    section: Optional[str] = typer.Argument(
        None,
        help="Config section to show (general, extensions, updates, forge, dev)",
    ),
) -> None:
    """Show current configuration.

    Examples:
        codeinspector config show           # Show all config
        codeinspector config show updates   # Show one section
    """
    from settings import ConfigError, find_config_file, get_config

    config_path = find_config_file()
    if config_path:
        print_info(f"Config file: {escape(str(config_path))}")
    else:
        print_warning("No config file found (using defaults)")

    try:
        config = get_config()
    except ConfigError as e:
        exit_with_error(str(e))

    section_map = {
        "general": config.general,
        "extensions": config.extensions,
        "updates": config.updates,
        "forge": config.forge,
        "dev": config.dev,
    }

    if section:
        section_lower = section.lower()
        if section_lower not in section_map:
            print_error(f"Unknown section: {escape(section)}")
            print_info(f"Available: {', '.join(section_map.keys())}")
            raise typer.Exit(1)
        sections = [(section_lower, section_map[section_lower])]
    else:
        sections = list(section_map.items())

    for name, section_config in sections:
        console.print(f"\n[bold]\\[{name}][/bold]")

        table = Table(show_header=False)
        table.add_column("Key", style="cyan")
        table.add_column("Value")

        for key, value in vars(section_config).items():
            if key == "token" and value:
                value = "***"
            table.add_row(key, escape(str(value)))

        console.print(table)


@config_app.command("set")
def config_set(
    key: str = typer.Argument(..., help="Config key (e.g., updates.enabled)"),
    value: str = typer.Argument(..., help="Value to set"),
) -> None:
    """Set a configuration value.

    Examples:
        codeinspector config set updates.enabled false
        codeinspector config set extensions.install_command "[pnpm, install]"
    """
    import sys

    if sys.version_info >= (3, 11):
        import tomllib
    else:
        import tomli as tomllib
    import tomli_w

    from settings import ConfigError, check_key, find_config_file, reload_config

    config_path = find_config_file()
    if not config_path or not config_path.exists():
        print_error("No config file found. Run 'codeinspector config init' first.")
        raise typer.Exit(1)

    parts = key.split(".")
    if len(parts) != 2:
        print_error("Key must be in format 'section.key' (e.g., updates.enabled)")
        raise typer.Exit(1)

    section, setting = parts

    try:
        check_key(section, setting)
    except ConfigError as e:
        print_error(escape(str(e)))
        raise typer.Exit(1)

    try:
        with open(config_path, "rb") as f:
            config_data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        exit_with_error(f"Invalid config file {config_path}: {e}")

    if not isinstance(config_data.get(section, {}), dict):
        exit_with_error(f"Invalid config file {config_path}: [{section}] must be a table")

    config_data.setdefault(section, {})[setting] = parse_value(value)

    with open(config_path, "wb") as f:
        tomli_w.dump(config_data, f)

    print_success(f"Set {escape(key)} = {escape(str(config_data[section][setting]))}")

    try:
        reload_config()
    except ConfigError as e:
        print_warning(escape(str(e)))


def parse_value(value: str) -> str | int | float | bool | list:
    """Interpret a command-line value as a TOML scalar or list."""
    if value.lower() == "true":
        return True
    if value.lower() == "false":
        return False
    if value.isdigit():
        return int(value)
    if value.replace(".", "").isdigit() and value.count(".") == 1:
        return float(value)
    if value.startswith("[") and value.endswith("]"):
        # Simple list parsing
        inner = value[1:-1].strip()
        if not inner:
            return []
        return [v.strip().strip('"').strip("'") for v in inner.split(",")]
    return value


DEFAULT_CONFIG = '''# CodeInspector CLI configuration
# Auto-generated by 'codeinspector config init'

[general]
log_level = "WARNING"

[extensions]
# Install root for `codeinspector install` (default: ~/.codeinspector/extensions)
# extensions_dir = "~/.codeinspector/extensions"
workspace_dir = "extensions"
install_command = ["npm", "install"]

[updates]
enabled = true
registry_url = "https://registry.npmjs.org"
package_name = "@codeinspector/cli"
timeout = 5.0
cache_ttl_hours = 24

[forge]
api_url = "https://api.github.com"
# Prefer the GITHUB_TOKEN environment variable
# token = ""

[dev]
poll_interval = 0.5
watch_suffixes = [".js", ".ts"]
'''


@config_app.command("init")
def config_init(
    force: bool = typer.Option(
        False,
        "--force",
        "-f",
        help="Overwrite an existing config file",
    ),
) -> None:
    """Create a default config file in the CodeInspector home directory.

    Example:
        codeinspector config init
        codeinspector config init --force
    """
    from settings import ConfigError, default_home, get_config, reload_config

    try:
        home = get_config().home_path
    except ConfigError:
        home = default_home()
    config_path: Path = home / "config.toml"

    if config_path.exists() and not force:
        print_warning(f"Config file already exists: {escape(str(config_path))}")
        print_info("Use --force to overwrite")
        raise typer.Exit(1)

    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(DEFAULT_CONFIG, encoding="utf-8")
    print_success(f"Created config file: {escape(str(config_path))}")

    try:
        reload_config()
    except ConfigError as e:
        print_warning(escape(str(e)))


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
