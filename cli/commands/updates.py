"""Update check command and the shared checker factory."""

from cli.codeinspector.output import SpinnerReporter, print_update_report
from settings.config import Config
from updates import BackgroundUpdateCheck, UpdateCache, UpdateChecker


def build_checker(config: Config) -> UpdateChecker:
    """Create an update checker from configuration."""
    from cli.codeinspector import __version__

    cache = UpdateCache(config.update_cache_path, ttl_ms=config.update_cache_ttl_ms)
    return UpdateChecker(
        package_name=config.updates.package_name,
        current_version=__version__,
        cache=cache,
        registry_url=config.updates.registry_url,
        timeout=config.updates.timeout,
    )


def start_background_check(config: Config) -> BackgroundUpdateCheck:
    """Kick off the update check that runs alongside a command."""
    background = BackgroundUpdateCheck(build_checker(config), wait=config.updates.timeout)
    background.start()
    return background


def check_updates() -> None:
    """Check whether a newer CLI release is available.

    Example:
        codeinspector check-updates
    """
    from settings import get_config

    checker = build_checker(get_config())

    with SpinnerReporter() as reporter:
        reporter.phase("Checking for updates...")
        record = checker.check()

    print_update_report(record)
