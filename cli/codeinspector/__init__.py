"""CodeInspector CLI.

Command-line interface for building and publishing CodeInspector extensions.
"""

__version__ = "1.0.0"

__all__ = ["__version__", "app", "main"]


def __getattr__(name: str):
    # The command modules import cli.codeinspector.output; load the app lazily
    if name in ("app", "main"):
        from cli.codeinspector import cli

        return getattr(cli, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
