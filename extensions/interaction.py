"""User interaction capabilities used by the extension workflows.

Installer, publisher and repository manager ask questions and report
progress through these protocols. The CLI provides terminal implementations
(see cli.codeinspector.output); tests provide scripted ones.
"""

from __future__ import annotations

from typing import Callable, Optional, Protocol, Sequence

# Returns None when the answer is acceptable, otherwise the message to show
Validator = Callable[[str], Optional[str]]


class Prompter(Protocol):
    """Ask the user for structured answers."""

    def ask(
        self,
        message: str,
        default: str | None = None,
        validate: Validator | None = None,
    ) -> str: ...

    def confirm(self, message: str, default: bool = False) -> bool: ...

    def choose(self, message: str, choices: Sequence[str], default: str | None = None) -> str: ...

    def secret(self, message: str, validate: Validator | None = None) -> str: ...


class ProgressReporter(Protocol):
    """Report phased progress of a long-running operation."""

    def phase(self, message: str) -> None: ...

    def succeed(self, message: str) -> None: ...

    def warn(self, message: str) -> None: ...

    def fail(self, message: str) -> None: ...

    def info(self, message: str) -> None: ...


class SilentReporter:
    """Progress reporter that discards everything."""

    def phase(self, message: str) -> None:
        pass

    def succeed(self, message: str) -> None:
        pass

    def warn(self, message: str) -> None:
        pass

    def fail(self, message: str) -> None:
        pass

    def info(self, message: str) -> None:
        pass


def required(label: str) -> Validator:
    """Validator rejecting empty answers."""

    def check(value: str) -> str | None:
        return None if value.strip() else f"{label} required"

    return check
