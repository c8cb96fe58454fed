# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Errors that stop a run before the first file is reported.

Per-file failures never surface here; the runner turns them into
diagnostics and a nonzero status.
"""

from rich.markup import escape

from .constants import ExitCode


class CLIError(Exception):
    """Base exception for all CLI-related errors.

    Attributes:
        message: What went wrong
        hints: Lines suggesting a fix, printed under the message
        exit_code: Process exit status for this error type (class attribute)
    """

    exit_code: int = ExitCode.USAGE

    def __init__(self, message: str, hints: list[str] | None = None):
        self.message = message
        self.hints = hints or []
        super().__init__(message)

    def format_for_console(self) -> str:
        # Messages quote paths and source text, which may hold [brackets]
        lines = [f"[red]Error:[/red] {escape(self.message)}"]
        if self.hints:
            lines.append("")
            lines.extend(f"  • {escape(hint)}" for hint in self.hints)
        return "\n".join(lines)


class ConfigurationError(CLIError):
    """Configuration file, environment or grammar setup is unusable."""

    exit_code = ExitCode.CONFIG


class ValidationError(CLIError):
    """A command line value failed validation."""

    exit_code = ExitCode.DATAERR
