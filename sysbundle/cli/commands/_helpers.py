"""Shared helpers for CLI commands."""

from __future__ import annotations

from typing import TYPE_CHECKING, NoReturn

import typer

from sysbundle.output.errors import error_exit_code, print_error

if TYPE_CHECKING:
    from sysbundle.cli.context import CLIContext
    from sysbundle.output.errors import AppError


def exit_with_error(error: AppError, ctx: CLIContext) -> NoReturn:
    """Print error and exit with the code mapped to its type."""
    print_error(error, ctx.console)
    raise typer.Exit(code=error_exit_code(error))
