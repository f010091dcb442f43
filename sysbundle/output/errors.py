"""Error presentation utilities.

Centralized error formatting and exit code mapping for consistent UX.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sysbundle.bundle.errors import BundleError, BundleExistsError, WriteError
from sysbundle.core.config import ConfigError
from sysbundle.core.errors import ErrorCode
from sysbundle.dist.errors import ArchiveError, NotFoundError
from sysbundle.fetch.http import HttpError
from sysbundle.output.console import Style

if TYPE_CHECKING:
    from sysbundle.output.console import ConsoleProtocol

__all__ = ["AppError", "print_error", "error_exit_code"]

AppError = BundleError | ConfigError | HttpError


def print_error(error: AppError, console: ConsoleProtocol) -> None:
    """Print a bundling error to console with appropriate formatting."""
    match error:
        case NotFoundError(kind=kind, name=name):
            console.error(f"{kind} not found: {name}")
            console.print("hint: check the name against the dist index", Style.DIM)
        case ArchiveError(release=release, stage=stage, message=message):
            console.error(f"{release}: archive {stage} failed")
            console.print(message, Style.DIM)
        case WriteError(path=path, message=message):
            console.error(f"{message} ({path})")
        case BundleExistsError(path=path):
            console.error(f"bundle directory already exists: {path}")
            console.print("hint: choose another --to or drop --no-overwrite", Style.DIM)
        case ConfigError(message=message):
            console.error(message)
        case HttpError():
            console.error(f"dist download failed: {error}")
        case _:
            console.error(str(error))


def error_exit_code(error: AppError) -> int:
    """Get exit code for an error value."""
    match error:
        case NotFoundError() | BundleExistsError():
            return int(ErrorCode.USER_ERROR)
        case ConfigError():
            return int(ErrorCode.ENV_ERROR)
        case ArchiveError():
            return int(ErrorCode.ARCHIVE_ERROR)
        case HttpError():
            return int(ErrorCode.NETWORK_ERROR)
        case WriteError():
            return int(ErrorCode.IO_ERROR)
    return int(ErrorCode.USER_ERROR)
