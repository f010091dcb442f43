from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from sysbundle.dist.errors import ArchiveError, NotFoundError


@dataclass(frozen=True, slots=True)
class WriteError:
    """Filesystem failure while creating the bundle directory or its metadata."""

    path: Path
    message: str

    def __str__(self) -> str:
        return f"{self.message}: {self.path}"


@dataclass(frozen=True, slots=True)
class BundleExistsError:
    """Target directory already exists and overwriting was not allowed."""

    path: Path

    @property
    def message(self) -> str:
        return f"bundle directory already exists: {self.path}"

    def __str__(self) -> str:
        return self.message


BundleError = NotFoundError | ArchiveError | WriteError | BundleExistsError
