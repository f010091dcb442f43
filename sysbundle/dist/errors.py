"""Errors about dist objects: unknown names and unusable archives."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Literal

__all__ = [
    "ArchiveError",
    "ArchiveStage",
    "NotFoundError",
    "ObjectKind",
    "ReleaseNotFound",
    "SystemNotFound",
]


class ObjectKind(Enum):
    """Kind of dist object a lookup was for."""

    SYSTEM = "system"
    RELEASE = "release"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class NotFoundError:
    """A system or release name the catalog does not know.

    Attributes:
        kind: Whether a system or a release was looked up
        name: The name as requested
    """

    kind: ObjectKind
    name: str

    @property
    def message(self) -> str:
        return f"{self.kind} not found: {self.name}"

    def __str__(self) -> str:
        return self.message


def SystemNotFound(name: str) -> NotFoundError:  # noqa: N802
    return NotFoundError(kind=ObjectKind.SYSTEM, name=name)


def ReleaseNotFound(name: str) -> NotFoundError:  # noqa: N802
    return NotFoundError(kind=ObjectKind.RELEASE, name=name)


ArchiveStage = Literal["fetch", "checksum", "decompress", "extract"]


@dataclass(frozen=True, slots=True)
class ArchiveError:
    """A release archive could not be fetched, verified or unpacked.

    Attributes:
        release: Name of the release the archive belongs to
        stage: Which step failed
        message: Human-readable error message
    """

    release: str
    stage: ArchiveStage
    message: str

    def __str__(self) -> str:
        return f"{self.release}: {self.stage} failed: {self.message}"
