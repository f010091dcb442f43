"""Dist data model: systems and the releases that provide them.

Both types are immutable values handed out by a catalog. Names compare
case-insensitively; use `name_key()` wherever a name is used as a mapping key.
"""

from __future__ import annotations

from dataclasses import dataclass

__all__ = ["System", "Release", "name_key"]


def name_key(name: str) -> str:
    """Normalize a system or release name for case-insensitive lookup."""
    return name.casefold()


@dataclass(frozen=True, slots=True)
class System:
    """A named, independently loadable unit of source code.

    Attributes:
        name: System name (e.g., "alexandria")
        release: Name of the release that provides this system
        source_files: Source-file paths relative to the release root
        depends_on: Names of the systems this system directly requires
    """

    name: str
    release: str
    source_files: tuple[str, ...] = ()
    depends_on: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("System name cannot be empty")
        if not self.release:
            raise ValueError(f"System {self.name!r} has no release")

    @property
    def key(self) -> str:
        return name_key(self.name)


@dataclass(frozen=True, slots=True)
class Release:
    """A distributable archive providing one or more systems.

    Attributes:
        name: Release name (e.g., "alexandria-20231021")
        archive: Archive location, an http(s)/file URL or a local path
        prefix: Directory name the release is unpacked under
        systems: Systems provided by this release, in declaration order
        system_files: Declared source-file order; derived from `systems` when empty
        archive_size: Expected archive size in bytes, if the dist declares it
        archive_md5: Expected archive MD5 hex digest, if the dist declares it
    """

    name: str
    archive: str
    prefix: str
    systems: tuple[System, ...] = ()
    system_files: tuple[str, ...] = ()
    archive_size: int | None = None
    archive_md5: str | None = None

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Release name cannot be empty")
        if not self.prefix or "/" in self.prefix or self.prefix in {".", ".."}:
            raise ValueError(f"Release {self.name!r} has an invalid prefix: {self.prefix!r}")
        for system in self.systems:
            if name_key(system.release) != name_key(self.name):
                raise ValueError(
                    f"System {system.name!r} belongs to {system.release!r}, not {self.name!r}"
                )

    @property
    def key(self) -> str:
        return name_key(self.name)

    @property
    def source_files(self) -> tuple[str, ...]:
        """Loadable source files of this release, each listed once."""
        if self.system_files:
            return self.system_files
        seen: dict[str, None] = {}
        for system in self.systems:
            for path in system.source_files:
                seen.setdefault(path, None)
        return tuple(seen)
