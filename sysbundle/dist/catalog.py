"""Catalog abstraction over a dist's system and release index.

This module provides:
- Catalog: Protocol the bundle model consumes (injectable for tests)
- CatalogIndex: Immutable name -> object tables for one dist state
- SnapshotCatalog: Base implementation with consistent-snapshot pinning
- StaticCatalog: In-memory catalog built from Release values

A consistent snapshot pins the catalog's current index for the duration of
a `with` block. Lookups inside the block all see that index even if the
catalog is reloaded or replaced meanwhile; the pin is dropped when the
outermost block exits, whether normally or through an exception.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from contextlib import AbstractContextManager, contextmanager
from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

from sysbundle.dist.model import Release, System, name_key

__all__ = [
    "Catalog",
    "CatalogIndex",
    "SnapshotCatalog",
    "StaticCatalog",
]


@runtime_checkable
class Catalog(Protocol):
    """Protocol for dist lookups."""

    @property
    def dist_name(self) -> str | None:
        """Dist name, if the index records one."""
        ...

    @property
    def dist_version(self) -> str | None:
        """Dist version, if the index records one."""
        ...

    def find_system(self, name: str) -> System | None:
        """Return the system called name, or None if the dist has none."""
        ...

    def find_release(self, name: str) -> Release | None:
        """Return the release called name, or None if the dist has none."""
        ...

    def consistent_snapshot(self) -> AbstractContextManager[None]:
        """Scope within which every lookup observes the same dist state."""
        ...


@dataclass(frozen=True, slots=True)
class CatalogIndex:
    """Lookup tables for one state of a dist.

    Attributes:
        systems: Case-folded system name -> System
        releases: Case-folded release name -> Release
        name: Dist name, if known
        version: Dist version, if known
    """

    systems: Mapping[str, System] = field(default_factory=dict)
    releases: Mapping[str, Release] = field(default_factory=dict)
    name: str | None = None
    version: str | None = None

    @classmethod
    def from_releases(
        cls,
        releases: Iterable[Release],
        *,
        name: str | None = None,
        version: str | None = None,
    ) -> CatalogIndex:
        """Build the tables from releases; each release's systems are indexed too."""
        release_table: dict[str, Release] = {}
        system_table: dict[str, System] = {}
        for release in releases:
            release_table[release.key] = release
            for system in release.systems:
                system_table[system.key] = system
        return cls(systems=system_table, releases=release_table, name=name, version=version)


class SnapshotCatalog:
    """Catalog over a swappable CatalogIndex with snapshot pinning.

    Every lookup is recorded in `calls` as (kind, name) so callers can check
    how often the dist was consulted.
    """

    def __init__(self, index: CatalogIndex) -> None:
        self._index = index
        self._pinned: CatalogIndex | None = None
        self._depth = 0
        self.calls: list[tuple[str, str]] = []

    @property
    def index(self) -> CatalogIndex:
        """The index lookups currently observe."""
        return self._pinned if self._pinned is not None else self._index

    @property
    def dist_name(self) -> str | None:
        return self.index.name

    @property
    def dist_version(self) -> str | None:
        return self.index.version

    def _set_index(self, index: CatalogIndex) -> None:
        """Swap in a new dist state; pinned snapshots keep the old one."""
        self._index = index

    def find_system(self, name: str) -> System | None:
        self.calls.append(("system", name))
        return self.index.systems.get(name_key(name))

    def find_release(self, name: str) -> Release | None:
        self.calls.append(("release", name))
        return self.index.releases.get(name_key(name))

    @contextmanager
    def consistent_snapshot(self) -> Iterator[None]:
        if self._depth == 0:
            self._pinned = self._index
        self._depth += 1
        try:
            yield
        finally:
            self._depth -= 1
            if self._depth == 0:
                self._pinned = None


class StaticCatalog(SnapshotCatalog):
    """In-memory catalog.

    Usage:
        catalog = StaticCatalog([alpha_release, beta_release])
        with catalog.consistent_snapshot():
            system = catalog.find_system("beta")
    """

    def __init__(
        self,
        releases: Iterable[Release] = (),
        *,
        name: str | None = None,
        version: str | None = None,
    ) -> None:
        super().__init__(CatalogIndex.from_releases(releases, name=name, version=version))

    def replace(self, releases: Iterable[Release]) -> None:
        """Replace the dist contents, as an upstream update would."""
        current = self._index
        self._set_index(
            CatalogIndex.from_releases(releases, name=current.name, version=current.version)
        )
