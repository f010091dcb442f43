"""Bundle model - the accumulated closure of releases and systems.

A Bundle owns two tables, release name -> Release and system name -> System,
and keeps them mutually consistent:
- every registered system's release is registered
- every system a registered release provides is registered

Both tables only grow. They are mutated exclusively by `ensure_release()` and
`ensure_system()`, which consult the catalog on a miss.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sysbundle.core.result import Err, Ok, Result
from sysbundle.dist.errors import NotFoundError, ReleaseNotFound, SystemNotFound
from sysbundle.dist.model import name_key

if TYPE_CHECKING:
    from sysbundle.dist.catalog import Catalog
    from sysbundle.dist.model import Release, System

__all__ = ["Bundle"]


class Bundle:
    """Mutable working set of releases and systems for one bundling run.

    Usage:
        bundle = Bundle(catalog)
        result = bundle.ensure_system("beta")
        for release in bundle.provided_releases():
            print(release.name)
    """

    def __init__(self, catalog: Catalog) -> None:
        self._catalog = catalog
        self._releases: dict[str, Release] = {}
        self._systems: dict[str, System] = {}
        self._requested: dict[str, str] = {}

    @property
    def catalog(self) -> Catalog:
        return self._catalog

    @property
    def requested_systems(self) -> tuple[str, ...]:
        """Names passed to `request()`, first spelling kept, in request order."""
        return tuple(self._requested.values())

    def request(self, name: str) -> None:
        """Record name as explicitly requested (it is not resolved here)."""
        self._requested.setdefault(name_key(name), name)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name_key(name) in self._systems

    def __len__(self) -> int:
        return len(self._systems)

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    def find_system(self, name: str) -> System | None:
        return self._systems.get(name_key(name))

    def find_release(self, name: str) -> Release | None:
        return self._releases.get(name_key(name))

    def provided_releases(self) -> list[Release]:
        """Registered releases sorted by name."""
        return sorted(self._releases.values(), key=lambda r: (r.key, r.name))

    def provided_systems(self) -> list[System]:
        """Registered systems sorted by name."""
        return sorted(self._systems.values(), key=lambda s: (s.key, s.name))

    # -------------------------------------------------------------------------
    # Growth
    # -------------------------------------------------------------------------

    def _add_release(self, release: Release) -> None:
        self._releases[release.key] = release
        for system in release.systems:
            self._systems.setdefault(system.key, system)

    def ensure_release(self, name: str) -> Result[Release, NotFoundError]:
        """Return the registered release, fetching and registering it on a miss.

        Registering a release registers every system it provides.

        Returns:
            Ok with the Release, or Err(ReleaseNotFound) if the catalog has none
        """
        release = self.find_release(name)
        if release is not None:
            return Ok(release)

        release = self._catalog.find_release(name)
        if release is None:
            return Err(ReleaseNotFound(name))

        self._add_release(release)
        return Ok(release)

    def ensure_system(self, name: str) -> Result[System, NotFoundError]:
        """Return the registered system, fetching and registering it on a miss.

        A fetched system brings its owning release, and thereby all sibling
        systems, into the bundle.

        Returns:
            Ok with the System, or Err(SystemNotFound) / Err(ReleaseNotFound)
        """
        system = self.find_system(name)
        if system is not None:
            return Ok(system)

        system = self._catalog.find_system(name)
        if system is None:
            return Err(SystemNotFound(name))

        release = self.ensure_release(system.release)
        if isinstance(release, Err):
            return release

        # The release normally lists the system; register it either way.
        return Ok(self._systems.setdefault(system.key, system))
