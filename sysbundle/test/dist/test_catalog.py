"""Tests for dist/catalog.py - lookups and consistent snapshots."""

from __future__ import annotations

import pytest

from sysbundle.dist.catalog import Catalog, CatalogIndex, StaticCatalog
from sysbundle.dist.model import Release, System


def _release(name: str, version: str) -> Release:
    full = f"{name}-{version}"
    return Release(
        name=full, archive=f"{full}.tgz", prefix=full, systems=(System(name, full, (f"{name}.asd",)),)
    )


class TestCatalogIndex:
    """Tests for CatalogIndex."""

    def test_from_releases_indexes_systems(self) -> None:
        """Releases and their systems are keyed by folded name."""
        index = CatalogIndex.from_releases([_release("Alpha", "1")], name="demo")

        assert set(index.systems) == {"alpha"}
        assert set(index.releases) == {"alpha-1"}
        assert index.name == "demo"
        assert index.version is None


class TestStaticCatalog:
    """Tests for StaticCatalog."""

    def test_satisfies_protocol(self) -> None:
        """StaticCatalog is a Catalog."""
        assert isinstance(StaticCatalog(), Catalog)

    def test_lookups(self) -> None:
        """Lookups ignore case and miss with None."""
        catalog = StaticCatalog([_release("alpha", "1")])

        system = catalog.find_system("ALPHA")
        release = catalog.find_release("alpha-1")

        assert system is not None and system.release == "alpha-1"
        assert release is not None and release.prefix == "alpha-1"
        assert catalog.find_system("beta") is None
        assert catalog.find_release("beta-1") is None

    def test_calls_are_recorded(self) -> None:
        """Every lookup is recorded."""
        catalog = StaticCatalog([_release("alpha", "1")])
        catalog.find_system("alpha")
        catalog.find_release("alpha-1")
        assert catalog.calls == [("system", "alpha"), ("release", "alpha-1")]

    def test_replace_is_visible_outside_snapshot(self) -> None:
        """replace() takes effect at once outside a snapshot."""
        catalog = StaticCatalog([_release("alpha", "1")], name="demo", version="1")

        catalog.replace([_release("alpha", "2")])

        system = catalog.find_system("alpha")
        assert system is not None and system.release == "alpha-2"
        assert catalog.dist_name == "demo"


class TestConsistentSnapshot:
    """Tests for consistent_snapshot()."""

    def test_pins_index_until_exit(self) -> None:
        """Lookups inside the scope see the pinned index."""
        catalog = StaticCatalog([_release("alpha", "1")])

        with catalog.consistent_snapshot():
            catalog.replace([_release("alpha", "2")])
            pinned = catalog.find_system("alpha")

        after = catalog.find_system("alpha")
        assert pinned is not None and pinned.release == "alpha-1"
        assert after is not None and after.release == "alpha-2"

    def test_nested_snapshots_share_outer_pin(self) -> None:
        """Inner scopes reuse the outer pin."""
        catalog = StaticCatalog([_release("alpha", "1")])

        with catalog.consistent_snapshot():
            catalog.replace([_release("alpha", "2")])
            with catalog.consistent_snapshot():
                inner = catalog.find_system("alpha")
            still = catalog.find_system("alpha")

        assert inner is not None and inner.release == "alpha-1"
        assert still is not None and still.release == "alpha-1"

    def test_pin_released_on_exception(self) -> None:
        """The pin is dropped when the scope raises."""
        catalog = StaticCatalog([_release("alpha", "1")])

        with pytest.raises(RuntimeError), catalog.consistent_snapshot():
            catalog.replace([_release("alpha", "2")])
            raise RuntimeError("boom")

        system = catalog.find_system("alpha")
        assert system is not None and system.release == "alpha-2"
