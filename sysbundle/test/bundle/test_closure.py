"""Tests for bundle/closure.py - dependency closure resolution."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

import pytest

from sysbundle.bundle.closure import bundle_systems, resolve_closure
from sysbundle.bundle.model import Bundle
from sysbundle.core.result import Err, Ok
from sysbundle.dist.catalog import StaticCatalog
from sysbundle.dist.errors import ReleaseNotFound, SystemNotFound
from sysbundle.dist.model import Release, System


def _release(name: str, *systems: System) -> Release:
    return Release(name=name, archive=f"{name}.tgz", prefix=name, systems=systems)


def _single(name: str, *deps: str) -> Release:
    return _release(f"{name}-1", System(name, f"{name}-1", (f"{name}.asd",), deps))


def _assert_closed(bundle: Bundle) -> None:
    for system in bundle.provided_systems():
        for dep in system.depends_on:
            assert dep in bundle, f"{system.name} requires missing {dep}"


class _TrackingCatalog(StaticCatalog):
    """StaticCatalog that counts snapshot scopes it is inside of."""

    def __init__(self, releases: list[Release]) -> None:
        super().__init__(releases)
        self.depth = 0
        self.entered = 0

    @contextmanager
    def consistent_snapshot(self) -> Iterator[None]:
        self.entered += 1
        self.depth += 1
        try:
            with super().consistent_snapshot():
                yield
        finally:
            self.depth -= 1


class TestResolveClosure:
    """Tests for resolve_closure()."""

    def test_alpha_beta_scenario(self, alpha_beta: StaticCatalog) -> None:
        """beta pulls in alpha."""
        result = resolve_closure(["beta"], Bundle(alpha_beta))

        assert isinstance(result, Ok)
        bundle = result.value
        assert [r.name for r in bundle.provided_releases()] == ["alpha-1.0", "beta-2.0"]
        assert [s.name for s in bundle.provided_systems()] == ["alpha", "beta"]

    def test_transitive_chain(self) -> None:
        """Dependencies are followed to a fixed point."""
        catalog = StaticCatalog([_single("a", "b"), _single("b", "c"), _single("c")])

        result = resolve_closure(["a"], Bundle(catalog))

        assert isinstance(result, Ok)
        assert [s.name for s in result.value.provided_systems()] == ["a", "b", "c"]
        _assert_closed(result.value)

    def test_cycle_terminates(self) -> None:
        """A dependency cycle resolves, each system looked up once."""
        catalog = StaticCatalog([_single("a", "b"), _single("b", "a")])

        result = resolve_closure(["a"], Bundle(catalog))

        assert isinstance(result, Ok)
        assert [s.name for s in result.value.provided_systems()] == ["a", "b"]
        assert catalog.calls.count(("system", "a")) == 1
        assert catalog.calls.count(("system", "b")) == 1

    def test_self_dependency(self) -> None:
        """A system depending on itself resolves."""
        catalog = StaticCatalog([_single("a", "a")])
        result = resolve_closure(["a"], Bundle(catalog))
        assert isinstance(result, Ok)
        assert len(result.value) == 1

    def test_shared_dependency_fetched_once(self) -> None:
        """A diamond dependency is looked up once."""
        catalog = StaticCatalog(
            [_single("top", "left", "right"), _single("left", "base"), _single("right", "base"),
             _single("base")]
        )

        result = resolve_closure(["top"], Bundle(catalog))

        assert isinstance(result, Ok)
        assert catalog.calls.count(("system", "base")) == 1

    def test_dependencies_before_siblings(self) -> None:
        """Dependencies are expanded before the next requested name."""
        catalog = StaticCatalog([_single("a", "a-dep"), _single("a-dep"), _single("b")])

        resolve_closure(["a", "b"], Bundle(catalog))

        systems = [name for kind, name in catalog.calls if kind == "system"]
        assert systems == ["a", "a-dep", "b"]

    def test_sibling_dependencies_are_closed(self) -> None:
        """Dependencies of sibling systems are bundled too."""
        kit = _release(
            "kit-3",
            System("kit", "kit-3", ("kit.asd",)),
            System("kit-tests", "kit-3", ("kit.asd",), ("harness",)),
        )
        catalog = StaticCatalog([kit, _single("harness")])

        result = resolve_closure(["kit"], Bundle(catalog))

        assert isinstance(result, Ok)
        assert "harness" in result.value
        _assert_closed(result.value)

    def test_requested_names_are_recorded(self, alpha_beta: StaticCatalog) -> None:
        """Requested names are recorded once, in order."""
        result = resolve_closure(["beta", "alpha", "beta"], Bundle(alpha_beta))

        assert isinstance(result, Ok)
        assert result.value.requested_systems == ("beta", "alpha")

    def test_unknown_requested_system(self, alpha_beta: StaticCatalog) -> None:
        """An unknown requested system fails."""
        assert resolve_closure(["gamma"], Bundle(alpha_beta)) == Err(SystemNotFound("gamma"))

    def test_unknown_transitive_system(self) -> None:
        """An unknown dependency fails with its own name."""
        catalog = StaticCatalog([_single("a", "b"), _single("b", "ghost")])
        assert resolve_closure(["a"], Bundle(catalog)) == Err(SystemNotFound("ghost"))

    def test_fails_fast(self) -> None:
        """Names after the first failure are never looked up."""
        catalog = StaticCatalog([_single("ok")])

        resolve_closure(["missing", "ok"], Bundle(catalog))

        assert ("system", "ok") not in catalog.calls

    def test_unknown_release(self) -> None:
        """A system naming an unknown release fails with ReleaseNotFound."""
        class _Catalog(StaticCatalog):
            def find_system(self, name: str) -> System | None:
                return System(name, "lost-1")

        assert resolve_closure(["x"], Bundle(_Catalog())) == Err(ReleaseNotFound("lost-1"))

    @pytest.mark.parametrize(
        "names",
        [["a"], ["d"], ["a", "d"], ["c", "b", "a"], []],
    )
    def test_closure_property(self, names: list[str]) -> None:
        """Every dependency of every bundled system is bundled."""
        catalog = StaticCatalog(
            [_single("a", "b", "c"), _single("b", "c"), _single("c", "a"), _single("d", "c")]
        )

        result = resolve_closure(names, Bundle(catalog))

        assert isinstance(result, Ok)
        for name in names:
            assert name in result.value
        _assert_closed(result.value)


class TestBundleSystems:
    """Tests for bundle_systems()."""

    def test_runs_inside_one_snapshot(self, alpha_beta: StaticCatalog) -> None:
        """Every lookup happens inside a single snapshot scope."""
        catalog = _TrackingCatalog(list(alpha_beta.index.releases.values()))
        seen: list[int] = []
        original = catalog.find_system

        def spy(name: str) -> System | None:
            seen.append(catalog.depth)
            return original(name)

        catalog.find_system = spy  # type: ignore[method-assign]

        result = bundle_systems(["beta"], catalog)

        assert isinstance(result, Ok)
        assert seen and all(depth == 1 for depth in seen)
        assert (catalog.entered, catalog.depth) == (1, 0)

    def test_snapshot_released_on_failure(self) -> None:
        """An unknown name still leaves the snapshot scope."""
        catalog = _TrackingCatalog([_single("a")])

        result = bundle_systems(["gamma"], catalog)

        assert result == Err(SystemNotFound("gamma"))
        assert (catalog.entered, catalog.depth) == (1, 0)

    def test_catalog_update_during_resolution_is_not_observed(self) -> None:
        """A catalog replaced mid-resolution is not observed."""
        catalog = StaticCatalog([_single("a", "b"), _single("b")])
        original = catalog.find_system

        def updating(name: str) -> System | None:
            if name == "a":
                catalog.replace([_single("a")])
            return original(name)

        catalog.find_system = updating  # type: ignore[method-assign]

        result = bundle_systems(["a"], catalog)

        assert isinstance(result, Ok)
        assert "b" in result.value
        assert catalog.find_system("b") is None

    def test_uses_snapshot_scope(self) -> None:
        """The snapshot scope is entered and exited once."""
        events: list[str] = []

        class _Catalog(StaticCatalog):
            @contextmanager
            def consistent_snapshot(self) -> Iterator[None]:
                events.append("enter")
                try:
                    yield
                finally:
                    events.append("exit")

        bundle_systems(["a"], _Catalog([_single("a")]))

        assert events == ["enter", "exit"]
