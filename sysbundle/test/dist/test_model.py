"""Tests for dist/model.py."""

from __future__ import annotations

import pytest

from sysbundle.dist.model import Release, System, name_key


class TestSystem:
    """Tests for System."""

    def test_key_is_case_insensitive(self) -> None:
        """System keys are case-folded."""
        assert System("Alexandria", "alexandria-1").key == "alexandria"

    def test_empty_name_rejected(self) -> None:
        """An empty name is rejected."""
        with pytest.raises(ValueError, match="name"):
            System("", "rel-1")

    def test_missing_release_rejected(self) -> None:
        """An empty release name is rejected."""
        with pytest.raises(ValueError, match="no release"):
            System("alpha", "")

    def test_frozen(self) -> None:
        """System is immutable."""
        system = System("alpha", "alpha-1")
        with pytest.raises(AttributeError):
            system.name = "beta"  # type: ignore[misc]


class TestRelease:
    """Tests for Release."""

    @pytest.mark.parametrize("prefix", ["", ".", "..", "a/b"])
    def test_invalid_prefix(self, prefix: str) -> None:
        """Unsafe prefixes are rejected."""
        with pytest.raises(ValueError, match="invalid prefix"):
            Release(name="r", archive="r.tgz", prefix=prefix)

    def test_system_must_belong_to_release(self) -> None:
        """A system of another release is rejected."""
        with pytest.raises(ValueError, match="belongs to"):
            Release(name="r-1", archive="r.tgz", prefix="r-1", systems=(System("x", "other-1"),))

    def test_system_release_match_ignores_case(self) -> None:
        """Release ownership ignores case."""
        release = Release(name="R-1", archive="r.tgz", prefix="r-1", systems=(System("x", "r-1"),))
        assert release.key == "r-1"

    def test_source_files_derived_once_in_order(self) -> None:
        """Derived source files keep first-seen order without duplicates."""
        release = Release(
            name="kit-3",
            archive="kit.tgz",
            prefix="kit-3",
            systems=(
                System("kit", "kit-3", ("kit.asd",)),
                System("kit-tests", "kit-3", ("kit.asd", "tests.asd")),
            ),
        )
        assert release.source_files == ("kit.asd", "tests.asd")

    def test_declared_system_files_win(self) -> None:
        """Declared system files replace the derived list."""
        release = Release(
            name="kit-3",
            archive="kit.tgz",
            prefix="kit-3",
            systems=(System("kit", "kit-3", ("kit.asd",)),),
            system_files=("b.asd", "a.asd"),
        )
        assert release.source_files == ("b.asd", "a.asd")


def test_name_key() -> None:
    """name_key folds case."""
    assert name_key("CL-PPCRE") == name_key("cl-ppcre")
