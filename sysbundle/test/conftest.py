"""Shared fixtures: in-memory release archives and a small two-release dist."""

from __future__ import annotations

import io
import tarfile
from collections.abc import Callable
from pathlib import Path

import pytest

from sysbundle.dist.catalog import StaticCatalog
from sysbundle.dist.model import Release, System

TgzFactory = Callable[[dict[str, bytes], str], bytes]


def tgz_bytes(files: dict[str, bytes], prefix: str = "") -> bytes:
    """Build a .tgz in memory; every member is placed under prefix/ if given."""
    buf = io.BytesIO()
    with tarfile.open(fileobj=buf, mode="w:gz") as tar:
        for name, content in files.items():
            info = tarfile.TarInfo(name=f"{prefix}/{name}" if prefix else name)
            info.size = len(content)
            info.mode = 0o644
            tar.addfile(info, io.BytesIO(content))
    return buf.getvalue()


@pytest.fixture
def make_tgz() -> TgzFactory:
    return tgz_bytes


@pytest.fixture
def alpha_beta(tmp_path: Path) -> StaticCatalog:
    """alpha (alpha-1.0, no deps) and beta (beta-2.0, requires alpha), archives on disk."""
    archives = tmp_path / "archives"
    archives.mkdir()
    (archives / "alpha-1.0.tgz").write_bytes(tgz_bytes({"alpha.src": b"(alpha)\n"}, "alpha-1.0"))
    (archives / "beta-2.0.tgz").write_bytes(tgz_bytes({"beta.src": b"(beta)\n"}, "beta-2.0"))

    alpha = Release(
        name="alpha-1.0",
        archive=str(archives / "alpha-1.0.tgz"),
        prefix="alpha-1.0",
        systems=(System("alpha", "alpha-1.0", ("alpha.src",)),),
    )
    beta = Release(
        name="beta-2.0",
        archive=str(archives / "beta-2.0.tgz"),
        prefix="beta-2.0",
        systems=(System("beta", "beta-2.0", ("beta.src",), ("alpha",)),),
    )
    return StaticCatalog([beta, alpha], name="demo", version="2026-10-01")
