"""Filesystem helpers for bundle metadata files."""

from __future__ import annotations

import os
import tempfile
from collections.abc import Iterable
from pathlib import Path

__all__ = ["atomic_write_bytes", "atomic_write_text", "atomic_write_lines"]


def atomic_write_bytes(path: Path, data: bytes) -> None:
    """Write bytes to path atomically using temp file + replace.

    A reader never observes a half-written file, and re-running a write over
    an existing file replaces it in one step.

    Raises:
        OSError: If the parent directory cannot be created or the file written.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{path.name}.",
        suffix=".tmp",
        dir=str(path.parent),
    )
    tmp_path = Path(tmp_name)

    try:
        with os.fdopen(fd, "wb") as handle:
            handle.write(data)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_path, path)
    finally:
        tmp_path.unlink(missing_ok=True)


def atomic_write_text(path: Path, content: str, *, encoding: str = "utf-8") -> None:
    """Write text atomically; newlines are kept exactly as given."""
    atomic_write_bytes(path, content.encode(encoding))


def atomic_write_lines(path: Path, lines: Iterable[str]) -> None:
    """Write one UTF-8 line per item, each terminated by a single LF.

    An empty iterable produces an empty file.
    """
    atomic_write_text(path, "".join(f"{line}\n" for line in lines))
