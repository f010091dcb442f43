"""Release archive decompression and tar extraction.

Release archives are gzip-compressed tarballs. Unpacking is two steps:
- decompress(): gunzip the archive into an intermediate .tar file
- extract_tar(): copy the tar's regular files under a destination directory

Extraction merges into the destination: files already present are replaced
and unrelated files are left alone, so unpacking twice is harmless.
Members with absolute paths, `..` components or non-regular types (symlinks,
hardlinks, devices) are skipped.
"""

from __future__ import annotations

import contextlib
import gzip
import os
import shutil
import tarfile
import tempfile
import zlib
from dataclasses import dataclass
from pathlib import Path, PurePosixPath

from sysbundle.core.result import Err, Ok, Result

__all__ = ["ExtractError", "decompress", "extract_tar"]


@dataclass(frozen=True, slots=True)
class ExtractError:
    """Archive handling error details.

    Attributes:
        archive: Path to the archive that failed
        message: Human-readable error message
    """

    archive: Path
    message: str

    def __str__(self) -> str:
        return f"{self.message}: {self.archive}"


def decompress(archive: Path, work_dir: Path) -> Result[Path, ExtractError]:
    """Gunzip archive into a new .tar file inside work_dir.

    The caller owns the returned file and must delete it.

    Args:
        archive: Gzip-compressed tarball
        work_dir: Directory for the intermediate file

    Returns:
        Ok with the intermediate tar path, or Err with ExtractError
    """
    if not archive.exists():
        return Err(ExtractError(archive=archive, message="Archive not found"))

    try:
        work_dir.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f"{archive.stem}.", suffix=".tar", dir=work_dir)
    except OSError as e:
        return Err(ExtractError(archive=archive, message=f"IO error: {e}"))

    output = Path(tmp_name)
    try:
        with os.fdopen(fd, "wb") as dst, gzip.open(archive, "rb") as src:
            shutil.copyfileobj(src, dst)
    except (gzip.BadGzipFile, EOFError, zlib.error) as e:
        output.unlink(missing_ok=True)
        return Err(ExtractError(archive=archive, message=f"Gunzip failed: {e}"))
    except OSError as e:
        output.unlink(missing_ok=True)
        return Err(ExtractError(archive=archive, message=f"IO error: {e}"))

    return Ok(output)


def _safe_relative_path(member_name: str, strip_components: int) -> Path | None:
    """Return a sanitized relative extraction path, or None if unsafe."""
    normalized = member_name.replace("\\", "/")
    if normalized.startswith("/"):
        return None

    parts = PurePosixPath(normalized).parts
    if len(parts) <= strip_components:
        return None

    kept = parts[strip_components:]
    if any(part in {"", ".", ".."} for part in kept):
        return None
    if kept[0].endswith(":"):
        return None

    return Path(*kept)


def _is_within_root(root: Path, target: Path) -> bool:
    try:
        return target.resolve().is_relative_to(root)
    except OSError:
        return False


def extract_tar(
    tar_path: Path,
    destination: Path,
    *,
    strip_components: int = 0,
) -> Result[int, ExtractError]:
    """Extract regular files from an uncompressed tar under destination.

    Args:
        tar_path: Path to the .tar file
        destination: Directory to extract into (created if missing)
        strip_components: Number of leading path components to remove

    Returns:
        Ok with the number of files written, or Err with ExtractError
    """
    try:
        destination.mkdir(parents=True, exist_ok=True)
        root = destination.resolve()
        files_count = 0

        with tarfile.open(tar_path, "r:") as tar:
            for member in tar:
                if not member.isreg():
                    continue

                rel_path = _safe_relative_path(member.name, strip_components)
                if rel_path is None:
                    continue

                full_path = destination / rel_path
                if not _is_within_root(root, full_path):
                    continue

                src = tar.extractfile(member)
                if src is None:
                    continue

                full_path.parent.mkdir(parents=True, exist_ok=True)
                # Read-only files from a previous run cannot be opened for writing.
                full_path.unlink(missing_ok=True)
                with src, open(full_path, "wb") as dst:
                    shutil.copyfileobj(src, dst)

                mode = member.mode & 0o777
                if mode:
                    with contextlib.suppress(OSError):
                        os.chmod(full_path, mode)

                files_count += 1

        return Ok(files_count)

    except tarfile.TarError as e:
        return Err(ExtractError(archive=tar_path, message=f"Tar extraction failed: {e}"))
    except OSError as e:
        return Err(ExtractError(archive=tar_path, message=f"IO error: {e}"))
