"""Bundles: closure resolution and materialization.

- Bundle model (model.py)
- Closure resolver (closure.py)
- Materializer (materialize.py) and loader script (loader.py)
- Bundle errors (errors.py)
"""

from sysbundle.bundle.closure import bundle_systems, resolve_closure
from sysbundle.bundle.errors import BundleError, BundleExistsError, WriteError
from sysbundle.bundle.loader import LOADER_FILENAME, render_loader
from sysbundle.bundle.materialize import (
    INDEX_FILENAME,
    INFO_FILENAME,
    LOCAL_PROJECTS_DIR,
    SOFTWARE_DIR,
    BundleReport,
    system_index_lines,
    unpack_release,
    unpack_releases,
    write_bundle,
    write_bundle_info,
    write_loader_script,
    write_system_index,
)
from sysbundle.bundle.model import Bundle

__all__ = [
    "Bundle",
    "bundle_systems",
    "resolve_closure",
    # Materialization
    "BundleReport",
    "INDEX_FILENAME",
    "INFO_FILENAME",
    "LOADER_FILENAME",
    "LOCAL_PROJECTS_DIR",
    "SOFTWARE_DIR",
    "render_loader",
    "system_index_lines",
    "unpack_release",
    "unpack_releases",
    "write_bundle",
    "write_bundle_info",
    "write_loader_script",
    "write_system_index",
    # Errors
    "BundleError",
    "BundleExistsError",
    "WriteError",
]
