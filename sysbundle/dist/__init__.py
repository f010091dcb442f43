"""Dist catalog: systems, releases and their lookup.

- Data model (model.py)
- Catalog protocol and in-memory catalog (catalog.py)
- Index-file catalog (index.py)
- Remote dist index fetching (remote.py)
- Lookup and archive errors (errors.py)
"""

from sysbundle.dist.catalog import Catalog, CatalogIndex, SnapshotCatalog, StaticCatalog
from sysbundle.dist.errors import (
    ArchiveError,
    ArchiveStage,
    NotFoundError,
    ObjectKind,
    ReleaseNotFound,
    SystemNotFound,
)
from sysbundle.dist.index import DistCatalog, load_dist, parse_distinfo, parse_index
from sysbundle.dist.model import Release, System, name_key
from sysbundle.dist.remote import fetch_dist

__all__ = [
    # Model
    "Release",
    "System",
    "name_key",
    # Catalogs
    "Catalog",
    "CatalogIndex",
    "SnapshotCatalog",
    "StaticCatalog",
    "DistCatalog",
    "load_dist",
    "parse_distinfo",
    "parse_index",
    "fetch_dist",
    # Errors
    "ArchiveError",
    "ArchiveStage",
    "NotFoundError",
    "ObjectKind",
    "ReleaseNotFound",
    "SystemNotFound",
]
