"""Fetching and unpacking release archives.

- HTTP client abstraction (http.py)
- Cached archive fetching (download.py)
- Gunzip and tar extraction (archive.py)
"""

from sysbundle.fetch.archive import ExtractError, decompress, extract_tar
from sysbundle.fetch.download import ArchiveFetcher, FetchResult, file_md5
from sysbundle.fetch.http import HttpClient, HttpError, MockHttpClient, RealHttpClient

__all__ = [
    # HTTP
    "HttpClient",
    "HttpError",
    "MockHttpClient",
    "RealHttpClient",
    # Fetch
    "ArchiveFetcher",
    "FetchResult",
    "file_md5",
    # Archive
    "ExtractError",
    "decompress",
    "extract_tar",
]
