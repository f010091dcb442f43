"""HTTP client abstraction for dist index and archive downloads.

This module provides:
- HttpClient: Protocol for HTTP operations (injectable for tests)
- RealHttpClient: Real implementation using urllib
- MockHttpClient: Mock implementation for testing
"""

from __future__ import annotations

import ssl
import urllib.error
import urllib.request
from dataclasses import dataclass
from http.client import HTTPResponse
from pathlib import Path
from typing import Protocol, runtime_checkable

from sysbundle import __version__
from sysbundle.core.result import Err, Ok, Result

__all__ = [
    "HttpClient",
    "RealHttpClient",
    "MockHttpClient",
    "HttpError",
]


@dataclass(frozen=True, slots=True)
class HttpError:
    """HTTP error details.

    Attributes:
        url: The URL that failed
        status: HTTP status code (0 for network errors)
        message: Human-readable error message
    """

    url: str
    status: int
    message: str

    def __str__(self) -> str:
        if self.status:
            return f"HTTP {self.status}: {self.message} ({self.url})"
        return f"{self.message} ({self.url})"


@runtime_checkable
class HttpClient(Protocol):
    """Protocol for HTTP operations."""

    def get_text(self, url: str) -> Result[str, HttpError]:
        """Fetch URL and return the body decoded as UTF-8."""
        ...

    def download(self, url: str, dest: Path) -> Result[Path, HttpError]:
        """Download URL to dest.

        Args:
            url: URL to download
            dest: Destination path

        Returns:
            Ok with dest path, or Err with HttpError
        """
        ...


def _open_error(url: str, exc: BaseException, *, timeout_message: str) -> HttpError:
    match exc:
        case urllib.error.HTTPError(code=code, reason=reason):
            return HttpError(url=url, status=code, message=str(reason))
        case urllib.error.URLError(reason=reason):
            return HttpError(url=url, status=0, message=str(reason))
        case TimeoutError():
            return HttpError(url=url, status=0, message=timeout_message)
        case _:
            return HttpError(url=url, status=0, message=str(exc))


class RealHttpClient:
    """Real HTTP client using urllib.

    Handles HTTPS with system certificates, timeouts and chunked downloads.
    """

    def __init__(self, timeout: float = 30.0, user_agent: str = f"sysbundle/{__version__}") -> None:
        """Initialize HTTP client.

        Args:
            timeout: Request timeout in seconds
            user_agent: User-Agent header value
        """
        self.timeout = timeout
        self.user_agent = user_agent
        self._ssl_context = ssl.create_default_context()

    def _open(self, url: str) -> HTTPResponse:
        req = urllib.request.Request(url, headers={"User-Agent": self.user_agent})
        return urllib.request.urlopen(req, timeout=self.timeout, context=self._ssl_context)

    def get_text(self, url: str) -> Result[str, HttpError]:
        try:
            with self._open(url) as response:
                body: bytes = response.read()
        except (urllib.error.URLError, TimeoutError, ValueError, OSError) as e:
            return Err(_open_error(url, e, timeout_message="Request timed out"))

        try:
            return Ok(body.decode("utf-8"))
        except UnicodeDecodeError as e:
            return Err(HttpError(url=url, status=0, message=f"Decode error: {e}"))

    def download(self, url: str, dest: Path) -> Result[Path, HttpError]:
        try:
            with self._open(url) as response:
                chunk_size = 64 * 1024

                dest.parent.mkdir(parents=True, exist_ok=True)
                with open(dest, "wb") as f:
                    while chunk := response.read(chunk_size):
                        f.write(chunk)

            return Ok(dest)
        except (urllib.error.URLError, TimeoutError, ValueError, OSError) as e:
            return Err(_open_error(url, e, timeout_message="Download timed out"))


class MockHttpClient:
    """Mock HTTP client for testing.

    Usage:
        client = MockHttpClient()
        client.set_text("https://dist.example/distinfo.txt", "name: demo\\n")
        client.set_download("https://dist.example/alpha.tgz", archive_bytes)
    """

    def __init__(self) -> None:
        self._text_responses: dict[str, str | HttpError] = {}
        self._download_responses: dict[str, bytes | HttpError] = {}
        self.calls: list[tuple[str, str]] = []

    def set_text(self, url: str, response: str | HttpError) -> None:
        self._text_responses[url] = response

    def set_download(self, url: str, response: bytes | HttpError) -> None:
        self._download_responses[url] = response

    def get_text(self, url: str) -> Result[str, HttpError]:
        self.calls.append(("get_text", url))

        response = self._text_responses.get(url)
        if response is None:
            return Err(HttpError(url=url, status=404, message="Not found (mock)"))
        if isinstance(response, HttpError):
            return Err(response)
        return Ok(response)

    def download(self, url: str, dest: Path) -> Result[Path, HttpError]:
        """Mock download - writes predefined content to dest."""
        self.calls.append(("download", url))

        response = self._download_responses.get(url)
        if response is None:
            return Err(HttpError(url=url, status=404, message="Not found (mock)"))
        if isinstance(response, HttpError):
            return Err(response)

        dest.parent.mkdir(parents=True, exist_ok=True)
        dest.write_bytes(response)
        return Ok(dest)
