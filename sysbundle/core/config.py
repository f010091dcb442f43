"""Typed configuration loading and access.

This module provides dataclasses for the sysbundle.toml structure with
full type safety and validation.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_float, get_str, get_table

__all__ = [
    "Config",
    "ConfigError",
    "DistConfig",
    "HttpConfig",
    "PathsConfig",
    "CONFIG_FILENAME",
    "DEFAULT_CACHE_DIR",
    "DEFAULT_HTTP_TIMEOUT",
    "load_config",
    "load_config_or_default",
]

CONFIG_FILENAME = "sysbundle.toml"
DEFAULT_CACHE_DIR = ".sysbundle/cache"
DEFAULT_HTTP_TIMEOUT = 30.0


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config or a dist index cannot be loaded or parsed."""

    message: str
    path: Path | None = None

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True, slots=True)
class DistConfig:
    """Where the dist index lives.

    `index` is either a directory holding systems.txt and releases.txt, or an
    http(s) URL of the dist's distinfo.txt.
    """

    index: str | None = None

    @property
    def is_remote(self) -> bool:
        return self.index is not None and self.index.startswith(("http://", "https://"))


@dataclass(frozen=True, slots=True)
class PathsConfig:
    """Local paths (relative paths are taken from the working directory)."""

    cache: str = DEFAULT_CACHE_DIR


@dataclass(frozen=True, slots=True)
class HttpConfig:
    timeout: float = DEFAULT_HTTP_TIMEOUT


@dataclass(frozen=True, slots=True)
class Config:
    """Main configuration container."""

    dist: DistConfig = field(default_factory=DistConfig)
    paths: PathsConfig = field(default_factory=PathsConfig)
    http: HttpConfig = field(default_factory=HttpConfig)

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Config:
        """Create Config from a mapping (parsed TOML)."""
        dist: StrDict = get_table(data, "dist") or {}
        paths: StrDict = get_table(data, "paths") or {}
        http: StrDict = get_table(data, "http") or {}

        return cls(
            dist=DistConfig(index=get_str(dist, "index")),
            paths=PathsConfig(cache=get_str(paths, "cache") or DEFAULT_CACHE_DIR),
            http=HttpConfig(timeout=get_float(http, "timeout") or DEFAULT_HTTP_TIMEOUT),
        )

    def cache_dir(self, base: Path) -> Path:
        """Resolve the cache directory against base when it is relative."""
        path = Path(self.paths.cache).expanduser()
        return path if path.is_absolute() else base / path


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    """Parse a TOML file, handling import and parse errors."""
    import tomllib

    try:
        content = path.read_bytes()
        data_obj: object = tomllib.loads(content.decode("utf-8"))
        data = as_str_dict(data_obj)
        if data is None:
            return Err(ConfigError("Config root must be a TOML table", path=path))
        return Ok(data)
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))


def load_config(path: Path) -> Result[Config, ConfigError]:
    """Load and parse configuration from a TOML file.

    Args:
        path: Path to sysbundle.toml

    Returns:
        Ok(Config) on success, Err(ConfigError) on failure
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    try:
        return Ok(Config.from_dict(result.value))
    except (KeyError, TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid config structure: {e}", path=path))


def load_config_or_default(path: Path) -> Result[Config, ConfigError]:
    """Load config when the file exists, default config otherwise.

    A file that exists but cannot be parsed is still an error.
    """
    if not path.exists():
        return Ok(Config())
    return load_config(path)
