"""Error codes for CLI exit status.

Each failure class a bundling run can end in maps to one stable process exit
code, so scripts wrapping `sysbundle` can tell a typo in a system name from a
broken archive or a full disk.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for CLI commands.

    These values are used as process exit codes and should remain stable:
    - 0: Success
    - 1: User error (unknown system or release, target already exists)
    - 2: Environment error (unreadable config, malformed dist index)
    - 3: Archive error (fetch, checksum, decompression or extraction failed)
    - 4: Network error (dist index download failed)
    - 5: I/O error (target directory or metadata files not writable)
    """

    OK = 0
    USER_ERROR = 1
    ENV_ERROR = 2
    ARCHIVE_ERROR = 3
    NETWORK_ERROR = 4
    IO_ERROR = 5

    def __str__(self) -> str:
        return self.name.lower().replace("_", " ")

    @property
    def is_success(self) -> bool:
        return self == ErrorCode.OK

    @property
    def is_error(self) -> bool:
        return self != ErrorCode.OK
