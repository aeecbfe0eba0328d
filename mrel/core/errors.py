"""Exit codes for the mrel CLI.

The numeric values are part of the command line contract (CI jobs branch on
them) and must stay stable:
- 0: Success, including a release declined at the confirmation prompt
- 1: User error (invalid target version, bad arguments)
- 2: Environment error (not a monorepo, invalid release.toml)
- 3: Build error (test or build gate failed)
- 4: Network error (publish, tag push or branch push failed)
- 5: I/O error (manifest unreadable/unwritable, local git failure)
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Process exit codes."""

    OK = 0
    USER_ERROR = 1
    ENV_ERROR = 2
    BUILD_ERROR = 3
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
