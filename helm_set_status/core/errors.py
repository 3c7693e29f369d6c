"""Process exit codes.

Scripts wrapping ``helm set-status`` branch on these values, so they must
remain stable:
- 0: Success (including a deliberate skip under ``--no-fail``)
- 1: User error (invalid status, invalid revision)
- 2: Environment error (store connection could not be configured)
- 3: Release or revision not found
- 4: ``--from`` precondition not met
- 5: Store write failed
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for the CLI."""

    OK = 0
    USER_ERROR = 1
    ENV_ERROR = 2
    NOT_FOUND = 3
    PRECONDITION_FAILED = 4
    STORE_ERROR = 5

    def __str__(self) -> str:
        return self.name.lower().replace("_", " ")

    @property
    def is_success(self) -> bool:
        return self == ErrorCode.OK

    @property
    def is_error(self) -> bool:
        return self != ErrorCode.OK
