"""Error presentation and exit code mapping."""

from __future__ import annotations

from typing import TYPE_CHECKING

from helm_set_status.core.errors import ErrorCode
from helm_set_status.output.console import Style
from helm_set_status.status.errors import (
    ConfigurationUnavailable,
    InvalidRevision,
    InvalidStatus,
    PersistenceFailed,
    PreconditionFailed,
    ReleaseNotFound,
    RevisionLookupFailed,
    TransitionError,
    error_hint,
    error_message,
)

if TYPE_CHECKING:
    from helm_set_status.output.console import ConsoleProtocol

__all__ = ["print_transition_error", "transition_error_exit_code"]


def print_transition_error(error: TransitionError, console: ConsoleProtocol) -> None:
    console.error(error_message(error))
    hint = error_hint(error)
    if hint:
        console.print(f"hint: {hint}", Style.HINT)


def transition_error_exit_code(error: TransitionError) -> int:
    match error:
        case InvalidStatus() | InvalidRevision():
            return int(ErrorCode.USER_ERROR)
        case ConfigurationUnavailable():
            return int(ErrorCode.ENV_ERROR)
        case ReleaseNotFound() | RevisionLookupFailed():
            return int(ErrorCode.NOT_FOUND)
        case PreconditionFailed():
            return int(ErrorCode.PRECONDITION_FAILED)
        case PersistenceFailed():
            return int(ErrorCode.STORE_ERROR)
