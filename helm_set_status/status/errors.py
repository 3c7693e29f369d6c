"""Error kinds for a status transition.

The union is closed: every consumer matches on it exhaustively.
"""

from __future__ import annotations

from dataclasses import dataclass

from helm_set_status.status.model import InvalidRevision
from helm_set_status.status.vocabulary import (
    InvalidStatus,
    Status,
    render_status,
    valid_statuses_string,
)

__all__ = [
    "ConfigurationUnavailable",
    "InvalidRevision",
    "InvalidStatus",
    "PersistenceFailed",
    "PreconditionFailed",
    "ReleaseNotFound",
    "RevisionLookupFailed",
    "TransitionError",
    "error_hint",
    "error_message",
    "format_status_list",
]


@dataclass(frozen=True, slots=True)
class ReleaseNotFound:
    release_name: str


@dataclass(frozen=True, slots=True)
class RevisionLookupFailed:
    release_name: str
    revision: int
    cause: str


@dataclass(frozen=True, slots=True)
class PreconditionFailed:
    current_status: Status
    allowed: tuple[Status, ...]


@dataclass(frozen=True, slots=True)
class PersistenceFailed:
    """The write failed; the stored release is unchanged."""

    release_name: str
    cause: str


@dataclass(frozen=True, slots=True)
class ConfigurationUnavailable:
    """The store could not be constructed. Nothing was read or written."""

    cause: str


TransitionError = (
    InvalidStatus
    | InvalidRevision
    | ReleaseNotFound
    | RevisionLookupFailed
    | PreconditionFailed
    | PersistenceFailed
    | ConfigurationUnavailable
)


def format_status_list(statuses: tuple[Status, ...]) -> str:
    return "[" + " ".join(render_status(s) for s in statuses) + "]"


def error_message(error: TransitionError) -> str:
    match error:
        case InvalidStatus(value=value, source="from"):
            return f'invalid --from status "{value}": invalid status: {value}'
        case InvalidStatus(value=value):
            return f"invalid status: {value}"
        case InvalidRevision(revision=revision):
            return f"invalid revision {revision}: must be 0 (latest) or a positive revision number"
        case ReleaseNotFound(release_name=name):
            return f'release "{name}" not found'
        case RevisionLookupFailed(release_name=name, revision=revision, cause=cause):
            return f"failed to get release {name} revision {revision}: {cause}"
        case PreconditionFailed(current_status=current, allowed=allowed):
            return (
                f'current status "{render_status(current)}" is not in allowed list: '
                f"{format_status_list(allowed)}"
            )
        case PersistenceFailed(release_name=name, cause=cause):
            return f"failed to update release {name}: {cause}"
        case ConfigurationUnavailable(cause=cause):
            return f"failed to create configuration: {cause}"


def error_hint(error: TransitionError) -> str | None:
    match error:
        case InvalidStatus():
            return f"Valid statuses: {valid_statuses_string()}"
        case ReleaseNotFound():
            return "Check the release name and namespace (helm list -a)"
        case RevisionLookupFailed(release_name=name):
            return f"List revisions with: helm history {name}"
        case PreconditionFailed():
            return "Use --no-fail to exit successfully when the precondition is not met"
        case _:
            return None
