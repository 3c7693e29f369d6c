"""Apply a status change to one release revision."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import replace
from datetime import UTC, datetime

from helm_set_status.core.result import Err, Ok, Result
from helm_set_status.status.errors import (
    PersistenceFailed,
    PreconditionFailed,
    ReleaseNotFound,
    RevisionLookupFailed,
    TransitionError,
)
from helm_set_status.status.model import LATEST, Applied, ReleaseRecord, RevisionSelector
from helm_set_status.status.store import ReleaseStore
from helm_set_status.status.vocabulary import Status, render_status

__all__ = ["Clock", "check_precondition", "set_status", "utc_now"]

type Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(UTC)


def _resolve(
    store: ReleaseStore, release_name: str, revision: RevisionSelector
) -> Result[ReleaseRecord, TransitionError]:
    if revision == LATEST:
        latest = store.get_latest(release_name)
        if isinstance(latest, Err):
            return Err(ReleaseNotFound(release_name=release_name))
        return latest

    found = store.get_revision(release_name, revision)
    if isinstance(found, Err):
        return Err(
            RevisionLookupFailed(
                release_name=release_name,
                revision=revision,
                cause=found.error.message,
            )
        )
    return found


def check_precondition(
    current: Status, allowed_from: tuple[Status, ...]
) -> Result[None, PreconditionFailed]:
    """An empty ``allowed_from`` means no restriction."""
    if allowed_from and current not in allowed_from:
        return Err(PreconditionFailed(current_status=current, allowed=allowed_from))
    return Ok(None)


def set_status(
    store: ReleaseStore,
    release_name: str,
    target_status: Status,
    revision: RevisionSelector = LATEST,
    allowed_from: tuple[Status, ...] = (),
    *,
    clock: Clock = utc_now,
) -> Result[Applied, TransitionError]:
    """Set the status of a release revision.

    The latest revision is used unless ``revision`` names one explicitly.
    The record is read once and written once, with no compare-and-swap:
    a concurrent writer between the two calls is overwritten.

    Args:
        store: Release store to read from and write to.
        release_name: Name of the release.
        target_status: Status to record.
        revision: ``LATEST`` or a positive revision number.
        allowed_from: Statuses the release must currently have; empty allows any.
        clock: Source of the transition timestamp.

    Returns:
        Ok(Applied) once persisted, otherwise Err with the failure kind.
        On any Err the stored release is unchanged.
    """
    resolved = _resolve(store, release_name, revision)
    if isinstance(resolved, Err):
        return resolved
    record = resolved.value

    gate = check_precondition(record.status, allowed_from)
    if isinstance(gate, Err):
        return gate

    updated = replace(
        record,
        status=target_status,
        description=f"status set to {render_status(target_status)}",
        last_transition_time=clock(),
    )

    written = store.update(updated)
    if isinstance(written, Err):
        return Err(PersistenceFailed(release_name=release_name, cause=written.error.message))

    return Ok(
        Applied(
            release_name=release_name,
            revision=updated.revision,
            status=target_status,
            targeted_revision=revision != LATEST,
        )
    )
