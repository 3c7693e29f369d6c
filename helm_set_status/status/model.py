"""Value types for release status transitions."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Final, Literal

from helm_set_status.core.result import Err, Ok, Result
from helm_set_status.status.vocabulary import Status

__all__ = [
    "LATEST",
    "Applied",
    "InvalidRevision",
    "ReleaseRecord",
    "RevisionSelector",
    "Skipped",
    "TransitionOutcome",
    "TransitionRequest",
    "revision_selector",
]

LATEST: Final = "latest"

type RevisionSelector = Literal["latest"] | int


def _empty_raw() -> Mapping[str, object]:
    return {}


@dataclass(frozen=True, slots=True)
class ReleaseRecord:
    """One revision of a named release, as read from the store.

    ``raw`` is the backend's release document. The core never inspects it;
    stores use it to write back fields the core does not model.
    """

    name: str
    revision: int
    status: Status
    description: str = ""
    last_transition_time: datetime | None = None
    namespace: str = ""
    raw: Mapping[str, object] = field(default_factory=_empty_raw, compare=False, repr=False)


@dataclass(frozen=True, slots=True)
class InvalidRevision:
    """A negative revision number was requested."""

    revision: int


def revision_selector(revision: int) -> Result[RevisionSelector, InvalidRevision]:
    """Map the external revision number to a selector: 0 means latest."""
    if revision < 0:
        return Err(InvalidRevision(revision=revision))
    if revision == 0:
        return Ok(LATEST)
    return Ok(revision)


@dataclass(frozen=True, slots=True)
class TransitionRequest:
    """A parsed request to change a release's status."""

    release_name: str
    target_status: Status
    revision: RevisionSelector = LATEST
    allowed_from: tuple[Status, ...] = ()
    skip_on_precondition_failure: bool = False


@dataclass(frozen=True, slots=True)
class Applied:
    """The status change was written to the store."""

    release_name: str
    revision: int
    status: Status
    targeted_revision: bool = False


@dataclass(frozen=True, slots=True)
class Skipped:
    """The precondition did not hold and the skip policy turned it into a no-op."""

    release_name: str
    current_status: Status
    allowed: tuple[Status, ...]
    reason: str


TransitionOutcome = Applied | Skipped
