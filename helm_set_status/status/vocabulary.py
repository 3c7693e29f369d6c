"""The closed set of Helm release statuses."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Literal

from helm_set_status.core.result import Err, Ok, Result

__all__ = [
    "InvalidStatus",
    "Status",
    "all_valid_status_strings",
    "parse_status",
    "render_status",
    "valid_statuses_string",
]

StatusSource = Literal["target", "from"]


class Status(Enum):
    """Lifecycle state of a release revision.

    Declaration order is the canonical display order.
    """

    UNKNOWN = "unknown"
    DEPLOYED = "deployed"
    SUPERSEDED = "superseded"
    FAILED = "failed"
    UNINSTALLING = "uninstalling"
    PENDING_INSTALL = "pending-install"
    PENDING_UPGRADE = "pending-upgrade"
    PENDING_ROLLBACK = "pending-rollback"

    def __str__(self) -> str:
        return self.value


_BY_TEXT: dict[str, Status] = {s.value: s for s in Status}


@dataclass(frozen=True, slots=True)
class InvalidStatus:
    """A status string outside the closed vocabulary.

    ``source`` tells whether the offending value was the target status or
    one of the ``--from`` entries.
    """

    value: str
    source: StatusSource = "target"

    @property
    def valid(self) -> tuple[str, ...]:
        return all_valid_status_strings()


def parse_status(text: str, *, source: StatusSource = "target") -> Result[Status, InvalidStatus]:
    """Exact, case-sensitive lookup. No trimming or aliasing."""
    status = _BY_TEXT.get(text)
    if status is None:
        return Err(InvalidStatus(value=text, source=source))
    return Ok(status)


def render_status(status: Status) -> str:
    return status.value


def all_valid_status_strings() -> tuple[str, ...]:
    return tuple(s.value for s in Status)


def valid_statuses_string() -> str:
    """Valid statuses joined for display, e.g. in error hints."""
    return ", ".join(all_valid_status_strings())
