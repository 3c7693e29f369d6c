"""Release store contract and an in-memory implementation."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol

from helm_set_status.core.result import Err, Ok, Result
from helm_set_status.status.model import ReleaseRecord

__all__ = ["MemoryReleaseStore", "ReleaseStore", "StoreError", "StoreFactory"]


@dataclass(frozen=True, slots=True)
class StoreError:
    """Backend failure, carrying the backend's own description."""

    message: str

    def __str__(self) -> str:
        return self.message


class ReleaseStore(Protocol):
    """Persistence for release records keyed by (name, revision)."""

    def get_latest(self, name: str) -> Result[ReleaseRecord, StoreError]:
        """Return the highest revision stored for ``name``."""
        ...

    def get_revision(self, name: str, revision: int) -> Result[ReleaseRecord, StoreError]:
        """Return one revision. ``revision`` must be positive."""
        ...

    def update(self, record: ReleaseRecord) -> Result[None, StoreError]:
        """Overwrite the record stored under its own name and revision."""
        ...


type StoreFactory = Callable[[], Result[ReleaseStore, StoreError]]


def _empty_records() -> dict[tuple[str, int], ReleaseRecord]:
    return {}


@dataclass
class MemoryReleaseStore:
    """Release store kept in a dict. Used by tests and embedders."""

    records: dict[tuple[str, int], ReleaseRecord] = field(default_factory=_empty_records)

    def create(self, record: ReleaseRecord) -> Result[None, StoreError]:
        key = (record.name, record.revision)
        if key in self.records:
            return Err(StoreError(f"release {record.name} revision {record.revision} already exists"))
        self.records[key] = record
        return Ok(None)

    def get_latest(self, name: str) -> Result[ReleaseRecord, StoreError]:
        revisions = [rev for (n, rev) in self.records if n == name]
        if not revisions:
            return Err(StoreError("release: not found"))
        return Ok(self.records[(name, max(revisions))])

    def get_revision(self, name: str, revision: int) -> Result[ReleaseRecord, StoreError]:
        record = self.records.get((name, revision))
        if record is None:
            return Err(StoreError("release: not found"))
        return Ok(record)

    def update(self, record: ReleaseRecord) -> Result[None, StoreError]:
        key = (record.name, record.revision)
        if key not in self.records:
            return Err(StoreError("release: not found"))
        self.records[key] = record
        return Ok(None)
