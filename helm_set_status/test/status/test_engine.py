"""Tests for helm_set_status.status.engine module."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime

import pytest

from helm_set_status.core.result import Err, Ok, Result
from helm_set_status.status.engine import check_precondition, set_status
from helm_set_status.status.errors import (
    PersistenceFailed,
    PreconditionFailed,
    ReleaseNotFound,
    RevisionLookupFailed,
)
from helm_set_status.status.model import LATEST, Applied, ReleaseRecord
from helm_set_status.status.store import MemoryReleaseStore, StoreError
from helm_set_status.status.vocabulary import Status

NOW = datetime(2026, 1, 2, 3, 4, 5, tzinfo=UTC)


def _clock() -> datetime:
    return NOW


def _store(*records: tuple[str, int, Status]) -> MemoryReleaseStore:
    store = MemoryReleaseStore()
    for name, revision, status in records:
        assert store.create(ReleaseRecord(name=name, revision=revision, status=status)) == Ok(None)
    return store


def _status(store: MemoryReleaseStore, name: str, revision: int) -> Status:
    return store.records[(name, revision)].status


@dataclass
class FailingUpdateStore:
    """Reads from a memory store, refuses every write."""

    inner: MemoryReleaseStore
    writes: list[ReleaseRecord] = field(default_factory=list)

    def get_latest(self, name: str) -> Result[ReleaseRecord, StoreError]:
        return self.inner.get_latest(name)

    def get_revision(self, name: str, revision: int) -> Result[ReleaseRecord, StoreError]:
        return self.inner.get_revision(name, revision)

    def update(self, record: ReleaseRecord) -> Result[None, StoreError]:
        self.writes.append(record)
        return Err(StoreError("etcdserver: request timed out"))


class TestSetStatus:
    def test_latest_revision(self) -> None:
        """r1 deployed -> failed via latest."""
        store = _store(("r1", 1, Status.DEPLOYED))

        result = set_status(store, "r1", Status.FAILED, LATEST, (), clock=_clock)

        assert result == Ok(Applied(release_name="r1", revision=1, status=Status.FAILED))
        record = store.records[("r1", 1)]
        assert record.status == Status.FAILED
        assert record.description == "status set to failed"
        assert record.last_transition_time == NOW

    def test_latest_resolves_highest_revision(self) -> None:
        store = _store(("web", 1, Status.SUPERSEDED), ("web", 3, Status.DEPLOYED), ("web", 2, Status.SUPERSEDED))

        result = set_status(store, "web", Status.FAILED, clock=_clock)

        assert isinstance(result, Ok)
        assert result.value.revision == 3
        assert result.value.targeted_revision is False
        assert _status(store, "web", 3) == Status.FAILED
        assert _status(store, "web", 2) == Status.SUPERSEDED

    def test_specific_revision_leaves_others_alone(self) -> None:
        """r2: revision 1 superseded, revision 2 deployed; only revision 1 changes."""
        store = _store(("r2", 1, Status.SUPERSEDED), ("r2", 2, Status.DEPLOYED))

        result = set_status(store, "r2", Status.FAILED, 1, (), clock=_clock)

        assert result == Ok(
            Applied(release_name="r2", revision=1, status=Status.FAILED, targeted_revision=True)
        )
        assert _status(store, "r2", 1) == Status.FAILED
        assert _status(store, "r2", 2) == Status.DEPLOYED

    @pytest.mark.parametrize("target", list(Status))
    def test_every_target_status(self, target: Status) -> None:
        store = _store(("app", 1, Status.DEPLOYED))

        result = set_status(store, "app", target, clock=_clock)

        assert isinstance(result, Ok)
        assert _status(store, "app", 1) == target
        assert store.records[("app", 1)].description == f"status set to {target.value}"

    def test_only_status_fields_change(self) -> None:
        store = MemoryReleaseStore()
        original = ReleaseRecord(
            name="app",
            revision=4,
            status=Status.PENDING_UPGRADE,
            description="Upgrade complete",
            namespace="apps",
            raw={"chart": "nginx"},
        )
        store.create(original)

        set_status(store, "app", Status.DEPLOYED, clock=_clock)

        updated = store.records[("app", 4)]
        assert (updated.name, updated.revision, updated.namespace) == ("app", 4, "apps")
        assert updated.raw == {"chart": "nginx"}
        # the stored original is not mutated in place
        assert original.status == Status.PENDING_UPGRADE


class TestNotFound:
    def test_latest_lookup_yields_release_not_found(self) -> None:
        result = set_status(MemoryReleaseStore(), "non-existent", Status.FAILED)
        assert result == Err(ReleaseNotFound(release_name="non-existent"))

    def test_empty_name_yields_release_not_found(self) -> None:
        result = set_status(_store(("app", 1, Status.DEPLOYED)), "", Status.FAILED)
        assert result == Err(ReleaseNotFound(release_name=""))

    def test_explicit_revision_yields_revision_lookup_failed(self) -> None:
        result = set_status(MemoryReleaseStore(), "non-existent", Status.FAILED, 1)
        assert result == Err(
            RevisionLookupFailed(release_name="non-existent", revision=1, cause="release: not found")
        )

    def test_missing_revision_of_existing_release(self) -> None:
        store = _store(("app", 1, Status.DEPLOYED))

        result = set_status(store, "app", Status.FAILED, 5)

        assert isinstance(result, Err)
        assert isinstance(result.error, RevisionLookupFailed)
        assert result.error.revision == 5
        assert _status(store, "app", 1) == Status.DEPLOYED


class TestPrecondition:
    def test_empty_set_never_blocks(self) -> None:
        for current in Status:
            store = _store(("app", 1, current))
            assert isinstance(set_status(store, "app", Status.FAILED, LATEST, ()), Ok)

    def test_matching_singleton(self) -> None:
        store = _store(("app", 1, Status.PENDING_INSTALL))

        result = set_status(store, "app", Status.FAILED, LATEST, (Status.PENDING_INSTALL,))

        assert isinstance(result, Ok)
        assert _status(store, "app", 1) == Status.FAILED

    def test_matching_multi_element_set(self) -> None:
        store = _store(("app", 1, Status.PENDING_UPGRADE))
        allowed = (Status.PENDING_UPGRADE, Status.PENDING_ROLLBACK)

        result = set_status(store, "app", Status.DEPLOYED, LATEST, allowed)

        assert isinstance(result, Ok)
        assert _status(store, "app", 1) == Status.DEPLOYED

    def test_non_matching_set_leaves_record_untouched(self) -> None:
        """r3 deployed, allowed [pending-upgrade pending-rollback]."""
        store = _store(("r3", 1, Status.DEPLOYED))
        allowed = (Status.PENDING_UPGRADE, Status.PENDING_ROLLBACK)
        before = store.records[("r3", 1)]

        result = set_status(store, "r3", Status.FAILED, LATEST, allowed)

        assert result == Err(PreconditionFailed(current_status=Status.DEPLOYED, allowed=allowed))
        assert store.records[("r3", 1)] is before

    def test_duplicates_are_harmless(self) -> None:
        assert check_precondition(Status.FAILED, (Status.FAILED, Status.FAILED)) == Ok(None)

    def test_precondition_checked_against_targeted_revision(self) -> None:
        store = _store(("app", 1, Status.FAILED), ("app", 2, Status.DEPLOYED))

        result = set_status(store, "app", Status.SUPERSEDED, 1, (Status.FAILED,))

        assert isinstance(result, Ok)
        assert _status(store, "app", 1) == Status.SUPERSEDED


class TestPersistence:
    def test_update_failure(self) -> None:
        inner = _store(("app", 1, Status.DEPLOYED))
        store = FailingUpdateStore(inner)

        result = set_status(store, "app", Status.FAILED)

        assert result == Err(
            PersistenceFailed(release_name="app", cause="etcdserver: request timed out")
        )
        assert _status(inner, "app", 1) == Status.DEPLOYED

    def test_write_is_keyed_by_resolved_revision(self) -> None:
        inner = _store(("app", 1, Status.SUPERSEDED), ("app", 2, Status.DEPLOYED))
        store = FailingUpdateStore(inner)

        set_status(store, "app", Status.FAILED)

        assert [(r.name, r.revision) for r in store.writes] == [("app", 2)]

    def test_precondition_failure_never_writes(self) -> None:
        store = FailingUpdateStore(_store(("app", 1, Status.DEPLOYED)))

        set_status(store, "app", Status.FAILED, LATEST, (Status.PENDING_INSTALL,))

        assert store.writes == []
