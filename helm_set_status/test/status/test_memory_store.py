"""Tests for helm_set_status.status.store module."""

from __future__ import annotations

from helm_set_status.core.result import Err, Ok
from helm_set_status.status.model import ReleaseRecord
from helm_set_status.status.store import MemoryReleaseStore
from helm_set_status.status.vocabulary import Status


def _record(name: str, revision: int, status: Status = Status.DEPLOYED) -> ReleaseRecord:
    return ReleaseRecord(name=name, revision=revision, status=status)


class TestMemoryReleaseStore:
    def test_get_latest_picks_highest_revision(self) -> None:
        store = MemoryReleaseStore()
        store.create(_record("web", 2))
        store.create(_record("web", 10))
        store.create(_record("api", 50))

        result = store.get_latest("web")

        assert isinstance(result, Ok)
        assert result.value.revision == 10

    def test_get_latest_missing(self) -> None:
        result = MemoryReleaseStore().get_latest("web")
        assert isinstance(result, Err)
        assert "not found" in result.error.message

    def test_get_revision(self) -> None:
        store = MemoryReleaseStore()
        store.create(_record("web", 1, Status.SUPERSEDED))

        assert store.get_revision("web", 1) == Ok(_record("web", 1, Status.SUPERSEDED))
        assert isinstance(store.get_revision("web", 2), Err)

    def test_create_rejects_duplicate(self) -> None:
        store = MemoryReleaseStore()
        store.create(_record("web", 1))
        result = store.create(_record("web", 1))
        assert isinstance(result, Err)
        assert "already exists" in result.error.message

    def test_update_overwrites_in_place(self) -> None:
        store = MemoryReleaseStore()
        store.create(_record("web", 1))

        assert store.update(_record("web", 1, Status.FAILED)) == Ok(None)
        assert store.records[("web", 1)].status == Status.FAILED

    def test_update_unknown_key(self) -> None:
        result = MemoryReleaseStore().update(_record("web", 1))
        assert isinstance(result, Err)
        assert str(result.error) == "release: not found"
