"""Tests for helm_set_status.status.vocabulary module."""

from __future__ import annotations

import pytest

from helm_set_status.core.result import Err, Ok
from helm_set_status.status.vocabulary import (
    InvalidStatus,
    Status,
    all_valid_status_strings,
    parse_status,
    render_status,
    valid_statuses_string,
)

CANONICAL = (
    "unknown",
    "deployed",
    "superseded",
    "failed",
    "uninstalling",
    "pending-install",
    "pending-upgrade",
    "pending-rollback",
)


class TestParseStatus:
    @pytest.mark.parametrize("text", CANONICAL)
    def test_round_trip(self, text: str) -> None:
        parsed = parse_status(text)
        assert isinstance(parsed, Ok)
        assert render_status(parsed.value) == text

    def test_maps_to_enum_member(self) -> None:
        assert parse_status("pending-upgrade") == Ok(Status.PENDING_UPGRADE)

    @pytest.mark.parametrize(
        "text",
        ["", "invalid", "Deployed", "DEPLOYED", " deployed", "deployed ", "pending_install", "pending"],
    )
    def test_rejects_anything_else(self, text: str) -> None:
        assert parse_status(text) == Err(InvalidStatus(value=text))

    def test_records_source(self) -> None:
        result = parse_status("nope", source="from")
        assert result == Err(InvalidStatus(value="nope", source="from"))

    def test_invalid_status_lists_valid_values(self) -> None:
        assert InvalidStatus(value="x").valid == CANONICAL


class TestRenderStatus:
    def test_every_member_renders(self) -> None:
        assert tuple(render_status(s) for s in Status) == CANONICAL

    def test_str(self) -> None:
        assert str(Status.PENDING_ROLLBACK) == "pending-rollback"


class TestValidStatuses:
    def test_declaration_order(self) -> None:
        assert all_valid_status_strings() == CANONICAL
        assert len(all_valid_status_strings()) == 8

    def test_joined(self) -> None:
        assert valid_statuses_string() == ", ".join(CANONICAL)
