"""Helm release payload encoding.

Helm stores each release revision as JSON, gzip-compressed and then
base64-encoded into the ``release`` key of a Secret or ConfigMap.
"""

from __future__ import annotations

import base64
import binascii
import copy
import gzip
import json
import re
import zlib
from dataclasses import dataclass
from datetime import UTC, datetime

from helm_set_status.core.result import Err, Ok, Result
from helm_set_status.core.structured import StrDict, as_str_dict, get_int, get_str, get_table
from helm_set_status.status.model import ReleaseRecord
from helm_set_status.status.vocabulary import parse_status, render_status

__all__ = [
    "CodecError",
    "apply_record",
    "decode_release",
    "encode_release",
    "format_time",
    "parse_time",
    "record_from_release",
]

_GZIP_MAGIC = b"\x1f\x8b"
_FRACTION = re.compile(r"\.(\d+)")


@dataclass(frozen=True, slots=True)
class CodecError:
    message: str


def encode_release(release: StrDict) -> str:
    raw = json.dumps(release, separators=(",", ":")).encode("utf-8")
    return base64.b64encode(gzip.compress(raw)).decode("ascii")


def decode_release(payload: str) -> Result[StrDict, CodecError]:
    """Inverse of ``encode_release``; uncompressed payloads are accepted too."""
    try:
        data = base64.b64decode(payload, validate=True)
        if data.startswith(_GZIP_MAGIC):
            data = gzip.decompress(data)
        release = as_str_dict(json.loads(data))
    except (binascii.Error, OSError, EOFError, zlib.error) as e:
        return Err(CodecError(f"corrupt release payload: {e}"))
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        return Err(CodecError(f"release payload is not valid JSON: {e}"))

    if release is None:
        return Err(CodecError("release payload is not a JSON object"))
    return Ok(release)


def format_time(value: datetime) -> str:
    return value.astimezone(UTC).isoformat().replace("+00:00", "Z")


def parse_time(value: str | None) -> datetime | None:
    """Parse Helm's RFC 3339 timestamps; nanoseconds are truncated."""
    if not value:
        return None
    text = _FRACTION.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), value, count=1)
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        return None


def record_from_release(
    release: StrDict, *, raw: StrDict | None = None
) -> Result[ReleaseRecord, CodecError]:
    name = get_str(release, "name")
    revision = get_int(release, "version")
    info = get_table(release, "info") or {}
    if name is None or revision is None or revision <= 0:
        return Err(CodecError("release payload is missing name or version"))

    status_text = get_str(info, "status") or ""
    status = parse_status(status_text)
    if isinstance(status, Err):
        return Err(CodecError(f"release {name} has unknown status {status_text!r}"))

    description = info.get("description")
    return Ok(
        ReleaseRecord(
            name=name,
            revision=revision,
            status=status.value,
            description=description if isinstance(description, str) else "",
            last_transition_time=parse_time(get_str(info, "last_deployed")),
            namespace=get_str(release, "namespace") or "",
            raw=raw if raw is not None else release,
        )
    )


def apply_record(release: StrDict, record: ReleaseRecord) -> StrDict:
    """Return a copy of ``release`` carrying the record's status fields."""
    updated = copy.deepcopy(release)
    info = get_table(updated, "info")
    if info is None:
        info = {}
        updated["info"] = info
    info["status"] = render_status(record.status)
    info["description"] = record.description
    if record.last_transition_time is not None:
        info["last_deployed"] = format_time(record.last_transition_time)
    return updated
