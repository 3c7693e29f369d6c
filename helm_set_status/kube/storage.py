"""Release store backed by Helm's Kubernetes storage drivers.

Each revision lives in one object named ``sh.helm.release.v1.<name>.v<revision>``
labelled ``owner=helm,name=<name>,version=<revision>,status=<status>``.
Secrets hold the release payload base64-encoded once more than ConfigMaps,
because Secret data is itself base64 on the wire.
"""

from __future__ import annotations

import base64
import binascii
import time
from dataclasses import dataclass

from helm_set_status.core.config import Driver, Settings
from helm_set_status.core.result import Err, Ok, Result
from helm_set_status.core.structured import StrDict, as_str_dict, get_int, get_list, get_str, get_table
from helm_set_status.kube.codec import apply_record, decode_release, encode_release, record_from_release
from helm_set_status.kube.kubectl import Kubectl, KubectlError, ensure_kubectl_available
from helm_set_status.output.console import ConsoleProtocol
from helm_set_status.status.model import ReleaseRecord
from helm_set_status.status.store import ReleaseStore, StoreError, StoreFactory
from helm_set_status.status.vocabulary import render_status

__all__ = ["KubeReleaseStore", "default_store_factory", "object_name"]

_KINDS: dict[Driver, str] = {"secret": "secret", "configmap": "configmap"}

# Server-managed metadata dropped before an unconditional replace.
_VOLATILE_METADATA = ("resourceVersion", "uid", "creationTimestamp", "managedFields", "generation")


def object_name(name: str, revision: int) -> str:
    return f"sh.helm.release.v1.{name}.v{revision}"


def _store_error(error: KubectlError) -> StoreError:
    return StoreError(error.message)


@dataclass(frozen=True, slots=True)
class KubeReleaseStore:
    """``ReleaseStore`` over Secrets or ConfigMaps, through kubectl."""

    kubectl: Kubectl
    driver: Driver = "secret"

    @property
    def kind(self) -> str:
        return _KINDS[self.driver]

    def _payload(self, obj: StrDict) -> Result[str, StoreError]:
        data = get_table(obj, "data") or {}
        payload = get_str(data, "release")
        if payload is None:
            return Err(StoreError(f"{self.kind} has no release data"))
        if self.driver == "configmap":
            return Ok(payload)
        try:
            return Ok(base64.b64decode(payload, validate=True).decode("ascii"))
        except (binascii.Error, UnicodeDecodeError) as e:
            return Err(StoreError(f"corrupt secret data: {e}"))

    def _decode(self, obj: StrDict) -> Result[ReleaseRecord, StoreError]:
        payload = self._payload(obj)
        if isinstance(payload, Err):
            return payload
        release = decode_release(payload.value)
        if isinstance(release, Err):
            return Err(StoreError(release.error.message))
        record = record_from_release(release.value, raw=obj)
        if isinstance(record, Err):
            return Err(StoreError(record.error.message))
        return record

    def get_latest(self, name: str) -> Result[ReleaseRecord, StoreError]:
        listed = self.kubectl.list_objects(self.kind, f"owner=helm,name={name}")
        if isinstance(listed, Err):
            return Err(_store_error(listed.error))

        latest: StrDict | None = None
        latest_version = 0
        for item in get_list(listed.value, "items") or []:
            obj = as_str_dict(item)
            if obj is None:
                continue
            labels = get_table(get_table(obj, "metadata") or {}, "labels") or {}
            version = get_int(labels, "version") or 0
            if version > latest_version:
                latest, latest_version = obj, version

        if latest is None:
            return Err(StoreError(f"release: not found: {name}"))
        return self._decode(latest)

    def get_revision(self, name: str, revision: int) -> Result[ReleaseRecord, StoreError]:
        got = self.kubectl.get_object(self.kind, object_name(name, revision))
        if isinstance(got, Err):
            return Err(_store_error(got.error))
        return self._decode(got.value)

    def _manifest(self, record: ReleaseRecord) -> Result[StrDict, StoreError]:
        obj = as_str_dict(dict(record.raw))
        if obj is None or "metadata" not in obj:
            return Err(StoreError(f"release {record.name} was not read from {self.kind} storage"))

        payload = self._payload(obj)
        if isinstance(payload, Err):
            return payload
        release = decode_release(payload.value)
        if isinstance(release, Err):
            return Err(StoreError(release.error.message))

        encoded = encode_release(apply_record(release.value, record))
        if self.driver == "secret":
            encoded = base64.b64encode(encoded.encode("ascii")).decode("ascii")

        metadata = dict(get_table(obj, "metadata") or {})
        for key in _VOLATILE_METADATA:
            metadata.pop(key, None)
        labels = dict(get_table(metadata, "labels") or {})
        labels["status"] = render_status(record.status)
        labels["modifiedAt"] = str(int(time.time()))
        metadata["labels"] = labels
        metadata["name"] = object_name(record.name, record.revision)

        data = dict(get_table(obj, "data") or {})
        data["release"] = encoded
        return Ok({**obj, "metadata": metadata, "data": data})

    def update(self, record: ReleaseRecord) -> Result[None, StoreError]:
        manifest = self._manifest(record)
        if isinstance(manifest, Err):
            return manifest
        replaced = self.kubectl.replace_object(manifest.value)
        if isinstance(replaced, Err):
            return Err(_store_error(replaced.error))
        return replaced


def default_store_factory(settings: Settings, console: ConsoleProtocol | None = None) -> StoreFactory:
    """Factory the CLI wires in: checks kubectl, then builds the store."""

    def factory() -> Result[ReleaseStore, StoreError]:
        available = ensure_kubectl_available(settings.kubectl)
        if isinstance(available, Err):
            return Err(StoreError(available.error.message))
        store: ReleaseStore = KubeReleaseStore(
            kubectl=Kubectl(settings=settings, console=console),
            driver=settings.driver,
        )
        return Ok(store)

    return factory
