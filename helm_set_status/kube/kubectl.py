"""kubectl invocation scoped to one namespace and context."""

from __future__ import annotations

import json
import shutil
from dataclasses import dataclass

from helm_set_status.core.config import Settings
from helm_set_status.core.result import Err, Ok, Result
from helm_set_status.core.structured import StrDict, as_str_dict
from helm_set_status.kube.process import run as run_process
from helm_set_status.output.console import ConsoleProtocol, Style

__all__ = ["Kubectl", "KubectlError", "ensure_kubectl_available"]


@dataclass(frozen=True, slots=True)
class KubectlError:
    message: str


def ensure_kubectl_available(executable: str) -> Result[str, KubectlError]:
    """Resolve ``executable`` on PATH."""
    path = shutil.which(executable)
    if path is None:
        return Err(KubectlError(f"{executable}: not found on PATH"))
    return Ok(path)


@dataclass(frozen=True, slots=True)
class Kubectl:
    """Runs kubectl against the namespace and context from ``Settings``."""

    settings: Settings
    console: ConsoleProtocol | None = None

    def _base(self) -> list[str]:
        cmd = [self.settings.kubectl]
        if self.settings.kubeconfig:
            cmd += ["--kubeconfig", self.settings.kubeconfig]
        if self.settings.kube_context:
            cmd += ["--context", self.settings.kube_context]
        cmd += ["--namespace", self.settings.namespace]
        return cmd

    def _run(self, args: list[str], *, input: str | None = None) -> Result[str, KubectlError]:
        cmd = self._base() + args
        if self.console is not None:
            self.console.print(f"$ {' '.join(cmd)}", Style.DIM)

        result = run_process(cmd, input=input, timeout=self.settings.timeout)
        if isinstance(result, Err):
            return Err(KubectlError(result.error.detail))
        return result

    def _json(self, args: list[str]) -> Result[StrDict, KubectlError]:
        result = self._run(args + ["--output", "json"])
        if isinstance(result, Err):
            return result
        try:
            data = as_str_dict(json.loads(result.value))
        except json.JSONDecodeError as e:
            return Err(KubectlError(f"invalid JSON from kubectl: {e}"))
        if data is None:
            return Err(KubectlError("invalid JSON from kubectl: expected an object"))
        return Ok(data)

    def get_object(self, kind: str, name: str) -> Result[StrDict, KubectlError]:
        return self._json(["get", kind, name])

    def list_objects(self, kind: str, selector: str) -> Result[StrDict, KubectlError]:
        return self._json(["get", kind, "--selector", selector])

    def replace_object(self, manifest: StrDict) -> Result[None, KubectlError]:
        """Overwrite an existing object with ``manifest``."""
        result = self._run(["replace", "--filename", "-"], input=json.dumps(manifest))
        if isinstance(result, Err):
            return result
        return Ok(None)
