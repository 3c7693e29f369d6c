"""Typed settings for connecting to the release store.

Settings are layered, lowest precedence first:
1. built-in defaults
2. an optional TOML file (``[store]`` table)
3. Helm's environment variables
4. explicit command-line overrides
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Literal

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_float, get_str, get_table

__all__ = [
    "ConfigError",
    "Driver",
    "Settings",
    "SettingsOverrides",
    "load_settings",
    "parse_driver",
    "DEFAULT_NAMESPACE",
    "DEFAULT_KUBECTL_TIMEOUT_SECONDS",
]

Driver = Literal["secret", "configmap"]

DEFAULT_NAMESPACE = "default"
DEFAULT_KUBECTL_TIMEOUT_SECONDS = 30.0

# Environment variables read by Helm itself, plus our own kubectl override.
ENV_NAMESPACE = "HELM_NAMESPACE"
ENV_KUBE_CONTEXT = "HELM_KUBECONTEXT"
ENV_KUBECONFIG = "KUBECONFIG"
ENV_DRIVER = "HELM_DRIVER"
ENV_KUBECTL = "HELM_SET_STATUS_KUBECTL"

_DRIVER_ALIASES: dict[str, Driver] = {
    "secret": "secret",
    "secrets": "secret",
    "configmap": "configmap",
    "configmaps": "configmap",
}


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when settings cannot be loaded or are invalid."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class Settings:
    """Where and how to reach the release store."""

    namespace: str = DEFAULT_NAMESPACE
    kube_context: str | None = None
    kubeconfig: str | None = None
    driver: Driver = "secret"
    kubectl: str = "kubectl"
    timeout: float = DEFAULT_KUBECTL_TIMEOUT_SECONDS


@dataclass(frozen=True, slots=True)
class SettingsOverrides:
    """Values given explicitly on the command line (None = not given)."""

    namespace: str | None = None
    kube_context: str | None = None
    kubeconfig: str | None = None


def parse_driver(value: str, *, path: Path | None = None) -> Result[Driver, ConfigError]:
    driver = _DRIVER_ALIASES.get(value.strip().lower())
    if driver is None:
        return Err(
            ConfigError(
                f"unsupported storage driver: {value!r} (expected secret or configmap)",
                path=path,
            )
        )
    return Ok(driver)


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    import tomllib

    try:
        data = as_str_dict(tomllib.loads(path.read_bytes().decode("utf-8")))
        if data is None:
            return Err(ConfigError("Config root must be a TOML table", path=path))
        return Ok(data)
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))


def _apply_file(settings: Settings, path: Path) -> Result[Settings, ConfigError]:
    parsed = _parse_toml(path)
    if isinstance(parsed, Err):
        return parsed

    store: StrDict = get_table(parsed.value, "store") or {}
    driver = settings.driver
    raw_driver = get_str(store, "driver")
    if raw_driver is not None:
        driver_result = parse_driver(raw_driver, path=path)
        if isinstance(driver_result, Err):
            return driver_result
        driver = driver_result.value

    timeout = get_float(store, "timeout")
    if timeout is not None and timeout <= 0:
        return Err(ConfigError(f"store.timeout must be positive, got {timeout}", path=path))

    return Ok(
        replace(
            settings,
            namespace=get_str(store, "namespace") or settings.namespace,
            kube_context=get_str(store, "kube_context") or settings.kube_context,
            kubeconfig=get_str(store, "kubeconfig") or settings.kubeconfig,
            driver=driver,
            kubectl=get_str(store, "kubectl") or settings.kubectl,
            timeout=timeout or settings.timeout,
        )
    )


def _apply_env(settings: Settings, env: Mapping[str, str]) -> Result[Settings, ConfigError]:
    driver = settings.driver
    raw_driver = get_str(env, ENV_DRIVER)
    if raw_driver is not None:
        driver_result = parse_driver(raw_driver)
        if isinstance(driver_result, Err):
            return Err(ConfigError(f"${ENV_DRIVER}: {driver_result.error.message}"))
        driver = driver_result.value

    return Ok(
        replace(
            settings,
            namespace=get_str(env, ENV_NAMESPACE) or settings.namespace,
            kube_context=get_str(env, ENV_KUBE_CONTEXT) or settings.kube_context,
            kubeconfig=get_str(env, ENV_KUBECONFIG) or settings.kubeconfig,
            driver=driver,
            kubectl=get_str(env, ENV_KUBECTL) or settings.kubectl,
        )
    )


def load_settings(
    *,
    env: Mapping[str, str],
    path: Path | None = None,
    overrides: SettingsOverrides | None = None,
) -> Result[Settings, ConfigError]:
    """Resolve store settings from file, environment and overrides.

    Args:
        env: Environment mapping (usually ``os.environ``).
        path: Optional TOML settings file.
        overrides: Command-line values, applied last.

    Returns:
        Ok(Settings) on success, Err(ConfigError) on failure.
    """
    settings = Settings()

    if path is not None:
        from_file = _apply_file(settings, path)
        if isinstance(from_file, Err):
            return from_file
        settings = from_file.value

    from_env = _apply_env(settings, env)
    if isinstance(from_env, Err):
        return from_env
    settings = from_env.value

    if overrides is not None:
        settings = replace(
            settings,
            namespace=overrides.namespace or settings.namespace,
            kube_context=overrides.kube_context or settings.kube_context,
            kubeconfig=overrides.kubeconfig or settings.kubeconfig,
        )

    return Ok(settings)
