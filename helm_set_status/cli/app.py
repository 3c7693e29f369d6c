from __future__ import annotations

import os
from collections.abc import Sequence
from pathlib import Path

import typer

from helm_set_status import __version__
from helm_set_status.core.config import SettingsOverrides, load_settings
from helm_set_status.core.errors import ErrorCode
from helm_set_status.core.result import Err, Ok, Result
from helm_set_status.kube.storage import default_store_factory
from helm_set_status.output.console import ConsoleProtocol, RichConsole, Style
from helm_set_status.output.errors import print_transition_error, transition_error_exit_code
from helm_set_status.status.model import Applied, Skipped
from helm_set_status.status.policy import apply_transition
from helm_set_status.status.store import ReleaseStore, StoreError, StoreFactory
from helm_set_status.status.vocabulary import valid_statuses_string

HELP = f"""Set the status of a Helm release to any valid Helm status value.

Valid status values:
  {valid_statuses_string()}

By default, the latest revision is updated. Use --revision to update a specific revision.
Use --from to only change status if the current status matches one of the specified values.
"""

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
)


def split_from(values: Sequence[str]) -> list[str]:
    """Flatten repeated and comma-separated ``--from`` values."""
    out: list[str] = []
    for value in values:
        out.extend(value.split(","))
    return out


def format_outcome(outcome: Applied | Skipped, status_text: str) -> str:
    match outcome:
        case Applied(release_name=name, revision=revision, targeted_revision=True):
            return f'Release "{name}" revision {revision} status set to "{status_text}"'
        case Applied(release_name=name):
            return f'Release "{name}" status set to "{status_text}"'
        case Skipped(reason=reason):
            return f"Skipped: {reason}"


def run_set_status(
    *,
    release: str,
    status: str,
    revision: int,
    from_statuses: Sequence[str],
    no_fail: bool,
    store_factory: StoreFactory,
    console: ConsoleProtocol,
) -> int:
    """Apply the transition and report it. Returns the process exit code."""
    result = apply_transition(
        release,
        status,
        revision,
        split_from(from_statuses),
        skip_on_precondition_failure=no_fail,
        store_factory=store_factory,
    )
    match result:
        case Err(error):
            print_transition_error(error, console)
            return transition_error_exit_code(error)
        case Ok(Skipped() as skipped):
            console.info(format_outcome(skipped, status))
            return int(ErrorCode.OK)
        case Ok(applied):
            console.print(f"revision {applied.revision} written", Style.DIM)
            console.success(format_outcome(applied, status))
            return int(ErrorCode.OK)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit(code=0)


def settings_store_factory(
    console: ConsoleProtocol,
    config: Path | None,
    overrides: SettingsOverrides,
    *,
    verbose: bool = False,
) -> StoreFactory:
    """Load settings only when a store is needed, after the request validated."""

    def factory() -> Result[ReleaseStore, StoreError]:
        loaded = load_settings(env=os.environ, path=config, overrides=overrides)
        if isinstance(loaded, Err):
            return Err(StoreError(loaded.error.message))
        settings = loaded.value
        console.print(
            f"namespace={settings.namespace} driver={settings.driver} "
            f"context={settings.kube_context or '-'} kubeconfig={settings.kubeconfig or '-'}",
            Style.DIM,
        )
        return default_store_factory(settings, console if verbose else None)()

    return factory


@app.command(help=HELP)
def set_status(
    release: str = typer.Argument(..., metavar="RELEASE", help="Release name."),
    status: str = typer.Argument(..., metavar="STATUS", help="Target status."),
    revision: int = typer.Option(
        0, "--revision", help="update a specific revision (default: latest)"
    ),
    from_statuses: list[str] = typer.Option(
        [],
        "--from",
        help="only change status if current status is one of these values (can specify multiple)",
    ),
    no_fail: bool = typer.Option(
        False, "--no-fail", help="exit 0 instead of failing when --from precondition is not met"
    ),
    namespace: str | None = typer.Option(
        None, "--namespace", "-n", help="Namespace of the release (default: $HELM_NAMESPACE)"
    ),
    kube_context: str | None = typer.Option(
        None, "--kube-context", help="Kubeconfig context (default: $HELM_KUBECONTEXT)"
    ),
    kubeconfig: str | None = typer.Option(None, "--kubeconfig", help="Path to kubeconfig"),
    config: Path | None = typer.Option(None, "--config", help="TOML settings file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show kubectl commands."),
    version: bool = typer.Option(
        False,
        "--version",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    del version
    console = RichConsole(verbose=verbose)
    overrides = SettingsOverrides(namespace=namespace, kube_context=kube_context, kubeconfig=kubeconfig)

    code = run_set_status(
        release=release,
        status=status,
        revision=revision,
        from_statuses=from_statuses,
        no_fail=no_fail,
        store_factory=settings_store_factory(console, config, overrides, verbose=verbose),
        console=console,
    )
    if code != int(ErrorCode.OK):
        raise typer.Exit(code=code)


def main() -> None:
    app(prog_name="helm-set-status")
