"""Caller-facing entry point: validation, store construction and skip policy."""

from __future__ import annotations

from collections.abc import Sequence

from helm_set_status.core.result import Err, Ok, Result
from helm_set_status.status.engine import Clock, set_status, utc_now
from helm_set_status.status.errors import (
    ConfigurationUnavailable,
    PreconditionFailed,
    TransitionError,
    error_message,
)
from helm_set_status.status.model import (
    Skipped,
    TransitionOutcome,
    TransitionRequest,
    revision_selector,
)
from helm_set_status.status.store import StoreFactory
from helm_set_status.status.vocabulary import Status, parse_status

__all__ = ["apply_transition", "build_request", "classify"]


def build_request(
    release_name: str,
    target_status: str,
    revision: int = 0,
    allowed_from: Sequence[str] = (),
    *,
    skip_on_precondition_failure: bool = False,
) -> Result[TransitionRequest, TransitionError]:
    """Validate raw input without touching any store."""
    target = parse_status(target_status)
    if isinstance(target, Err):
        return target

    allowed: list[Status] = []
    for text in allowed_from:
        parsed = parse_status(text, source="from")
        if isinstance(parsed, Err):
            return parsed
        allowed.append(parsed.value)

    selector = revision_selector(revision)
    if isinstance(selector, Err):
        return selector

    return Ok(
        TransitionRequest(
            release_name=release_name,
            target_status=target.value,
            revision=selector.value,
            allowed_from=tuple(allowed),
            skip_on_precondition_failure=skip_on_precondition_failure,
        )
    )


def classify(
    request: TransitionRequest, result: Result[TransitionOutcome, TransitionError]
) -> Result[TransitionOutcome, TransitionError]:
    """Turn a precondition failure into ``Skipped`` when the request allows it."""
    match result:
        case Err(PreconditionFailed() as failed) if request.skip_on_precondition_failure:
            return Ok(
                Skipped(
                    release_name=request.release_name,
                    current_status=failed.current_status,
                    allowed=failed.allowed,
                    reason=error_message(failed),
                )
            )
        case _:
            return result


def apply_transition(
    release_name: str,
    target_status: str,
    revision: int = 0,
    allowed_from: Sequence[str] = (),
    *,
    skip_on_precondition_failure: bool = False,
    store_factory: StoreFactory,
    clock: Clock = utc_now,
) -> Result[TransitionOutcome, TransitionError]:
    """Validate, connect and apply a status change.

    Invalid statuses and negative revisions are rejected before
    ``store_factory`` is called.

    Args:
        release_name: Name of the release.
        target_status: Target status string.
        revision: 0 for the latest revision, otherwise an explicit revision.
        allowed_from: Status strings the release must currently have.
        skip_on_precondition_failure: Report ``Skipped`` instead of failing
            when the current status is not in ``allowed_from``.
        store_factory: Builds the store connection.
        clock: Source of the transition timestamp.

    Returns:
        Ok(Applied) or Ok(Skipped), otherwise Err with the failure kind.
    """
    built = build_request(
        release_name,
        target_status,
        revision,
        allowed_from,
        skip_on_precondition_failure=skip_on_precondition_failure,
    )
    if isinstance(built, Err):
        return built
    request = built.value

    store = store_factory()
    if isinstance(store, Err):
        return Err(ConfigurationUnavailable(cause=store.error.message))

    applied = set_status(
        store.value,
        request.release_name,
        request.target_status,
        request.revision,
        request.allowed_from,
        clock=clock,
    )
    return classify(request, applied)
