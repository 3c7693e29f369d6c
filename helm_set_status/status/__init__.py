"""Release status transitions.

- vocabulary: the closed set of statuses
- model: records, requests and outcomes
- errors: the closed union of failure kinds
- store: the persistence contract
- engine: read, check, mutate, write
- policy: validation and the skip-vs-fail policy
"""

from .engine import set_status
from .model import LATEST, Applied, ReleaseRecord, Skipped, TransitionRequest
from .policy import apply_transition
from .store import MemoryReleaseStore, ReleaseStore, StoreError
from .vocabulary import Status, parse_status, render_status

__all__ = [
    "LATEST",
    "Applied",
    "MemoryReleaseStore",
    "ReleaseRecord",
    "ReleaseStore",
    "Skipped",
    "Status",
    "StoreError",
    "TransitionRequest",
    "apply_transition",
    "parse_status",
    "render_status",
    "set_status",
]
