# Public surface of the connector core.
from ._types import Record, SaveContext, Snapshot, SyncOutcome, OutcomeStatus
from .events import EventBus
from .mode_router import ModeRouter, Wiring
from .settings import SettingsStore, SyncConfig
from .snapshot_store import SnapshotStore

__all__ = [
    "Record",
    "SaveContext",
    "Snapshot",
    "SyncOutcome",
    "OutcomeStatus",
    "EventBus",
    "ModeRouter",
    "Wiring",
    "SettingsStore",
    "SyncConfig",
    "SnapshotStore",
]
