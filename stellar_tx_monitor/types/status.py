"""Dataclasses describing transaction status as seen by the monitor."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Mapping, Optional


@dataclass(frozen=True, slots=True)
class StatusSnapshot:
    """Point-in-time status for a transaction hash.

    ``succeeded=False`` together with ``pending=False`` and an ``error`` is a
    definite failure. Anything else that has not succeeded is still in flight.
    """

    succeeded: bool
    pending: bool
    error: Optional[str] = None
    extra: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def pending_status(cls, **extra: Any) -> "StatusSnapshot":
        return cls(succeeded=False, pending=True, extra=extra)

    @classmethod
    def success(cls, **extra: Any) -> "StatusSnapshot":
        return cls(succeeded=True, pending=False, extra=extra)

    @classmethod
    def failure(cls, error: str, **extra: Any) -> "StatusSnapshot":
        return cls(succeeded=False, pending=False, error=error, extra=extra)

    @property
    def is_terminal_failure(self) -> bool:
        return not self.succeeded and not self.pending and bool(self.error)


@dataclass(frozen=True, slots=True)
class PollOutcome:
    tx_hash: str
    succeeded: bool
    pending: bool
    explorer_url: str
    elapsed_ms: float
    error: Optional[str] = None
    transient_error: Optional[str] = None
    extra: Mapping[str, Any] = field(default_factory=dict)

    @property
    def failed(self) -> bool:
        return not self.succeeded and not self.pending and bool(self.error)


class MonitorState(str, Enum):
    IDLE = "idle"
    POLLING = "polling"


ProgressCallback = Callable[[PollOutcome], None]

DEFAULT_TIMEOUT_MS = 90_000
DEFAULT_INTERVAL_MS = 3_000


@dataclass(slots=True)
class PollingPolicy:
    """How long and how often to poll, and who to tell about each attempt."""

    timeout_ms: float = DEFAULT_TIMEOUT_MS
    interval_ms: float = DEFAULT_INTERVAL_MS
    on_progress: Optional[ProgressCallback] = None
