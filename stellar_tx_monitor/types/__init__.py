"""Typed structures shared by the waiter and the monitor."""
from .networks import HORIZON_URLS, StellarNetwork
from .status import (
    DEFAULT_INTERVAL_MS,
    DEFAULT_TIMEOUT_MS,
    MonitorState,
    PollingPolicy,
    PollOutcome,
    ProgressCallback,
    StatusSnapshot,
)

__all__ = [
    "DEFAULT_INTERVAL_MS",
    "DEFAULT_TIMEOUT_MS",
    "HORIZON_URLS",
    "MonitorState",
    "PollingPolicy",
    "PollOutcome",
    "ProgressCallback",
    "StatusSnapshot",
    "StellarNetwork",
]
