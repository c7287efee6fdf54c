"""Confirmation monitoring for Stellar transactions."""
from .client import TxMonitor, TxMonitorOptions
from .clock import Clock, SystemClock
from .errors import (
    Aborted,
    AlreadyRunning,
    ConfirmationTimeout,
    TransactionFailed,
    TxMonitorError,
)
from .explorer import explorer_url
from .http import HttpClient
from .monitor import TransactionMonitor
from .status_source import HorizonStatusSource, StatusSource
from .tx_waiter import wait_for_confirmation
from .types import (
    MonitorState,
    PollingPolicy,
    PollOutcome,
    StatusSnapshot,
    StellarNetwork,
)

__all__ = [
    "Aborted",
    "AlreadyRunning",
    "Clock",
    "ConfirmationTimeout",
    "HorizonStatusSource",
    "HttpClient",
    "MonitorState",
    "PollingPolicy",
    "PollOutcome",
    "StatusSnapshot",
    "StatusSource",
    "StellarNetwork",
    "SystemClock",
    "TransactionFailed",
    "TransactionMonitor",
    "TxMonitor",
    "TxMonitorError",
    "TxMonitorOptions",
    "explorer_url",
    "wait_for_confirmation",
]
