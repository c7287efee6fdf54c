"""Custom exceptions for the Stellar transaction monitor."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional


@dataclass(eq=False)
class TxMonitorError(Exception):
    """Base exception raised by the transaction monitor."""

    message: str
    code: str
    details: Optional[Mapping[str, Any]] = None

    def __post_init__(self) -> None:
        super().__init__(self.message)

    @property
    def tx_hash(self) -> Optional[str]:
        if not self.details:
            return None
        return self.details.get("tx_hash")

    @classmethod
    def validation_error(
        cls, message: str, error_type: str, **details: Any
    ) -> "TxMonitorError":
        return cls(message, "VALIDATION_ERROR", {"type": error_type, **details})

    @classmethod
    def from_http_response(
        cls, url: str, status: int, body: Any, problem_type: Optional[str], detail: Optional[str]
    ) -> "TxMonitorError":
        if problem_type and detail:
            return cls(
                f"Horizon Error {problem_type} ({status}) from {url}: {detail}",
                problem_type.upper().replace("-", "_"),
                {
                    "detail": detail,
                    "problem_type": problem_type,
                    "status": status,
                    "body": body,
                    "url": url,
                },
            )

        return cls(
            f"Unexpected HTTP Error {status} from {url}",
            "HTTP_ERROR",
            {"status": status, "body": body, "url": url},
        )


class TransactionFailed(TxMonitorError):
    """The monitored transaction reached a definite failure state."""

    @classmethod
    def for_cause(cls, tx_hash: str, cause: str) -> "TransactionFailed":
        return cls(
            f"Transaction failed: {cause}",
            "TRANSACTION_FAILED",
            {"tx_hash": tx_hash, "cause": cause},
        )

    @property
    def cause(self) -> str:
        return (self.details or {}).get("cause", "")


class ConfirmationTimeout(TxMonitorError):
    """Monitoring gave up before the transaction reached a terminal state.

    This says nothing about the transaction itself; it may still confirm, so
    callers can start a fresh wait for the same hash.
    """

    @classmethod
    def after(cls, tx_hash: str, elapsed_ms: float, timeout_ms: float) -> "ConfirmationTimeout":
        return cls(
            f"Timeout waiting for confirmation after {round(elapsed_ms / 1000)}s",
            "CONFIRMATION_TIMEOUT",
            {"tx_hash": tx_hash, "elapsed_ms": elapsed_ms, "timeout_ms": timeout_ms},
        )

    @property
    def elapsed_ms(self) -> float:
        return (self.details or {}).get("elapsed_ms", 0)


class Aborted(TxMonitorError):
    """Monitoring was cancelled through :meth:`TransactionMonitor.abort`."""

    @classmethod
    def for_hash(cls, tx_hash: str) -> "Aborted":
        return cls(
            "Transaction monitoring aborted",
            "MONITORING_ABORTED",
            {"tx_hash": tx_hash},
        )


class AlreadyRunning(TxMonitorError):
    """A monitor was started while a previous run was still in progress."""

    @classmethod
    def for_hash(cls, tx_hash: str) -> "AlreadyRunning":
        return cls(
            "Monitor is already running",
            "MONITOR_ALREADY_RUNNING",
            {"tx_hash": tx_hash},
        )
