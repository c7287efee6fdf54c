"""Polling loop shared by :func:`wait_for_confirmation` and :class:`TransactionMonitor`."""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, replace
from typing import Optional

from .clock import Clock
from .errors import Aborted, ConfirmationTimeout, TransactionFailed, TxMonitorError
from .status_source import StatusSource
from .types.status import PollingPolicy, PollOutcome, ProgressCallback, StatusSnapshot
from .validation import validate_duration_ms

logger = logging.getLogger(__name__)


def build_policy(
    policy: Optional[PollingPolicy] = None,
    *,
    timeout_ms: Optional[float] = None,
    interval_ms: Optional[float] = None,
    on_progress: Optional[ProgressCallback] = None,
) -> PollingPolicy:
    """Merge keyword overrides into ``policy`` and validate the result."""

    base = policy or PollingPolicy()
    overrides = {
        key: value
        for key, value in (
            ("timeout_ms", timeout_ms),
            ("interval_ms", interval_ms),
            ("on_progress", on_progress),
        )
        if value is not None
    }
    resolved = replace(base, **overrides) if overrides else base

    validate_duration_ms(resolved.timeout_ms, "timeout_ms")
    validate_duration_ms(resolved.interval_ms, "interval_ms")
    if resolved.on_progress is not None and not callable(resolved.on_progress):
        raise TxMonitorError.validation_error(
            "Invalid on_progress: must be callable",
            "INVALID_CALLBACK",
            value=repr(resolved.on_progress),
        )
    return resolved


@dataclass(slots=True)
class ConfirmationLoop:
    """One run of the poll/classify/sleep cycle for a single hash.

    ``cancelled`` is checked before every query, after every query and while
    sleeping between attempts. Once it is observed the loop raises
    :class:`Aborted` without issuing further queries or progress callbacks.
    """

    tx_hash: str
    source: StatusSource
    policy: PollingPolicy
    explorer_url: str
    clock: Clock
    cancelled: threading.Event

    def run(self) -> PollOutcome:
        timeout_ms = self.policy.timeout_ms
        interval_s = self.policy.interval_ms / 1000
        start = self.clock.now_ms()
        deadline = start + timeout_ms
        attempts = 0

        logger.info("Monitoring transaction %s (%s)", self.tx_hash, self.explorer_url)

        while self.clock.now_ms() < deadline:
            self._check_cancelled()

            attempts += 1
            outcome = self._query(start)

            self._check_cancelled()
            self._notify(outcome)

            if outcome.succeeded:
                logger.info(
                    "Transaction %s confirmed in %.0fms after %d queries",
                    self.tx_hash,
                    outcome.elapsed_ms,
                    attempts,
                )
                return outcome

            if outcome.failed:
                logger.info("Transaction %s failed: %s", self.tx_hash, outcome.error)
                raise TransactionFailed.for_cause(self.tx_hash, outcome.error or "")

            logger.debug(
                "Transaction %s pending (%ds)", self.tx_hash, round(outcome.elapsed_ms / 1000)
            )

            remaining_ms = deadline - self.clock.now_ms()
            if remaining_ms <= 0:
                break
            if self.clock.sleep(self.cancelled, min(interval_s, remaining_ms / 1000)):
                self._check_cancelled()

        elapsed_ms = self.clock.now_ms() - start
        logger.warning(
            "Gave up waiting for transaction %s after %.0fms (%d queries)",
            self.tx_hash,
            elapsed_ms,
            attempts,
        )
        raise ConfirmationTimeout.after(self.tx_hash, elapsed_ms, timeout_ms)

    def _query(self, start: float) -> PollOutcome:
        transient_error: Optional[str] = None
        try:
            snapshot = self.source.get_status(self.tx_hash)
        except Exception as exc:
            logger.warning(
                "Error checking status of transaction %s, retrying: %s", self.tx_hash, exc
            )
            snapshot = StatusSnapshot.pending_status()
            transient_error = str(exc) or type(exc).__name__

        return PollOutcome(
            tx_hash=self.tx_hash,
            succeeded=snapshot.succeeded,
            # Neither succeeded nor a definite failure means still in flight.
            pending=not (snapshot.succeeded or snapshot.is_terminal_failure),
            explorer_url=self.explorer_url,
            elapsed_ms=self.clock.now_ms() - start,
            error=snapshot.error,
            transient_error=transient_error,
            extra=dict(snapshot.extra),
        )

    def _notify(self, outcome: PollOutcome) -> None:
        if self.policy.on_progress is not None:
            self.policy.on_progress(outcome)

    def _check_cancelled(self) -> None:
        if self.cancelled.is_set():
            logger.info("Aborting transaction monitoring: %s", self.tx_hash)
            raise Aborted.for_hash(self.tx_hash)
