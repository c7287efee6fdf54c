"""One-shot waiting for a transaction to confirm."""
from __future__ import annotations

import threading
from typing import Optional, Union

from .clock import SYSTEM_CLOCK, Clock
from .explorer import explorer_url
from .polling import ConfirmationLoop, build_policy
from .status_source import StatusSource
from .types.networks import StellarNetwork
from .types.status import PollingPolicy, PollOutcome, ProgressCallback
from .validation import validate_tx_hash


def wait_for_confirmation(
    tx_hash: str,
    source: StatusSource,
    policy: Optional[PollingPolicy] = None,
    *,
    timeout_ms: Optional[float] = None,
    interval_ms: Optional[float] = None,
    on_progress: Optional[ProgressCallback] = None,
    network: Union[str, StellarNetwork] = StellarNetwork.TESTNET,
    clock: Clock = SYSTEM_CLOCK,
) -> PollOutcome:
    """Block until ``tx_hash`` succeeds, definitely fails or the timeout elapses.

    Returns the final :class:`PollOutcome` on success. Raises
    :class:`TransactionFailed` on a definite failure and
    :class:`ConfirmationTimeout` when the deadline passes first. Errors raised
    by ``source`` are retried until the deadline and never surface here.
    """

    tx_hash = validate_tx_hash(tx_hash)
    loop = ConfirmationLoop(
        tx_hash=tx_hash,
        source=source,
        policy=build_policy(
            policy, timeout_ms=timeout_ms, interval_ms=interval_ms, on_progress=on_progress
        ),
        explorer_url=explorer_url(tx_hash, network),
        clock=clock,
        # Nothing can cancel a one-shot wait; the event only backs the sleep.
        cancelled=threading.Event(),
    )
    return loop.run()
