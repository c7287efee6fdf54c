"""Abortable, reusable transaction poller."""
from __future__ import annotations

import logging
import threading
from typing import Optional, Union

from .clock import SYSTEM_CLOCK, Clock
from .errors import AlreadyRunning
from .explorer import explorer_url
from .polling import ConfirmationLoop, build_policy
from .status_source import StatusSource
from .types.networks import StellarNetwork
from .types.status import MonitorState, PollingPolicy, PollOutcome
from .validation import validate_network, validate_tx_hash

logger = logging.getLogger(__name__)


class TransactionMonitor:
    """Polls one transaction at a time and can be cancelled from another thread.

    ``start`` blocks the calling thread until the run ends. Call ``abort``
    from elsewhere (another thread, a signal handler, the progress callback)
    to make the running ``start`` raise :class:`Aborted`. A monitor can be
    reused for another hash once it is idle again.
    """

    def __init__(
        self,
        source: StatusSource,
        policy: Optional[PollingPolicy] = None,
        *,
        network: Union[str, StellarNetwork] = StellarNetwork.TESTNET,
        clock: Clock = SYSTEM_CLOCK,
    ) -> None:
        self._source = source
        self._policy = build_policy(policy)
        self._network = validate_network(network)
        self._clock = clock
        self._lock = threading.Lock()
        self._state = MonitorState.IDLE
        self._cancelled: Optional[threading.Event] = None
        self._tx_hash: Optional[str] = None

    @property
    def polling(self) -> bool:
        return self._state is MonitorState.POLLING

    @property
    def state(self) -> MonitorState:
        return self._state

    @property
    def tx_hash(self) -> Optional[str]:
        """Hash of the run in progress, if any."""

        return self._tx_hash

    def start(self, tx_hash: str) -> PollOutcome:
        with self._lock:
            if self._state is MonitorState.POLLING:
                raise AlreadyRunning.for_hash(tx_hash)
            tx_hash = validate_tx_hash(tx_hash)
            url = explorer_url(tx_hash, self._network)
            cancelled = threading.Event()
            self._cancelled = cancelled
            self._tx_hash = tx_hash
            self._state = MonitorState.POLLING

        try:
            return ConfirmationLoop(
                tx_hash=tx_hash,
                source=self._source,
                policy=self._policy,
                explorer_url=url,
                clock=self._clock,
                cancelled=cancelled,
            ).run()
        finally:
            with self._lock:
                self._cancelled = None
                self._tx_hash = None
                self._state = MonitorState.IDLE

    poll = start

    def abort(self) -> None:
        with self._lock:
            cancelled = self._cancelled
            if cancelled is None or cancelled.is_set():
                return
            logger.info("Abort requested for transaction %s", self._tx_hash)
            cancelled.set()
