"""Public entry point for the Stellar transaction monitor."""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .clock import SYSTEM_CLOCK, Clock
from .errors import TxMonitorError
from .explorer import explorer_url
from .http import HttpClient, HttpRequestor
from .monitor import TransactionMonitor
from .status_source import HorizonStatusSource, StatusSource
from .tx_waiter import wait_for_confirmation
from .types.networks import StellarNetwork
from .types.status import (
    DEFAULT_INTERVAL_MS,
    DEFAULT_TIMEOUT_MS,
    PollingPolicy,
    PollOutcome,
    ProgressCallback,
)
from .validation import validate_network


def _env_float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise TxMonitorError.validation_error(
            f"Invalid {name}: expected a number of milliseconds",
            "INVALID_ENVIRONMENT",
            name=name,
            value=raw,
        ) from None


@dataclass(slots=True)
class TxMonitorOptions:
    network: str = StellarNetwork.TESTNET.value
    horizon_url: Optional[str] = None
    timeout_ms: float = DEFAULT_TIMEOUT_MS
    interval_ms: float = DEFAULT_INTERVAL_MS
    http_requestor: Optional[HttpRequestor] = None

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "TxMonitorOptions":
        env = os.environ if env is None else env
        return cls(
            network=env.get("STELLAR_NETWORK") or StellarNetwork.TESTNET.value,
            horizon_url=env.get("HORIZON_URL") or None,
            timeout_ms=_env_float(env, "TX_MONITOR_TIMEOUT_MS", DEFAULT_TIMEOUT_MS),
            interval_ms=_env_float(env, "TX_MONITOR_INTERVAL_MS", DEFAULT_INTERVAL_MS),
        )


class TxMonitor:
    """Wires a network, a Horizon status source and default polling settings."""

    def __init__(
        self,
        options: Optional[TxMonitorOptions] = None,
        *,
        status_source: Optional[StatusSource] = None,
        clock: Clock = SYSTEM_CLOCK,
    ) -> None:
        self.options = options or TxMonitorOptions()
        self.network = validate_network(self.options.network)
        self.clock = clock

        self._http_client = HttpClient(self.options.http_requestor)
        self.status_source: StatusSource = status_source or HorizonStatusSource(
            self.horizon_url, self._http_client
        )

    @property
    def horizon_url(self) -> str:
        return self.options.horizon_url or self.network.horizon_url

    def explorer_url(self, tx_hash: str) -> str:
        return explorer_url(tx_hash, self.network)

    def policy(
        self,
        *,
        timeout_ms: Optional[float] = None,
        interval_ms: Optional[float] = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> PollingPolicy:
        return PollingPolicy(
            timeout_ms=self.options.timeout_ms if timeout_ms is None else timeout_ms,
            interval_ms=self.options.interval_ms if interval_ms is None else interval_ms,
            on_progress=on_progress,
        )

    def wait(
        self,
        tx_hash: str,
        *,
        timeout_ms: Optional[float] = None,
        interval_ms: Optional[float] = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> PollOutcome:
        return wait_for_confirmation(
            tx_hash,
            self.status_source,
            self.policy(timeout_ms=timeout_ms, interval_ms=interval_ms, on_progress=on_progress),
            network=self.network,
            clock=self.clock,
        )

    def monitor(
        self,
        *,
        timeout_ms: Optional[float] = None,
        interval_ms: Optional[float] = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> TransactionMonitor:
        return TransactionMonitor(
            self.status_source,
            self.policy(timeout_ms=timeout_ms, interval_ms=interval_ms, on_progress=on_progress),
            network=self.network,
            clock=self.clock,
        )
