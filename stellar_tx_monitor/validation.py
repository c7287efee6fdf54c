"""Input validation helpers."""
from __future__ import annotations

import math
from typing import Any, Union

from .errors import TxMonitorError
from .types.networks import NETWORK_ALIASES, StellarNetwork


def validate_tx_hash(tx_hash: Any) -> str:
    if not isinstance(tx_hash, str):
        raise TxMonitorError.validation_error(
            "Invalid transaction hash: must be a string",
            "INVALID_TX_HASH",
            value=tx_hash,
        )

    tx_hash = tx_hash.strip()
    if not tx_hash:
        raise TxMonitorError.validation_error(
            "Invalid transaction hash: must be a non-empty string",
            "INVALID_TX_HASH",
            value=tx_hash,
        )

    return tx_hash


def validate_duration_ms(value: Any, parameter_name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TxMonitorError.validation_error(
            f"Invalid {parameter_name}: must be a number of milliseconds",
            "INVALID_DURATION",
            parameter_name=parameter_name,
            value=value,
        )
    if not math.isfinite(value):
        raise TxMonitorError.validation_error(
            f"Invalid {parameter_name}: must be a finite number",
            "INVALID_DURATION",
            parameter_name=parameter_name,
            value=str(value),
            reason="not_finite",
        )
    if value <= 0:
        raise TxMonitorError.validation_error(
            f"Invalid {parameter_name}: must be positive",
            "INVALID_DURATION",
            parameter_name=parameter_name,
            value=value,
            reason="not_positive",
        )
    return value


def validate_network(network: Union[str, StellarNetwork]) -> StellarNetwork:
    if isinstance(network, StellarNetwork):
        return network

    key = network.strip().lower() if isinstance(network, str) else None
    try:
        return NETWORK_ALIASES[key]  # type: ignore[index]
    except KeyError:
        raise TxMonitorError.validation_error(
            f"Invalid network: {network!r} is not a supported Stellar network",
            "INVALID_NETWORK",
            value=network,
            supported=sorted(NETWORK_ALIASES),
        ) from None
