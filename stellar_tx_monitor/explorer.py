"""Explorer links for monitored transactions."""
from __future__ import annotations

from typing import Union

from .types.networks import StellarNetwork
from .validation import validate_network, validate_tx_hash

STELLAR_EXPERT_BASE_URL = "https://stellar.expert/explorer"


def explorer_url(tx_hash: str, network: Union[str, StellarNetwork] = StellarNetwork.TESTNET) -> str:
    """Return the Stellar Expert page for ``tx_hash`` on ``network``."""

    resolved = validate_network(network)
    return f"{STELLAR_EXPERT_BASE_URL}/{resolved.explorer_segment}/tx/{validate_tx_hash(tx_hash)}"
