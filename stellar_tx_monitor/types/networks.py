"""Constants that describe supported Stellar networks."""
from __future__ import annotations

from enum import Enum


class StellarNetwork(str, Enum):
    """Networks the monitor knows how to query and link to."""

    MAINNET = "mainnet"
    TESTNET = "testnet"

    @property
    def horizon_url(self) -> str:
        return HORIZON_URLS[self]

    @property
    def explorer_segment(self) -> str:
        return "public" if self is StellarNetwork.MAINNET else "testnet"


HORIZON_URLS = {
    StellarNetwork.MAINNET: "https://horizon.stellar.org",
    StellarNetwork.TESTNET: "https://horizon-testnet.stellar.org",
}

# Stellar Expert calls the main network "public".
NETWORK_ALIASES = {
    "mainnet": StellarNetwork.MAINNET,
    "public": StellarNetwork.MAINNET,
    "pubnet": StellarNetwork.MAINNET,
    "testnet": StellarNetwork.TESTNET,
}
