"""Status sources that report where a transaction is in its lifecycle."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Protocol

from .errors import TxMonitorError
from .http import HttpClient
from .types.status import StatusSnapshot


class StatusSource(Protocol):
    def get_status(self, tx_hash: str) -> StatusSnapshot:
        """Return the current status of ``tx_hash``.

        Raising signals a transport problem; the monitor treats every
        exception from here as transient and polls again.
        """
        ...


def _to_int(value: Any) -> int:
    try:
        return int(str(value))
    except (TypeError, ValueError):
        return 0


@dataclass(slots=True)
class HorizonStatusSource:
    """Reads transaction results from a Horizon server."""

    horizon_url: str
    http_client: HttpClient

    def __post_init__(self) -> None:
        self.horizon_url = self.horizon_url.rstrip("/")

    def get_status(self, tx_hash: str) -> StatusSnapshot:
        try:
            payload = self.http_client.send_get_request(
                self.horizon_url, f"/transactions/{tx_hash}"
            )
        except TxMonitorError as exc:
            # Horizon only indexes a transaction once it lands in a ledger.
            if exc.details and exc.details.get("status") == 404:
                return StatusSnapshot.pending_status()
            raise

        if not isinstance(payload, Mapping) or not isinstance(payload.get("successful"), bool):
            raise TxMonitorError(
                "Invalid response from Horizon",
                "INVALID_RESPONSE",
                {"tx_hash": tx_hash, "payload": payload},
            )

        return self._parse_transaction(payload)

    @staticmethod
    def _parse_transaction(payload: Mapping[str, Any]) -> StatusSnapshot:
        ledger = _to_int(payload.get("ledger_attr", payload.get("ledger")))
        extra = {"ledger": ledger}
        if payload.get("result_xdr"):
            extra["result_xdr"] = payload["result_xdr"]

        if payload["successful"]:
            return StatusSnapshot.success(**extra)

        result_codes = _result_codes(payload)
        if result_codes:
            extra["result_codes"] = result_codes
        return StatusSnapshot.failure(_describe_result_codes(result_codes), **extra)


def _result_codes(payload: Mapping[str, Any]) -> Mapping[str, Any]:
    extras = payload.get("extras")
    if not isinstance(extras, Mapping):
        return {}
    codes = extras.get("result_codes")
    return codes if isinstance(codes, Mapping) else {}


def _describe_result_codes(result_codes: Mapping[str, Any]) -> str:
    transaction_code = result_codes.get("transaction")
    if not transaction_code:
        return "Transaction failed"

    operations = result_codes.get("operations") or []
    failed_ops = [str(code) for code in operations if code != "op_success"]
    if failed_ops:
        return f"{transaction_code}: {', '.join(failed_ops)}"
    return str(transaction_code)
