"""Example waiting for a testnet transaction using the monitor."""
import sys

from stellar_tx_monitor import ConfirmationTimeout, TransactionFailed, TxMonitor


def main() -> None:
    tx_hash = sys.argv[1]
    client = TxMonitor()

    print("Explorer:", client.explorer_url(tx_hash))
    try:
        outcome = client.wait(
            tx_hash,
            timeout_ms=60_000,
            on_progress=lambda status: print("Pending:", status.pending, "after", status.elapsed_ms, "ms"),
        )
    except TransactionFailed as exc:
        print("Failed:", exc.cause)
    except ConfirmationTimeout:
        print("Still pending, try again later")
    else:
        print("Confirmed in ledger", outcome.extra.get("ledger"))


if __name__ == "__main__":  # pragma: no cover - manual usage
    main()
