#!/usr/bin/env python3
"""Watch a Stellar transaction until it confirms, fails or times out.

Progress is printed one line per poll. The exit status tells the caller how
monitoring ended: 0 confirmed, 1 failed, 2 timed out, 130 interrupted.
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import signal
import sys
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import asdict
from typing import Any, Dict, List, Optional

from stellar_tx_monitor import (
    Aborted,
    ConfirmationTimeout,
    PollOutcome,
    TransactionFailed,
    TxMonitor,
    TxMonitorOptions,
)

EXIT_CONFIRMED = 0
EXIT_FAILED = 1
EXIT_TIMEOUT = 2
EXIT_ABORTED = 130


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("tx_hash", help="Hash of the transaction to watch")
    parser.add_argument("--network", help="mainnet or testnet (defaults to $STELLAR_NETWORK)")
    parser.add_argument("--horizon-url", help="Override the Horizon server URL")
    parser.add_argument("--timeout-ms", type=float, help="Give up after this many milliseconds")
    parser.add_argument("--interval-ms", type=float, help="Delay between polls in milliseconds")
    parser.add_argument("--json-output", help="Write the poll history and result to this file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def _load_options(args: argparse.Namespace) -> TxMonitorOptions:
    options = TxMonitorOptions.from_env()
    if args.network:
        options.network = args.network
    if args.horizon_url:
        options.horizon_url = args.horizon_url
    if args.timeout_ms is not None:
        options.timeout_ms = args.timeout_ms
    if args.interval_ms is not None:
        options.interval_ms = args.interval_ms
    return options


def _describe(outcome: PollOutcome) -> str:
    seconds = outcome.elapsed_ms / 1000
    if outcome.succeeded:
        return f"[{seconds:6.1f}s] confirmed"
    if outcome.failed:
        return f"[{seconds:6.1f}s] failed: {outcome.error}"
    if outcome.transient_error:
        return f"[{seconds:6.1f}s] pending (query error: {outcome.transient_error})"
    return f"[{seconds:6.1f}s] pending"


def main(argv: Optional[List[str]] = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    client = TxMonitor(_load_options(args))
    history: List[Dict[str, Any]] = []

    def on_progress(outcome: PollOutcome) -> None:
        history.append(asdict(outcome))
        print(_describe(outcome), flush=True)

    monitor = client.monitor(on_progress=on_progress)
    print(f"Watching {args.tx_hash}")
    print(f"Explorer: {client.explorer_url(args.tx_hash)}", flush=True)

    result: Dict[str, Any] = {"tx_hash": args.tx_hash, "network": client.network.value}
    exit_code = EXIT_CONFIRMED

    previous_handler = None
    if threading.current_thread() is threading.main_thread():
        previous_handler = signal.signal(signal.SIGINT, lambda signum, frame: monitor.abort())

    with ThreadPoolExecutor(max_workers=1) as executor:
        future = executor.submit(monitor.start, args.tx_hash)
        try:
            outcome = future.result()
        except TransactionFailed as exc:
            print(f"Transaction failed: {exc.cause}", file=sys.stderr)
            result.update(status="failed", error=exc.cause)
            exit_code = EXIT_FAILED
        except ConfirmationTimeout as exc:
            print(f"{exc.message}; the transaction may still confirm", file=sys.stderr)
            result.update(status="timeout", elapsed_ms=exc.elapsed_ms)
            exit_code = EXIT_TIMEOUT
        except Aborted:
            print("Monitoring aborted", file=sys.stderr)
            result.update(status="aborted")
            exit_code = EXIT_ABORTED
        else:
            print(f"Confirmed in {outcome.elapsed_ms / 1000:.1f}s")
            result.update(status="confirmed", ledger=outcome.extra.get("ledger"))
        finally:
            if previous_handler is not None:
                signal.signal(signal.SIGINT, previous_handler)

    if args.json_output:
        result["polls"] = history
        os.makedirs(os.path.dirname(os.path.abspath(args.json_output)), exist_ok=True)
        with open(args.json_output, "w", encoding="utf-8") as handle:
            json.dump(result, handle, indent=2)

    return exit_code


if __name__ == "__main__":  # pragma: no cover - script entry point
    sys.exit(main())
