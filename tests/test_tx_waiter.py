import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from stellar_tx_monitor import (
    ConfirmationTimeout,
    PollingPolicy,
    PollOutcome,
    StatusSnapshot,
    TransactionFailed,
    TxMonitorError,
    wait_for_confirmation,
)
from stellar_tx_monitor.clock import SystemClock

TX_HASH = "test-tx-hash-123456789abcdef"
EXPLORER_URL = f"https://stellar.expert/explorer/testnet/tx/{TX_HASH}"


class FakeClock:
    def __init__(self):
        self.now = 0.0
        self.sleeps = []

    def now_ms(self):
        return self.now

    def sleep(self, cancelled, seconds):
        self.sleeps.append(seconds)
        self.now += seconds * 1000
        return cancelled.is_set()


class ScriptedSource:
    """Replays responses in order, repeating the last one forever."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def get_status(self, tx_hash):
        self.calls.append(tx_hash)
        response = self.responses[min(len(self.calls), len(self.responses)) - 1]
        if isinstance(response, Exception):
            raise response
        return response


def test_resolves_when_transaction_succeeds_on_third_query():
    clock = FakeClock()
    progress = []
    source = ScriptedSource(
        StatusSnapshot.pending_status(),
        StatusSnapshot.pending_status(),
        StatusSnapshot.success(ledger=12345),
    )

    result = wait_for_confirmation(
        TX_HASH,
        source,
        PollingPolicy(timeout_ms=10_000, interval_ms=1_000, on_progress=progress.append),
        clock=clock,
    )

    assert result == PollOutcome(
        tx_hash=TX_HASH,
        succeeded=True,
        pending=False,
        explorer_url=EXPLORER_URL,
        elapsed_ms=2_000,
        extra={"ledger": 12345},
    )
    assert len(source.calls) == 3
    assert len(progress) == 3
    assert [outcome.succeeded for outcome in progress] == [False, False, True]
    assert clock.sleeps == [1.0, 1.0]


def test_progress_is_reported_in_poll_order():
    clock = FakeClock()
    progress = []
    source = ScriptedSource(
        StatusSnapshot.pending_status(),
        RuntimeError("Network error"),
        StatusSnapshot.pending_status(),
        StatusSnapshot.success(),
    )

    wait_for_confirmation(TX_HASH, source, on_progress=progress.append, interval_ms=500, clock=clock)

    assert [outcome.elapsed_ms for outcome in progress] == [0, 500, 1_000, 1_500]
    assert progress[0] == PollOutcome(
        tx_hash=TX_HASH,
        succeeded=False,
        pending=True,
        explorer_url=EXPLORER_URL,
        elapsed_ms=0,
    )


def test_times_out_when_always_pending():
    clock = FakeClock()
    progress = []
    source = ScriptedSource(StatusSnapshot.pending_status())

    with pytest.raises(ConfirmationTimeout) as excinfo:
        wait_for_confirmation(
            TX_HASH,
            source,
            timeout_ms=5_000,
            interval_ms=1_000,
            on_progress=progress.append,
            clock=clock,
        )

    assert len(source.calls) == 5
    assert len(progress) == 5
    assert excinfo.value.code == "CONFIRMATION_TIMEOUT"
    assert excinfo.value.elapsed_ms == 5_000
    assert excinfo.value.tx_hash == TX_HASH
    assert "Timeout waiting for confirmation after 5s" in str(excinfo.value)


def test_definite_failure_rejects_after_one_query():
    clock = FakeClock()
    progress = []
    source = ScriptedSource(StatusSnapshot.failure("insufficient funds"))

    with pytest.raises(TransactionFailed) as excinfo:
        wait_for_confirmation(
            TX_HASH, source, timeout_ms=10_000, interval_ms=1_000, on_progress=progress.append, clock=clock
        )

    assert excinfo.value.cause == "insufficient funds"
    assert str(excinfo.value) == "Transaction failed: insufficient funds"
    assert len(source.calls) == 1
    assert clock.sleeps == []
    assert len(progress) == 1
    assert progress[0].failed
    assert progress[0].error == "insufficient funds"


def test_definite_failure_wins_over_earlier_transient_errors():
    source = ScriptedSource(
        ConnectionError("connection reset"),
        TimeoutError("read timed out"),
        StatusSnapshot.failure("tx_bad_seq"),
    )

    with pytest.raises(TransactionFailed) as excinfo:
        wait_for_confirmation(TX_HASH, source, clock=FakeClock())

    assert excinfo.value.cause == "tx_bad_seq"
    assert len(source.calls) == 3


def test_transient_errors_keep_polling():
    progress = []
    source = ScriptedSource(RuntimeError("Network error"), StatusSnapshot.success())

    result = wait_for_confirmation(
        TX_HASH, source, timeout_ms=10_000, interval_ms=1_000, on_progress=progress.append, clock=FakeClock()
    )

    assert result.succeeded
    assert len(source.calls) == 2
    assert progress[0].pending
    assert progress[0].transient_error == "Network error"


def test_error_message_mentioning_failed_is_still_transient():
    source = ScriptedSource(RuntimeError("request failed with status 503"), StatusSnapshot.success())

    result = wait_for_confirmation(TX_HASH, source, clock=FakeClock())

    assert result.succeeded
    assert len(source.calls) == 2


def test_not_pending_without_error_is_treated_as_pending():
    progress = []
    source = ScriptedSource(
        StatusSnapshot(succeeded=False, pending=False),
        StatusSnapshot.success(),
    )

    result = wait_for_confirmation(TX_HASH, source, on_progress=progress.append, clock=FakeClock())

    assert result.succeeded
    assert progress[0].pending


def test_uses_default_timeout_and_interval():
    clock = FakeClock()
    source = ScriptedSource(StatusSnapshot.pending_status())

    with pytest.raises(ConfirmationTimeout):
        wait_for_confirmation(TX_HASH, source, clock=clock)

    assert len(source.calls) == 30
    assert clock.now == 90_000


def test_short_timeout_does_not_oversleep():
    clock = FakeClock()
    source = ScriptedSource(StatusSnapshot.pending_status())

    with pytest.raises(ConfirmationTimeout):
        wait_for_confirmation(TX_HASH, source, timeout_ms=100, interval_ms=1_000, clock=clock)

    assert len(source.calls) == 1
    assert clock.sleeps == [pytest.approx(0.1)]


def test_immediate_success_with_real_clock():
    progress = []
    source = ScriptedSource(StatusSnapshot.success())

    result = wait_for_confirmation(TX_HASH, source, on_progress=progress.append, clock=SystemClock())

    assert result.succeeded
    assert len(source.calls) == 1
    assert 0 <= progress[0].elapsed_ms < 1_000


def test_mainnet_outcomes_link_to_public_explorer():
    source = ScriptedSource(StatusSnapshot.success())

    result = wait_for_confirmation(TX_HASH, source, network="mainnet", clock=FakeClock())

    assert result.explorer_url == f"https://stellar.expert/explorer/public/tx/{TX_HASH}"


def test_progress_callback_errors_propagate():
    def explode(outcome):
        raise RuntimeError("render failed")

    source = ScriptedSource(StatusSnapshot.pending_status())

    with pytest.raises(RuntimeError, match="render failed"):
        wait_for_confirmation(TX_HASH, source, on_progress=explode, clock=FakeClock())

    assert len(source.calls) == 1


@pytest.mark.parametrize(
    "kwargs",
    [
        {"timeout_ms": 0},
        {"interval_ms": -5},
        {"timeout_ms": float("inf")},
        {"on_progress": "not callable"},
    ],
)
def test_invalid_policy_is_rejected(kwargs):
    source = ScriptedSource(StatusSnapshot.success())

    with pytest.raises(TxMonitorError) as excinfo:
        wait_for_confirmation(TX_HASH, source, clock=FakeClock(), **kwargs)

    assert excinfo.value.code == "VALIDATION_ERROR"
    assert source.calls == []


def test_blank_hash_is_rejected():
    with pytest.raises(TxMonitorError):
        wait_for_confirmation("   ", ScriptedSource(StatusSnapshot.success()), clock=FakeClock())


def test_independent_waits_run_concurrently():
    barrier = threading.Barrier(2, timeout=5)

    class MeetingSource(ScriptedSource):
        def get_status(self, tx_hash):
            if not self.calls:
                barrier.wait()
            return super().get_status(tx_hash)

    first = MeetingSource(StatusSnapshot.pending_status(), StatusSnapshot.success(ledger=1))
    second = MeetingSource(StatusSnapshot.failure("tx_bad_seq"))
    first_progress, second_progress = [], []

    with ThreadPoolExecutor(max_workers=2) as executor:
        confirmed = executor.submit(
            wait_for_confirmation, "hash-one", first, on_progress=first_progress.append, clock=FakeClock()
        )
        failed = executor.submit(
            wait_for_confirmation, "hash-two", second, on_progress=second_progress.append, clock=FakeClock()
        )

        assert confirmed.result(timeout=5).extra == {"ledger": 1}
        with pytest.raises(TransactionFailed):
            failed.result(timeout=5)

    assert first.calls == ["hash-one", "hash-one"]
    assert second.calls == ["hash-two"]
    assert [outcome.tx_hash for outcome in first_progress] == ["hash-one", "hash-one"]
    assert [outcome.tx_hash for outcome in second_progress] == ["hash-two"]
