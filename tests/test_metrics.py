"""Tests for the pure outcome aggregation functions."""

from __future__ import annotations

import pytest

from portprobe.metrics import (
    average_jitter,
    collect_latencies,
    consecutive_jitter,
    fold_outcomes,
    mean_latency,
    round_half_away,
)
from portprobe.models import Connected, Failed, FailureReason, PortResult, TargetPort

HTTP = TargetPort(80, "HTTP", "Web Server")


def _ok(*latencies: float):
    return [Connected(v) for v in latencies]


def _result(success: bool, jitter: float) -> PortResult:
    received = 5 if success else 0
    return PortResult(
        target=HTTP,
        success=success,
        latency_ms=10.0 if success else 0.0,
        jitter_ms=jitter,
        packets_sent=5,
        packets_received=received,
        packets_lost=5 - received,
    )


@pytest.mark.parametrize(
    "value, expected",
    [(11.2, 11.2), (2.25, 2.3), (2.24, 2.2), (0.05, 0.1), (0.0, 0.0), (-2.25, -2.3)],
)
def test_round_half_away_from_zero(value: float, expected: float) -> None:
    assert round_half_away(value) == expected


def test_collect_latencies_skips_failures_and_keeps_order() -> None:
    outcomes = [Connected(5.0), Failed(FailureReason.TIMEOUT), Connected(3.0), Failed(FailureReason.OTHER)]
    assert collect_latencies(outcomes) == [5.0, 3.0]


def test_mean_latency_of_empty_sequence_is_zero() -> None:
    assert mean_latency([]) == 0.0


def test_consecutive_jitter_uses_neighbouring_samples_only() -> None:
    # |12-10|, |11-12|, |13-11|, |10-13| -> 2, 1, 2, 3
    assert consecutive_jitter([10, 12, 11, 13, 10]) == pytest.approx(2.0)


def test_consecutive_jitter_needs_two_samples() -> None:
    assert consecutive_jitter([]) == 0.0
    assert consecutive_jitter([42.0]) == 0.0


def test_fold_controlled_latencies() -> None:
    result = fold_outcomes(HTTP, _ok(10, 12, 11, 13, 10))

    assert result.success is True
    assert result.latency_ms == 11.2
    assert result.jitter_ms == 2.0
    assert (result.packets_sent, result.packets_received, result.packets_lost) == (5, 5, 0)


def test_fold_partial_loss_uses_successful_samples_in_order() -> None:
    outcomes = [
        Connected(20.0),
        Failed(FailureReason.TIMEOUT),
        Connected(26.0),
        Failed(FailureReason.TIMEOUT),
        Connected(21.0),
    ]
    result = fold_outcomes(HTTP, outcomes)

    assert result.packets_received == 3
    assert result.packets_lost == 2
    assert result.success is True
    assert result.latency_ms == round_half_away((20 + 26 + 21) / 3)
    # Jitter bridges the failures: |26-20| and |21-26|
    assert result.jitter_ms == 5.5


def test_fold_all_failed() -> None:
    outcomes = [Failed(FailureReason.REFUSED)] * 5
    result = fold_outcomes(HTTP, outcomes)

    assert result.success is False
    assert result.latency_ms == 0
    assert result.jitter_ms == 0
    assert result.packets_received == 0
    assert result.packets_lost == 5


def test_fold_single_success_has_no_jitter() -> None:
    outcomes = [Failed(FailureReason.TIMEOUT)] * 4 + [Connected(33.33)]
    result = fold_outcomes(HTTP, outcomes)

    assert result.success is True
    assert result.latency_ms == 33.3
    assert result.jitter_ms == 0


def test_average_jitter_ignores_failed_ports() -> None:
    results = [_result(True, 2.0), _result(False, 0.0), _result(True, 3.0)]
    assert average_jitter(results) == 2.5


def test_average_jitter_is_zero_without_successes() -> None:
    assert average_jitter([_result(False, 0.0), _result(False, 0.0)]) == 0.0
    assert average_jitter([]) == 0.0
