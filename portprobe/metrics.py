"""
Pure aggregation of connection attempt outcomes.

Nothing in here touches the network or the clock, so every function can be
exercised with hand-written outcome sequences.
"""
from __future__ import annotations
import math
from typing import Iterable, List, Sequence

from .models import AttemptOutcome, Connected, PortResult, TargetPort

def round_half_away(value: float, digits: int = 1) -> float:
    """Rounds to `digits` decimals, sending .5 away from zero (2.25 -> 2.3)."""
    scale = 10 ** digits
    scaled = abs(value) * scale
    rounded = math.floor(scaled + 0.5) / scale
    return math.copysign(rounded, value) if value else 0.0

def collect_latencies(outcomes: Iterable[AttemptOutcome]) -> List[float]:
    """Returns the latencies of successful attempts, in attempt order."""
    return [o.latency_ms for o in outcomes if isinstance(o, Connected)]

def mean_latency(latencies: Sequence[float]) -> float:
    if not latencies:
        return 0.0
    return sum(latencies) / len(latencies)

def consecutive_jitter(latencies: Sequence[float]) -> float:
    """
    Mean absolute difference between temporally consecutive samples.

    Failed attempts are not part of `latencies`, so a gap left by a failure
    is bridged by comparing the samples on either side of it.
    """
    if len(latencies) < 2:
        return 0.0
    deltas = [abs(cur - prev) for prev, cur in zip(latencies, latencies[1:])]
    return sum(deltas) / len(deltas)

def fold_outcomes(target: TargetPort, outcomes: Sequence[AttemptOutcome]) -> PortResult:
    """Turns the ordered outcomes of one port's attempts into a PortResult."""
    latencies = collect_latencies(outcomes)
    packets_sent = len(outcomes)
    packets_received = len(latencies)
    return PortResult(
        target=target,
        success=packets_received > 0,
        latency_ms=round_half_away(mean_latency(latencies)),
        jitter_ms=round_half_away(consecutive_jitter(latencies)),
        packets_sent=packets_sent,
        packets_received=packets_received,
        packets_lost=packets_sent - packets_received,
    )

def average_jitter(results: Iterable[PortResult]) -> float:
    """Mean jitter over ports with at least one successful attempt."""
    jitters = [r.jitter_ms for r in results if r.success]
    if not jitters:
        return 0.0
    return round_half_away(sum(jitters) / len(jitters))
