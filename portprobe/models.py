from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Union

@dataclass(frozen=True)
class TargetPort:
    """A statically configured TCP port of interest on the probed host."""
    port: int
    name: str
    description: str = ""

    def __post_init__(self):
        if isinstance(self.port, bool) or not isinstance(self.port, int):
            raise ValueError(f"Port must be an integer, got {self.port!r}.")
        if not 1 <= self.port <= 65535:
            raise ValueError(f"Port {self.port} is out of range (1-65535).")

class FailureReason(Enum):
    """Why a single connection attempt did not complete."""
    TIMEOUT = "timeout"
    REFUSED = "refused"
    OTHER = "other"

@dataclass(frozen=True)
class Connected:
    """A connection attempt that completed the TCP handshake."""
    latency_ms: float

@dataclass(frozen=True)
class Failed:
    """A connection attempt that timed out or errored."""
    reason: FailureReason

AttemptOutcome = Union[Connected, Failed]

@dataclass(frozen=True)
class PortResult:
    """Sampling summary for one target port."""
    target: TargetPort
    success: bool
    latency_ms: float
    jitter_ms: float
    packets_sent: int
    packets_received: int
    packets_lost: int

@dataclass(frozen=True)
class ProbeReport:
    """Results for every configured port, in configuration order."""
    results: List[PortResult] = field(default_factory=list)
    avg_jitter_ms: float = 0.0

    @property
    def any_success(self) -> bool:
        return any(result.success for result in self.results)
