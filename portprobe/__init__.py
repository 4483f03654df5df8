"""
portprobe: TCP connect-time latency and jitter probing for a host's well-known ports.
"""

__version__ = "1.0.0"

from .models import Connected, Failed, FailureReason, PortResult, ProbeReport, TargetPort
from .network import ProbeInternalError, attempt_connect, probe, run_probe, sample_port

__all__ = [
    "__version__",
    "Connected",
    "Failed",
    "FailureReason",
    "PortResult",
    "ProbeReport",
    "TargetPort",
    "ProbeInternalError",
    "attempt_connect",
    "probe",
    "run_probe",
    "sample_port",
]
