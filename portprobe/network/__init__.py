"""
Network-related utilities for portprobe.
"""

from .engine import (
    DEFAULT_ATTEMPTS,
    DEFAULT_INTERVAL_MS,
    DEFAULT_TIMEOUT_MS,
    ProbeInternalError,
    attempt_connect,
    collect_outcomes,
    probe,
    run_probe,
    sample_port,
)
from .utils import classify_connect_error, ip_family

__all__ = [
    "DEFAULT_ATTEMPTS",
    "DEFAULT_INTERVAL_MS",
    "DEFAULT_TIMEOUT_MS",
    "ProbeInternalError",
    "attempt_connect",
    "collect_outcomes",
    "probe",
    "run_probe",
    "sample_port",
    "classify_connect_error",
    "ip_family",
]
