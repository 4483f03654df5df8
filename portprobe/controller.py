"""
Core application controller for portprobe.
"""
from __future__ import annotations
import logging
from typing import Any, Dict, List, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from . import configuration
from .models import ProbeReport, TargetPort
from .network import ProbeInternalError, probe
from .reporting import DEFAULT_SERVER_LABEL, DEFAULT_TIMEZONE, build_error_response, build_port_listing, build_response

INTERNAL_ERROR_MESSAGE = "Internal error while running the connectivity test"

class ProbeController:
    """Runs probes against the configured host and shapes the responses."""
    targets: List[TargetPort]

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        Initializes the controller.

        Every setting is validated here, once, so a bad config fails before
        any connection is made; invalid values raise ValueError.
        """
        self.config = dict(configuration.DEFAULT_CONFIG)
        if config:
            self.config.update(config)
        self.server_host: str = str(self.config['server_host'])
        self.targets = configuration.target_ports_from_config(self.config)
        self.attempts = int(self._setting('packets_per_port', int, minimum=1))
        self.interval_ms = self._setting('attempt_interval_ms', float, minimum=0)
        self.timeout_ms = self._setting('connect_timeout_ms', float, minimum=0, exclusive=True)
        self.timezone: str = self.config.get('timezone') or DEFAULT_TIMEZONE
        try:
            ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, TypeError, ValueError) as e:
            raise ValueError(f"Unknown timezone {self.timezone!r}.") from e
        self.server_label: str = self.config.get('masked_server_label') or DEFAULT_SERVER_LABEL

    def _setting(self, key: str, cast, minimum: float, exclusive: bool = False) -> float:
        """Converts and range-checks one numeric setting."""
        raw = self.config.get(key)
        if isinstance(raw, bool):
            raise ValueError(f"'{key}' must be a number, got {raw!r}.")
        try:
            value = cast(raw)
        except (TypeError, ValueError) as e:
            raise ValueError(f"'{key}' must be a number, got {raw!r}.") from e
        if value < minimum or (exclusive and value == minimum):
            bound = f"greater than {minimum}" if exclusive else f"at least {minimum}"
            raise ValueError(f"'{key}' must be {bound}, got {raw!r}.")
        return value

    def _probe_options(self) -> Dict[str, Any]:
        return {
            'attempts': self.attempts,
            'interval_ms': self.interval_ms,
            'timeout_ms': self.timeout_ms,
        }

    def run_report(self) -> ProbeReport:
        """Probes the configured host; raises ProbeInternalError on unexpected faults."""
        return probe(self.server_host, self.targets, **self._probe_options())

    def run(self, client_ip: Optional[str] = None) -> Dict[str, Any]:
        """Runs a full probe and returns the response body, never raising ProbeInternalError."""
        try:
            report = self.run_report()
        except ProbeInternalError as e:
            logging.error(f"Connectivity test failed: {e} ({e.__cause__!r})")
            return build_error_response(INTERNAL_ERROR_MESSAGE)

        if not report.any_success:
            logging.warning(f"No configured port on {self.server_host} accepted a connection.")
        return build_response(
            report,
            self.server_host,
            client_ip=client_ip,
            timezone=self.timezone,
            server_label=self.server_label,
        )

    def describe(self, client_ip: Optional[str] = None) -> Dict[str, Any]:
        """Returns the configured ports and masked server without probing."""
        return build_port_listing(self.targets, self.server_host, client_ip=client_ip, server_label=self.server_label)
