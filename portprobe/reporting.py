"""
Turns probe reports into the JSON-ready response shapes.
"""
from __future__ import annotations
import re
import socket
from datetime import datetime
from typing import Any, Dict, Optional, Sequence
from zoneinfo import ZoneInfo

from .models import PortResult, ProbeReport, TargetPort
from .network.utils import ip_family

DEFAULT_TIMEZONE = "America/Sao_Paulo"
DEFAULT_SERVER_LABEL = "NeonHost Server"
CLIENT_IP_UNKNOWN = "Not detected"

def mask_server_ip(address: str, fallback_label: str = DEFAULT_SERVER_LABEL) -> str:
    """
    Hides most of the probed server's address.

    Hostnames (anything with a letter that is not an IP literal) are
    returned as-is, IPv4 keeps only its third octet
    (`45.146.81.208` -> `*.*.81.*`) and anything else, IPv6 and malformed
    numeric strings like `1.2.3` included, becomes `fallback_label`.
    """
    family = ip_family(address)
    if family is None:
        return address if re.search(r"[a-zA-Z]", address) else fallback_label
    if family == socket.AF_INET:
        parts = address.strip().split(".")
        return f"*.*.{parts[2]}.*"
    return fallback_label

def format_completed_at(moment: Optional[datetime] = None, timezone: str = DEFAULT_TIMEZONE) -> str:
    """Renders `moment` (default: now) as `DD/MM/YYYY, HH:MM:SS` in `timezone`."""
    tz = ZoneInfo(timezone)
    moment = moment.astimezone(tz) if moment else datetime.now(tz)
    return moment.strftime("%d/%m/%Y, %H:%M:%S")

def target_to_dict(target: TargetPort) -> Dict[str, Any]:
    return {"port": target.port, "name": target.name, "description": target.description}

def port_result_to_dict(result: PortResult) -> Dict[str, Any]:
    data = target_to_dict(result.target)
    data.update({
        "success": result.success,
        "latency": result.latency_ms,
        "jitter": result.jitter_ms,
        "packetsSent": result.packets_sent,
        "packetsReceived": result.packets_received,
        "packetsLost": result.packets_lost,
    })
    return data

def report_to_dict(report: ProbeReport) -> Dict[str, Any]:
    """The bare aggregate response, without request metadata."""
    return {
        "success": True,
        "results": [port_result_to_dict(r) for r in report.results],
        "avgJitter": report.avg_jitter_ms,
    }

def build_response(
    report: ProbeReport,
    server_host: str,
    client_ip: Optional[str] = None,
    completed_at: Optional[datetime] = None,
    timezone: str = DEFAULT_TIMEZONE,
    server_label: str = DEFAULT_SERVER_LABEL,
) -> Dict[str, Any]:
    """Wraps a report with the client IP, masked server and completion time."""
    body = report_to_dict(report)
    return {
        "success": body["success"],
        "clientIp": client_ip or CLIENT_IP_UNKNOWN,
        "serverIp": mask_server_ip(server_host, server_label),
        "completedAt": format_completed_at(completed_at, timezone),
        "avgJitter": body["avgJitter"],
        "results": body["results"],
    }

def build_port_listing(
    targets: Sequence[TargetPort],
    server_host: str,
    client_ip: Optional[str] = None,
    server_label: str = DEFAULT_SERVER_LABEL,
) -> Dict[str, Any]:
    """Describes what would be probed, without probing."""
    return {
        "clientIp": client_ip or CLIENT_IP_UNKNOWN,
        "serverIp": mask_server_ip(server_host, server_label),
        "ports": [target_to_dict(t) for t in targets],
    }

def build_error_response(message: str) -> Dict[str, Any]:
    return {"success": False, "error": message}
