"""
Core network utility functions.
"""
import errno
import socket
from functools import lru_cache
from typing import Optional, Tuple

from ..models import FailureReason

_REFUSED_ERRNOS = {errno.ECONNREFUSED}

@lru_cache(maxsize=128)
def _is_ip_literal(host: str) -> Tuple[bool, Optional[int]]:
    """Checks if a string is a valid IP literal."""
    try:
        socket.inet_pton(socket.AF_INET, host)
        return True, socket.AF_INET
    except OSError:
        pass
    try:
        socket.inet_pton(socket.AF_INET6, host.split('%')[0])
        return True, socket.AF_INET6
    except OSError:
        return False, None

def ip_family(host: str) -> Optional[int]:
    """Returns AF_INET/AF_INET6 for an IP literal, or None for a hostname."""
    return _is_ip_literal(host.strip())[1]

def classify_connect_error(exc: OSError) -> FailureReason:
    """Maps a failed connect() to the reason recorded for the attempt."""
    if isinstance(exc, ConnectionRefusedError) or exc.errno in _REFUSED_ERRNOS:
        return FailureReason.REFUSED
    if isinstance(exc, socket.timeout):
        return FailureReason.TIMEOUT
    return FailureReason.OTHER
