"""
Handles the TCP connect-time probing of a host's target ports.

A probe fans out one sampler per target port and waits for all of them.
Each sampler makes a fixed number of sequential connection attempts and
folds the outcomes into a PortResult.
"""
import asyncio
import logging
import time
from typing import Awaitable, Callable, List, Sequence

from ..metrics import average_jitter, fold_outcomes
from ..models import AttemptOutcome, Connected, Failed, FailureReason, PortResult, ProbeReport, TargetPort
from .utils import classify_connect_error

DEFAULT_TIMEOUT_MS = 2000
DEFAULT_ATTEMPTS = 5
DEFAULT_INTERVAL_MS = 50

Connector = Callable[[str, int, float], Awaitable[AttemptOutcome]]

class ProbeInternalError(RuntimeError):
    """An unexpected fault while orchestrating a probe, as opposed to a port being unreachable."""

async def attempt_connect(host: str, port: int, timeout_ms: float = DEFAULT_TIMEOUT_MS) -> AttemptOutcome:
    """Opens and immediately closes one TCP connection, timing the handshake."""
    writer = None
    start = time.perf_counter()
    try:
        _, writer = await asyncio.wait_for(asyncio.open_connection(host, port), timeout=timeout_ms / 1000.0)
        elapsed_ms = (time.perf_counter() - start) * 1000
        return Connected(latency_ms=elapsed_ms)
    except asyncio.TimeoutError:
        logging.debug(f"Connect to {host}:{port} timed out after {timeout_ms}ms")
        return Failed(FailureReason.TIMEOUT)
    except OSError as e:
        reason = classify_connect_error(e)
        logging.debug(f"Connect to {host}:{port} failed ({reason.value}): {e}")
        return Failed(reason)
    except UnicodeError as e:
        # idna rejects empty or over-long labels before any lookup happens
        logging.debug(f"Connect to {host}:{port} failed (other): {e}")
        return Failed(FailureReason.OTHER)
    finally:
        if writer is not None:
            writer.close()
            try:
                await writer.wait_closed()
            except OSError as e:
                logging.debug(f"Error closing probe connection to {host}:{port}: {e}")

async def collect_outcomes(
    host: str,
    port: int,
    *,
    attempts: int = DEFAULT_ATTEMPTS,
    interval_ms: float = DEFAULT_INTERVAL_MS,
    timeout_ms: float = DEFAULT_TIMEOUT_MS,
    connect: Connector = attempt_connect,
) -> List[AttemptOutcome]:
    """Runs `attempts` sequential connects, pausing `interval_ms` between them."""
    outcomes: List[AttemptOutcome] = []
    for i in range(attempts):
        outcomes.append(await connect(host, port, timeout_ms))
        if i < attempts - 1:
            await asyncio.sleep(interval_ms / 1000.0)
    return outcomes

async def sample_port(
    host: str,
    target: TargetPort,
    *,
    attempts: int = DEFAULT_ATTEMPTS,
    interval_ms: float = DEFAULT_INTERVAL_MS,
    timeout_ms: float = DEFAULT_TIMEOUT_MS,
    connect: Connector = attempt_connect,
) -> PortResult:
    """Samples a single target port and summarises latency, jitter and loss."""
    outcomes = await collect_outcomes(
        host, target.port,
        attempts=attempts, interval_ms=interval_ms, timeout_ms=timeout_ms, connect=connect,
    )
    result = fold_outcomes(target, outcomes)
    logging.debug(
        f"{target.name} ({host}:{target.port}): {result.packets_received}/{result.packets_sent} "
        f"received, latency {result.latency_ms}ms, jitter {result.jitter_ms}ms"
    )
    return result

async def run_probe(
    host: str,
    targets: Sequence[TargetPort],
    *,
    attempts: int = DEFAULT_ATTEMPTS,
    interval_ms: float = DEFAULT_INTERVAL_MS,
    timeout_ms: float = DEFAULT_TIMEOUT_MS,
    connect: Connector = attempt_connect,
) -> ProbeReport:
    """
    Samples every target concurrently and aggregates the results.

    Results follow the order of `targets`. Unreachable ports show up as
    unsuccessful PortResults; only an unexpected fault raises, and only after
    every sampler has finished.
    """
    logging.info(f"Probing {host} on {len(targets)} port(s)")
    gathered = await asyncio.gather(
        *(
            sample_port(host, target, attempts=attempts, interval_ms=interval_ms,
                        timeout_ms=timeout_ms, connect=connect)
            for target in targets
        ),
        return_exceptions=True,
    )

    results: List[PortResult] = []
    for target, item in zip(targets, gathered):
        if isinstance(item, asyncio.CancelledError):
            raise item
        if isinstance(item, BaseException):
            logging.error(f"Sampling {host}:{target.port} failed with exception: {item!r}")
            raise ProbeInternalError(f"Probe of {host}:{target.port} failed unexpectedly") from item
        results.append(item)

    report = ProbeReport(results=results, avg_jitter_ms=average_jitter(results))
    reachable = sum(1 for r in results if r.success)
    logging.info(f"Probe of {host} finished: {reachable}/{len(results)} port(s) reachable, avg jitter {report.avg_jitter_ms}ms")
    return report

def probe(host: str, targets: Sequence[TargetPort], **options) -> ProbeReport:
    """Blocking wrapper around run_probe for callers without an event loop."""
    return asyncio.run(run_probe(host, targets, **options))
