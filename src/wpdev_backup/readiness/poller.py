"""Fixed-interval readiness polling.

``wait_until_ready`` blocks until a probe reports ready or the timeout
elapses.  The first probe runs immediately; afterwards probes are spaced
by a fixed ``interval`` (no backoff).  A probe that raises is treated as
"not ready yet".  Probes should bound their own run time (see
``ReadinessSettings.probe_timeout``); the poller cannot interrupt them.

Clock and sleep are injectable so callers (tests) can simulate elapsed
time without real delays.

Usage:
    from wpdev_backup.readiness.poller import wait_until_ready

    result = wait_until_ready(probe, interval=5, timeout=60, description="db")
    print(result.attempts, result.elapsed)
"""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass

from wpdev_backup.errors import ReadinessTimeout

logger = logging.getLogger(__name__)

Probe = Callable[[], object]


@dataclass(frozen=True)
class ReadinessResult:
    """Outcome of a successful poll."""

    attempts: int
    elapsed: float


def wait_until_ready(
    probe: Probe,
    interval: float,
    timeout: float,
    description: str = "target",
    clock: Callable[[], float] = time.monotonic,
    sleep: Callable[[float], None] = time.sleep,
) -> ReadinessResult:
    """Poll ``probe`` until it returns a truthy value or ``timeout`` elapses.

    Args:
        probe: Zero-argument callable; truthy result means ready.  Exceptions
            count as not ready.
        interval: Seconds to sleep between attempts (must be > 0).
        timeout: Seconds after which polling gives up (must be > 0).
        description: Name of the target used in log lines and the error.
        clock: Monotonic time source in seconds.
        sleep: Sleep function.

    Returns:
        ``ReadinessResult`` with the attempt count and elapsed seconds.

    Raises:
        ValueError: If ``interval`` or ``timeout`` is not positive.
        ReadinessTimeout: If the probe never succeeded within ``timeout``.
            Elapsed time is checked after each probe and again after each
            sleep, so no probe starts past ``timeout``.  The failure is
            raised within ``timeout + interval`` of the start as long as a
            single probe never runs longer than ``interval``.
    """
    if interval <= 0:
        raise ValueError(f"interval must be positive, got {interval}")
    if timeout <= 0:
        raise ValueError(f"timeout must be positive, got {timeout}")

    logger.info("Waiting for %s to be ready...", description)
    start = clock()
    attempts = 0

    while True:
        attempts += 1
        try:
            ready = bool(probe())
        except Exception as e:  # noqa: BLE001 -- any probe error means "not ready"
            logger.debug("Probe for %s raised: %s", description, e)
            ready = False

        elapsed = clock() - start
        if ready:
            logger.info("%s is ready", description)
            return ReadinessResult(attempts=attempts, elapsed=elapsed)

        if elapsed > timeout:
            logger.error("Timeout waiting for %s to be ready", description)
            raise ReadinessTimeout(description, timeout, attempts)

        logger.info("%s not ready, still waiting...", description)
        sleep(interval)

        # No new probe may start past the deadline
        if clock() - start > timeout:
            logger.error("Timeout waiting for %s to be ready", description)
            raise ReadinessTimeout(description, timeout, attempts)
