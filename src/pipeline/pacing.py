"""
Pacing and retry helpers shared by the batch pipelines.

Both take the sleep function as a parameter so tests can record the delays
instead of waiting on the wall clock.
"""

import logging
import time
from typing import Callable, Optional, TypeVar


T = TypeVar("T")

SleepFn = Callable[[float], None]


class FixedIntervalGate:
    """
    Inserts a fixed pause between consecutive units of work.

    The first call to wait() returns immediately; every later call sleeps
    `interval` seconds, so N items get N - 1 pauses.

    Example:
        gate = FixedIntervalGate(1.0)
        for clip in clips:
            gate.wait()
            process(clip)
    """

    def __init__(self, interval: float, sleep: SleepFn = time.sleep):
        self.interval = interval
        self._sleep = sleep
        self._started = False

    def wait(self) -> None:
        if self._started and self.interval > 0:
            self._sleep(self.interval)
        self._started = True


def retry_with_backoff(
    func: Callable[[], T],
    max_attempts: int = 3,
    base_delay: float = 2.0,
    sleep: SleepFn = time.sleep,
    logger: Optional[logging.Logger] = None,
    description: str = "operation",
) -> T:
    """
    Call func until it succeeds or max_attempts is reached.

    The wait before attempt n + 1 is base_delay ** n seconds (2s, 4s, 8s...
    with the default base).

    Args:
        func: Zero-argument callable to run
        max_attempts: Total number of attempts, including the first one
        base_delay: Base of the exponential backoff, in seconds
        sleep: Sleep function (injected in tests)
        logger: Logger for attempt failures
        description: Label used in log messages

    Returns:
        The first successful result of func

    Raises:
        Exception: The error raised by the last attempt
    """
    logger = logger or logging.getLogger(__name__)

    for attempt in range(1, max_attempts + 1):
        try:
            return func()
        except Exception as e:
            logger.warning(f"{description} attempt {attempt}/{max_attempts} failed: {e}")
            if attempt == max_attempts:
                raise
            wait_time = base_delay**attempt
            logger.info(f"Waiting {wait_time:.0f}s before retry...")
            sleep(wait_time)

    raise ValueError("max_attempts must be at least 1")
