"""
Pacing Module

Throttles the processing loop to the source's nominal frame rate,
subtracting the time already spent on processing and display.
"""

import logging
import math
import time
from typing import Callable, Optional

logger = logging.getLogger(__name__)


def monotonic_ms() -> float:
    return time.monotonic() * 1000.0


class PacingController:
    """Computes per-frame wait intervals."""

    def __init__(self,
                 frame_rate: float,
                 clock: Optional[Callable[[], float]] = None,
                 min_delay_ms: int = 1,
                 fallback_frame_rate: float = 30.0):
        """
        Initialize pacing controller.

        Args:
            frame_rate: Nominal frames per second reported by the source
            clock: Millisecond clock, defaults to time.monotonic
            min_delay_ms: Lower bound on every wait
            fallback_frame_rate: Used when the source reports no usable rate
        """
        if not frame_rate or not math.isfinite(frame_rate) or frame_rate <= 0:
            logger.warning("Source reported frame rate %s, using %s", frame_rate, fallback_frame_rate)
            frame_rate = fallback_frame_rate

        self.frame_rate = float(frame_rate)
        self.clock = clock or monotonic_ms
        self.min_delay_ms = int(min_delay_ms)
        self.last_timestamp_ms: Optional[float] = None

    @property
    def frame_interval_ms(self) -> int:
        # round half up
        return int(1000.0 / self.frame_rate + 0.5)

    def compute_delay(self, now_ms: float) -> int:
        """Wait needed at ``now_ms`` to keep one frame per interval, never below the floor."""
        if self.last_timestamp_ms is None:
            return self.min_delay_ms
        elapsed = now_ms - self.last_timestamp_ms
        return max(self.min_delay_ms, int(round(self.frame_interval_ms - elapsed)))

    def throttle(self, wait: Callable[[int], object]) -> int:
        """
        Block for the current delay.

        The timestamp is recorded before waiting, so the wait itself counts
        toward the next frame's elapsed time.

        Args:
            wait: Blocking call taking milliseconds (e.g. WindowDisplay.wait)

        Returns:
            The delay that was waited, in milliseconds
        """
        now = self.clock()
        delay = self.compute_delay(now)
        self.last_timestamp_ms = now
        wait(delay)
        return delay

    def reset(self) -> None:
        self.last_timestamp_ms = None
