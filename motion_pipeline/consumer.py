"""Display-rate polling of the orientation estimate.

The monitor runs on its own thread (typically the main thread), reads the
estimate at a fixed cadence with no synchronization to sample arrival, and
records what it saw.
"""

import logging
import threading
import time
from collections import deque
from dataclasses import dataclass
from typing import Callable, Deque, Optional

import numpy as np

from state_estimation import RotationEstimator, Theta


logger = logging.getLogger(__name__)


@dataclass
class MonitorStats:
    """Statistics from monitor loop execution.

    Attributes:
        polls: Total reads of the estimate
        avg_read_time_ms: Average get_theta() time (milliseconds)
        max_read_time_ms: Maximum get_theta() time (milliseconds)
        timing_violations: Count of iterations exceeding target period
    """
    polls: int = 0
    avg_read_time_ms: float = 0.0
    max_read_time_ms: float = 0.0
    timing_violations: int = 0


class OrientationHistory:
    """Estimates observed by the monitor.

    With ``max_samples`` set, only the most recent polls are kept.

    Attributes:
        time_s: Seconds since monitoring started, per poll
        thetas: Estimate read at each poll
    """

    def __init__(self, max_samples: Optional[int] = None) -> None:
        """Initialize history.

        Args:
            max_samples: Number of most recent polls to keep (None = all)
        """
        if max_samples is not None and max_samples < 0:
            raise ValueError(
                f"max_samples must be non-negative, got {max_samples}"
            )
        self.max_samples = max_samples
        self.time_s: Deque[float] = deque(maxlen=max_samples)
        self.thetas: Deque[Theta] = deque(maxlen=max_samples)

    def append(self, time_s: float, theta: Theta) -> None:
        """Record one poll."""
        self.time_s.append(time_s)
        self.thetas.append(theta)

    def __len__(self) -> int:
        return len(self.thetas)

    def time_array(self) -> np.ndarray:
        """Poll times as array (N,)."""
        return np.array(self.time_s, dtype=float)

    def theta_array(self) -> np.ndarray:
        """Estimates as array (N, 3) of [pitch, yaw, roll] radians."""
        if not self.thetas:
            return np.zeros((0, 3))
        return np.vstack([theta.as_array() for theta in self.thetas])


class OrientationMonitor:
    """Polls a rotation estimator at a fixed rate.

    Example:
        >>> monitor = OrientationMonitor(estimator, target_frequency_hz=60.0)
        >>> stats = monitor.run(duration_s=5.0)
        >>> monitor.history.theta_array().shape
        (300, 3)
    """

    def __init__(
        self,
        estimator: RotationEstimator,
        target_frequency_hz: float = 60.0,
        log_every: int = 60,
        history_length: Optional[int] = None,
    ) -> None:
        """Initialize monitor.

        Args:
            estimator: Estimator to read from
            target_frequency_hz: Poll rate, e.g. the display refresh rate
            log_every: Log the current estimate every N polls (0 disables)
            history_length: Polls kept in history (None = all, 0 = none)
        """
        if target_frequency_hz <= 0:
            raise ValueError(
                f"target_frequency_hz must be positive, got {target_frequency_hz}"
            )
        if log_every < 0:
            raise ValueError(f"log_every must be non-negative, got {log_every}")

        self._estimator = estimator
        self.target_period_s = 1.0 / target_frequency_hz
        self._log_every = log_every

        self.stats = MonitorStats()
        self.history = OrientationHistory(max_samples=history_length)

    def run(
        self,
        duration_s: Optional[float] = None,
        stop_event: Optional[threading.Event] = None,
        should_continue: Optional[Callable[[], bool]] = None,
    ) -> MonitorStats:
        """Poll until the duration elapses or a stop condition triggers.

        Args:
            duration_s: Run duration in seconds (None = no limit)
            stop_event: Stop when this event is set
            should_continue: Stop when this returns False

        Returns:
            MonitorStats: Statistics from the run

        Raises:
            ValueError: If no stop condition is given
        """
        if duration_s is None and stop_event is None and should_continue is None:
            raise ValueError(
                "run() needs duration_s, stop_event or should_continue"
            )

        start_time = time.perf_counter()
        logger.info(
            "Monitoring orientation at %.1f Hz", 1.0 / self.target_period_s
        )

        while True:
            loop_start_time = time.perf_counter()
            elapsed_s = loop_start_time - start_time

            if duration_s is not None and elapsed_s >= duration_s:
                break
            if stop_event is not None and stop_event.is_set():
                break
            if should_continue is not None and not should_continue():
                break

            theta = self._estimator.get_theta()
            read_time_ms = (time.perf_counter() - loop_start_time) * 1000.0

            self.history.append(elapsed_s, theta)
            self._update_stats(read_time_ms)

            if self._log_every and self.stats.polls % self._log_every == 0:
                pitch_deg, yaw_deg, roll_deg = theta.as_degrees()
                logger.info(
                    "poll %d: pitch=%7.2f° yaw=%7.2f° roll=%7.2f°",
                    self.stats.polls, pitch_deg, yaw_deg, roll_deg,
                )

            # Sleep to maintain target frequency
            sleep_time = self.target_period_s - (time.perf_counter() - loop_start_time)
            if sleep_time > 0:
                if stop_event is not None:
                    stop_event.wait(sleep_time)
                else:
                    time.sleep(sleep_time)
            else:
                self.stats.timing_violations += 1

        logger.info(
            "Monitor stopped after %d polls (%d timing violations)",
            self.stats.polls,
            self.stats.timing_violations,
        )
        return self.stats

    def _update_stats(self, read_time_ms: float) -> None:
        """Update running statistics."""
        self.stats.polls += 1
        # Online mean
        self.stats.avg_read_time_ms += (
            (read_time_ms - self.stats.avg_read_time_ms) / self.stats.polls
        )
        self.stats.max_read_time_ms = max(self.stats.max_read_time_ms, read_time_ms)
