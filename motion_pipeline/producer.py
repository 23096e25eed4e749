"""Background delivery of motion frames to the estimator.

Stands in for the device callback context: frames are handed to the
estimator from a separate thread while the consumer reads concurrently.
"""

import logging
import threading
from typing import Iterable, Optional

from state_estimation import RotationEstimator
from motion_pipeline.frames import MotionFrame, dispatch_frame


logger = logging.getLogger(__name__)


class MotionFrameProducer:
    """Delivers a sequence of frames to an estimator on a worker thread.

    With ``realtime=True`` the thread sleeps for the timestamp gap between
    consecutive frames (divided by ``speed``), mimicking live sensor rates.
    Otherwise frames are delivered as fast as possible.

    Example:
        >>> producer = MotionFrameProducer(estimator, frames, realtime=True)
        >>> producer.start()
        >>> ...
        >>> producer.stop()
    """

    def __init__(
        self,
        estimator: RotationEstimator,
        frames: Iterable[MotionFrame],
        realtime: bool = False,
        speed: float = 1.0,
    ) -> None:
        """Initialize producer.

        Args:
            estimator: Estimator receiving the frames
            frames: Frames in delivery order
            realtime: Pace delivery by frame timestamps
            speed: Playback speed multiplier for realtime pacing
        """
        if speed <= 0:
            raise ValueError(f"speed must be positive, got {speed}")

        self._estimator = estimator
        self._frames = frames
        self._realtime = realtime
        self._speed = speed

        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._frames_delivered = 0
        self._frames_ignored = 0

    def start(self) -> None:
        """Start the delivery thread.

        Raises:
            RuntimeError: If the producer was already started
        """
        if self._thread is not None:
            raise RuntimeError("MotionFrameProducer already started")
        self._thread = threading.Thread(
            target=self._delivery_loop, name='motion-frame-producer', daemon=True
        )
        self._thread.start()
        logger.info("Motion frame producer started (realtime=%s)", self._realtime)

    def stop(self, timeout: Optional[float] = 1.0) -> None:
        """Request the delivery thread to stop and wait for it."""
        self._stop_event.set()
        self.join(timeout)

    def join(self, timeout: Optional[float] = None) -> None:
        """Wait for the delivery thread to finish."""
        if self._thread is not None:
            self._thread.join(timeout)

    def _delivery_loop(self) -> None:
        """Main delivery loop (runs in background thread)."""
        previous_timestamp_ms: Optional[float] = None

        for frame in self._frames:
            if self._stop_event.is_set():
                break

            if self._realtime and previous_timestamp_ms is not None:
                gap_s = (frame.timestamp_ms - previous_timestamp_ms) / 1000.0 / self._speed
                if gap_s > 0 and self._stop_event.wait(gap_s):
                    break
            previous_timestamp_ms = frame.timestamp_ms

            if dispatch_frame(self._estimator, frame):
                self._frames_delivered += 1
            else:
                self._frames_ignored += 1

        logger.info(
            "Motion frame producer finished: %d delivered, %d ignored",
            self._frames_delivered,
            self._frames_ignored,
        )

    @property
    def is_running(self) -> bool:
        """Whether the delivery thread is alive."""
        return self._thread is not None and self._thread.is_alive()

    @property
    def frames_delivered(self) -> int:
        """Frames consumed by the estimator so far."""
        return self._frames_delivered

    @property
    def frames_ignored(self) -> int:
        """Frames of streams the estimator does not consume."""
        return self._frames_ignored
