"""Typed motion frames and stream demultiplexing.

A device either delivers raw IMU streams (gyro + accel), which the rotation
estimator fuses, or a pre-fused pose stream, which needs no fusion and is
not handled here.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable

import numpy as np

from state_estimation import RotationEstimator


logger = logging.getLogger(__name__)


class StreamType(Enum):
    """Physical stream a frame was captured from."""

    GYRO = 'gyro'
    ACCEL = 'accel'
    POSE = 'pose'


class StreamCapability(Enum):
    """Orientation source a device can provide.

    IMU: raw gyro and accel streams, orientation computed by the estimator
    POSE: pre-fused 6-DOF transform from the device, passed through
    NONE: no supported device found
    """

    IMU = 'imu'
    POSE = 'pose'
    NONE = 'none'


@dataclass
class MotionFrame:
    """Single motion sample from one stream.

    Attributes:
        stream: Stream the sample belongs to
        data: Sample vector [x, y, z]
        timestamp_ms: Device timestamp in milliseconds
    """

    stream: StreamType
    data: np.ndarray  # Shape (3,)
    timestamp_ms: float = 0.0

    def __post_init__(self) -> None:
        """Validate array shape."""
        self.stream = StreamType(self.stream)
        self.data = np.asarray(self.data, dtype=float)
        if self.data.shape != (3,):
            raise ValueError(
                f"data must have shape (3,), got {self.data.shape}"
            )


def detect_stream_capability(
    devices: Iterable[Iterable[StreamType]],
) -> StreamCapability:
    """Pick the orientation source from the streams each device offers.

    A pose stream on any device wins immediately. Otherwise the first device
    offering both gyro and accel streams selects IMU fusion. Gyro and accel
    must come from the same device.

    Args:
        devices: For each device, the stream types its sensors expose

    Returns:
        Detected capability
    """
    for device_streams in devices:
        found_gyro = False
        found_accel = False
        for stream in device_streams:
            stream = StreamType(stream)
            if stream is StreamType.POSE:
                return StreamCapability.POSE
            if stream is StreamType.GYRO:
                found_gyro = True
            if stream is StreamType.ACCEL:
                found_accel = True
        if found_gyro and found_accel:
            return StreamCapability.IMU
    return StreamCapability.NONE


def dispatch_frame(estimator: RotationEstimator, frame: MotionFrame) -> bool:
    """Route a frame to the matching estimator ingestion operation.

    Args:
        estimator: Estimator receiving the sample
        frame: Motion frame to deliver

    Returns:
        True if the estimator consumed the frame, False otherwise
    """
    if frame.stream is StreamType.GYRO:
        estimator.process_gyro(frame.data, frame.timestamp_ms)
        return True
    if frame.stream is StreamType.ACCEL:
        estimator.process_accel(frame.data)
        return True

    logger.debug("Ignoring %s frame at %.3f ms", frame.stream.value, frame.timestamp_ms)
    return False
