"""Thread-safe complementary filter for camera orientation.

Fuses asynchronous gyroscope and accelerometer streams into a 3-axis
orientation estimate theta = (pitch, yaw, roll) in radians.

Gyroscope samples propagate theta by integrating angular rate over the
interval between consecutive gyro timestamps. Accelerometer samples anchor
pitch and roll to the tilt of the measured gravity vector:

    theta = alpha * theta + (1 - alpha) * theta_accel

Yaw is unobservable from gravity and is driven by the gyroscope only,
starting from a fixed heading convention.

Ingestion runs on the producer's thread and reads run on the consumer's
thread. A single lock guards theta, the estimator phase and the gyro
timestamp as one unit, so readers never observe a partial update.
"""

import logging
import threading
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional

import numpy as np

from state_estimation.config import RotationEstimatorConfig
from state_estimation._internal.imu_fusion import (
    tilt_from_accelerometer,
    gyro_timestep_s,
    integrate_gyroscope,
    apply_gyro_delta,
    blend_angle,
)
from state_estimation._internal.validation import Vector3Like, as_vector3


logger = logging.getLogger(__name__)


class EstimatorPhase(Enum):
    """Lifecycle phase of the estimator.

    UNINITIALIZED: no accelerometer reference yet; gyro samples only prime
        the timestamp baseline.
    TRACKING: theta anchored; gyro integrates and accelerometer blends.
    """

    UNINITIALIZED = 'uninitialized'
    TRACKING = 'tracking'


@dataclass(frozen=True)
class Theta:
    """Orientation estimate in radians.

    Attributes:
        pitch_rad: Rotation about the model X-axis
        yaw_rad: Rotation about the model Y-axis
        roll_rad: Rotation about the model Z-axis
    """

    pitch_rad: float = 0.0
    yaw_rad: float = 0.0
    roll_rad: float = 0.0

    def as_array(self) -> np.ndarray:
        """Return [pitch, yaw, roll] in radians."""
        return np.array([self.pitch_rad, self.yaw_rad, self.roll_rad])

    def as_degrees(self) -> np.ndarray:
        """Return [pitch, yaw, roll] in degrees."""
        return np.rad2deg(self.as_array())


@dataclass(frozen=True)
class EstimatorStatistics:
    """Sample counters captured at one instant.

    Attributes:
        gyro_samples: Gyro samples integrated into theta
        primed_gyro_samples: Gyro samples absorbed before initialization
        accel_samples: Accelerometer samples applied (including the first)
        rejected_accel_samples: Zero-vector samples skipped by policy
        clamped_gyro_samples: Gyro samples whose negative step was clamped
    """

    gyro_samples: int = 0
    primed_gyro_samples: int = 0
    accel_samples: int = 0
    rejected_accel_samples: int = 0
    clamped_gyro_samples: int = 0


class RotationEstimator:
    """Complementary filter estimating camera rotation from IMU streams.

    The estimator starts UNINITIALIZED with theta at zero. The first
    accelerometer sample sets pitch and roll from gravity and yaw to
    ``config.initial_yaw_rad``; from then on gyro samples integrate and
    accelerometer samples blend. The transition happens exactly once.

    All three public operations are safe to call concurrently from
    different threads.

    Example:
        >>> estimator = RotationEstimator()
        >>> estimator.process_accel([0.0, 0.0, 9.81])
        >>> estimator.process_gyro([0.0, 0.0, 0.0], timestamp_ms=1000.0)
        >>> estimator.get_theta().yaw_rad
        3.141592653589793
    """

    def __init__(self, config: Optional[RotationEstimatorConfig] = None) -> None:
        """Initialize the rotation estimator.

        Args:
            config: Calibration and fusion parameters. Defaults to
                alpha = 0.98, unit gyro scale and a half-turn initial yaw.
        """
        self._config = config if config is not None else RotationEstimatorConfig()
        self._alpha = self._config.complementary_filter_alpha
        self._gyro_scale = self._config.gyro_scale_array

        self._lock = threading.Lock()

        # Guarded by self._lock
        self._theta = Theta()
        self._phase = EstimatorPhase.UNINITIALIZED
        self._last_gyro_timestamp_ms: Optional[float] = None
        self._stats = EstimatorStatistics()

    def process_gyro(self, angular_rate: Vector3Like, timestamp_ms: float) -> None:
        """Integrate one gyroscope sample.

        Before the first accelerometer sample this only records the
        timestamp. Afterwards the scaled rate is integrated over the time
        since the previous gyro sample and applied to theta.

        Args:
            angular_rate: Raw gyro reading [x, y, z] in device units
            timestamp_ms: Sample timestamp in milliseconds
        """
        scaled_rate = as_vector3(angular_rate, 'angular_rate') * self._gyro_scale
        timestamp_ms = float(timestamp_ms)
        clamped = False

        with self._lock:
            if self._phase is EstimatorPhase.UNINITIALIZED:
                self._last_gyro_timestamp_ms = timestamp_ms
                self._stats = _bump(self._stats, primed_gyro_samples=1)
                return

            if self._last_gyro_timestamp_ms is None:
                # First gyro sample after initialization only sets the baseline
                timestep_s = 0.0
                self._last_gyro_timestamp_ms = timestamp_ms
            else:
                timestep_s = gyro_timestep_s(
                    timestamp_ms, self._last_gyro_timestamp_ms
                )
                if timestep_s < 0 and self._config.clamp_negative_timestep:
                    timestep_s = 0.0
                    clamped = True
                else:
                    self._last_gyro_timestamp_ms = timestamp_ms

            delta = integrate_gyroscope(scaled_rate, timestep_s)
            pitch_rad, yaw_rad, roll_rad = apply_gyro_delta(
                (self._theta.pitch_rad, self._theta.yaw_rad, self._theta.roll_rad),
                delta,
            )
            self._theta = Theta(pitch_rad, yaw_rad, roll_rad)
            self._stats = _bump(
                self._stats, gyro_samples=1, clamped_gyro_samples=int(clamped)
            )

        if clamped:
            logger.debug(
                "Gyro timestamp %.3f ms precedes baseline, step clamped to zero",
                timestamp_ms,
            )

    def process_accel(self, acceleration: Vector3Like) -> None:
        """Anchor or blend theta with one accelerometer sample.

        Args:
            acceleration: Accelerometer reading [x, y, z]; only the direction
                matters, so any consistent unit works.
        """
        acceleration = as_vector3(acceleration, 'acceleration')

        if self._config.reject_zero_acceleration and not np.any(acceleration):
            with self._lock:
                self._stats = _bump(self._stats, rejected_accel_samples=1)
            logger.debug("Skipping zero-magnitude accelerometer sample")
            return

        accel_pitch_rad, accel_roll_rad = tilt_from_accelerometer(acceleration)
        initialized = False

        with self._lock:
            if self._phase is EstimatorPhase.UNINITIALIZED:
                self._phase = EstimatorPhase.TRACKING
                self._theta = Theta(
                    pitch_rad=accel_pitch_rad,
                    yaw_rad=self._config.initial_yaw_rad,
                    roll_rad=accel_roll_rad,
                )
                initialized = True
            else:
                self._theta = Theta(
                    pitch_rad=blend_angle(
                        self._theta.pitch_rad, accel_pitch_rad, self._alpha
                    ),
                    yaw_rad=self._theta.yaw_rad,
                    roll_rad=blend_angle(
                        self._theta.roll_rad, accel_roll_rad, self._alpha
                    ),
                )
            self._stats = _bump(self._stats, accel_samples=1)

        if initialized:
            logger.info(
                "Rotation estimator initialized: pitch=%.4f rad, roll=%.4f rad",
                accel_pitch_rad,
                accel_roll_rad,
            )

    def get_theta(self) -> Theta:
        """Return the current orientation estimate.

        Returns:
            Theta value as held at a single instant
        """
        with self._lock:
            return self._theta

    def statistics(self) -> EstimatorStatistics:
        """Return a snapshot of the sample counters."""
        with self._lock:
            return self._stats

    @property
    def phase(self) -> EstimatorPhase:
        """Current lifecycle phase."""
        with self._lock:
            return self._phase

    @property
    def is_initialized(self) -> bool:
        """Whether an accelerometer reference has been established."""
        return self.phase is EstimatorPhase.TRACKING

    @property
    def last_gyro_timestamp_ms(self) -> Optional[float]:
        """Timestamp of the gyro baseline, or None before any gyro sample."""
        with self._lock:
            return self._last_gyro_timestamp_ms

    @property
    def alpha(self) -> float:
        """Filter coefficient (gyroscope trust factor)."""
        return self._alpha

    @property
    def config(self) -> RotationEstimatorConfig:
        """Estimator configuration."""
        return self._config


def _bump(stats: EstimatorStatistics, **increments: int) -> EstimatorStatistics:
    """Return a copy of stats with the named counters incremented."""
    return replace(
        stats,
        **{name: getattr(stats, name) + count for name, count in increments.items()}
    )
