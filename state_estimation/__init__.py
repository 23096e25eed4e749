"""State estimation module for IMU-based camera orientation.

This module provides the sensor fusion filter that estimates a camera's
3-axis rotation from asynchronous gyroscope and accelerometer samples.

Public API:
    - RotationEstimatorConfig: Configuration dataclass for estimator parameters
    - RotationEstimator: Thread-safe complementary filter
    - Theta: Immutable (pitch, yaw, roll) estimate in radians
    - EstimatorPhase: UNINITIALIZED / TRACKING lifecycle states
    - EstimatorStatistics: Snapshot of sample counters
"""

from state_estimation.config import RotationEstimatorConfig
from state_estimation.rotation_estimator import (
    RotationEstimator,
    Theta,
    EstimatorPhase,
    EstimatorStatistics,
)

__all__ = [
    'RotationEstimatorConfig',
    'RotationEstimator',
    'Theta',
    'EstimatorPhase',
    'EstimatorStatistics',
]
