"""Synthetic IMU streams for demos and tests.

Models a camera that starts at a given tilt and rolls at a constant rate.
Gyro and accel are sampled at independent rates and interleaved by
timestamp, as a device would deliver them.
"""

from typing import List, Optional

import numpy as np

from motion_pipeline.frames import MotionFrame, StreamType


STANDARD_GRAVITY_MPS2 = 9.80665

# Typical D435i IMU rates
DEFAULT_GYRO_RATE_HZ = 200.0
DEFAULT_ACCEL_RATE_HZ = 63.0


def gravity_vector(
    pitch_rad: float,
    roll_rad: float,
    gravity_mps2: float = STANDARD_GRAVITY_MPS2,
) -> np.ndarray:
    """Accelerometer reading of a static camera at the given tilt.

    Inverse of the tilt computation for |pitch| < pi/2.
    """
    return gravity_mps2 * np.array([
        np.sin(pitch_rad),
        np.cos(pitch_rad) * np.sin(roll_rad),
        np.cos(pitch_rad) * np.cos(roll_rad),
    ])


def generate_motion_frames(
    duration_s: float,
    roll_rate_radps: float = 0.0,
    initial_pitch_rad: float = 0.0,
    initial_roll_rad: float = 0.0,
    gyro_rate_hz: float = DEFAULT_GYRO_RATE_HZ,
    accel_rate_hz: float = DEFAULT_ACCEL_RATE_HZ,
    gyro_noise_std_radps: float = 0.0,
    accel_noise_std_mps2: float = 0.0,
    start_timestamp_ms: float = 0.0,
    seed: Optional[int] = None,
) -> List[MotionFrame]:
    """Generate interleaved gyro and accel frames.

    Args:
        duration_s: Length of the stream in seconds
        roll_rate_radps: Constant roll rate of the camera
        initial_pitch_rad: Constant pitch of the camera
        initial_roll_rad: Roll at the start of the stream
        gyro_rate_hz: Gyro sampling rate
        accel_rate_hz: Accelerometer sampling rate
        gyro_noise_std_radps: Gaussian noise added to each gyro axis
        accel_noise_std_mps2: Gaussian noise added to each accel axis
        start_timestamp_ms: Timestamp of the first samples
        seed: Random seed for the noise generator

    Returns:
        Frames sorted by timestamp
    """
    if duration_s <= 0:
        raise ValueError(f"duration_s must be positive, got {duration_s}")
    if gyro_rate_hz <= 0:
        raise ValueError(f"gyro_rate_hz must be positive, got {gyro_rate_hz}")
    if accel_rate_hz <= 0:
        raise ValueError(f"accel_rate_hz must be positive, got {accel_rate_hz}")

    rng = np.random.default_rng(seed)
    frames: List[MotionFrame] = []

    # Roll is driven by the sensor X rate
    gyro_times_s = _sample_times(duration_s, gyro_rate_hz)
    for t in gyro_times_s:
        rate = np.array([roll_rate_radps, 0.0, 0.0])
        rate = rate + rng.normal(0.0, gyro_noise_std_radps, size=3)
        frames.append(MotionFrame(
            stream=StreamType.GYRO,
            data=rate,
            timestamp_ms=start_timestamp_ms + t * 1000.0,
        ))

    accel_times_s = _sample_times(duration_s, accel_rate_hz)
    for t in accel_times_s:
        accel = gravity_vector(initial_pitch_rad, initial_roll_rad + roll_rate_radps * t)
        accel = accel + rng.normal(0.0, accel_noise_std_mps2, size=3)
        frames.append(MotionFrame(
            stream=StreamType.ACCEL,
            data=accel,
            timestamp_ms=start_timestamp_ms + t * 1000.0,
        ))

    # Accel first on ties so the estimator is anchored before integrating
    stream_order = {StreamType.ACCEL: 0, StreamType.GYRO: 1}
    frames.sort(key=lambda f: (f.timestamp_ms, stream_order[f.stream]))
    return frames


def _sample_times(duration_s: float, rate_hz: float) -> np.ndarray:
    """Sample instants in [0, duration_s) at a fixed rate."""
    sample_count = int(np.ceil(duration_s * rate_hz - 1e-9))
    return np.arange(sample_count) / rate_hz
