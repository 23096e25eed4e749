"""IMU sensor fusion mathematics.

Provides low-level functions for computing camera orientation from IMU data.
The camera's IMU coordinate frame is assumed to be:
    - X-axis: right (pitch sensor axis)
    - Y-axis: down along gravity when level (yaw sensor axis)
    - Z-axis: forward, out of the lens (roll sensor axis)

Orientation theta is stored as (pitch, yaw, roll) about the rendered model's
axes. The sensor is mounted so that:
    - model pitch turns opposite to the sensor Z rate
    - model yaw turns opposite to the sensor Y rate
    - model roll turns with the sensor X rate
"""

from typing import Tuple

import numpy as np


def tilt_from_accelerometer(acceleration: np.ndarray) -> Tuple[float, float]:
    """Compute absolute tilt angles from the measured gravity vector.

    Only valid when the camera is quasi-static; linear acceleration during
    motion corrupts the estimate. The zero vector yields (0.0, 0.0).

    Args:
        acceleration: Accelerometer reading [a_x, a_y, a_z]

    Returns:
        Tuple of (pitch_rad, roll_rad)
    """
    accel_x, accel_y, accel_z = acceleration
    roll_rad = np.arctan2(accel_y, accel_z)
    pitch_rad = np.arctan2(accel_x, np.sqrt(accel_y * accel_y + accel_z * accel_z))
    return float(pitch_rad), float(roll_rad)


def gyro_timestep_s(timestamp_ms: float, previous_timestamp_ms: float) -> float:
    """Elapsed time between two gyro samples, in seconds.

    Negative when timestamps go backwards; callers decide what to do with it.
    """
    return (timestamp_ms - previous_timestamp_ms) / 1000.0


def integrate_gyroscope(
    angular_rate: np.ndarray,
    timestep_s: float,
) -> np.ndarray:
    """Integrate angular rate over one timestep.

    Simple Euler integration: delta = omega * dt

    Args:
        angular_rate: Scaled gyroscope reading [omega_x, omega_y, omega_z]
        timestep_s: Time step for integration in seconds

    Returns:
        Angle change per sensor axis in radians

    Note:
        Smooth but drifts over time due to gyroscope bias.
    """
    return angular_rate * timestep_s


def apply_gyro_delta(
    theta: Tuple[float, float, float],
    delta: np.ndarray,
) -> Tuple[float, float, float]:
    """Apply a sensor-frame angle change to (pitch, yaw, roll).

    Args:
        theta: Current (pitch_rad, yaw_rad, roll_rad)
        delta: Angle change per sensor axis [d_x, d_y, d_z]

    Returns:
        Updated (pitch_rad, yaw_rad, roll_rad)
    """
    pitch_rad, yaw_rad, roll_rad = theta
    return (
        pitch_rad - float(delta[2]),
        yaw_rad - float(delta[1]),
        roll_rad + float(delta[0]),
    )


def blend_angle(
    previous_angle_rad: float,
    measured_angle_rad: float,
    alpha: float,
) -> float:
    """Complementary filter update for a single axis.

    theta = alpha * theta_prev + (1 - alpha) * theta_accel

    The alpha term acts as the high-pass path for gyro-integrated change and
    the (1 - alpha) term as the low-pass path that cancels drift.
    """
    return previous_angle_rad * alpha + measured_angle_rad * (1 - alpha)


def compute_complementary_filter_alpha(
    time_constant_s: float,
    sampling_period_s: float,
) -> float:
    """Compute complementary filter coefficient alpha.

    alpha = tau / (tau + T_s)

    where:
        tau = filter time constant (larger = trust gyro more)
        T_s = sampling period of the blended (accelerometer) stream

    Args:
        time_constant_s: Filter time constant in seconds
        sampling_period_s: Sampling period in seconds

    Returns:
        Filter coefficient alpha in range (0, 1)

    Raises:
        ValueError: If time_constant_s or sampling_period_s is not positive
    """
    if time_constant_s <= 0:
        raise ValueError(
            f"time_constant_s must be positive, got {time_constant_s}"
        )
    if sampling_period_s <= 0:
        raise ValueError(
            f"sampling_period_s must be positive, got {sampling_period_s}"
        )

    alpha = time_constant_s / (time_constant_s + sampling_period_s)
    return alpha
