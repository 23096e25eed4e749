"""Rotation estimator configuration parameters.

Single source of truth for estimator calibration settings.
See config/estimator_params.yaml for parameter values.
"""

from dataclasses import dataclass
from typing import Tuple

import numpy as np
import yaml

from state_estimation._internal.imu_fusion import compute_complementary_filter_alpha
from state_estimation._internal.validation import (
    as_vector3,
    validate_finite,
    validate_open_unit_interval,
)


@dataclass(frozen=True)
class RotationEstimatorConfig:
    """Configuration parameters for the rotation estimator.

    All parameters immutable after construction (frozen=True).

    Attributes:
        complementary_filter_alpha: Weight given to the gyro-propagated
            estimate when blending with accelerometer tilt. Higher values
            trust the gyroscope more but drift; lower values follow the
            accelerometer and pick up motion disturbances. Range (0, 1).
        gyro_scale: Per-axis calibration factors [x, y, z] converting raw
            gyro units to rad/s.
        initial_yaw_rad: Heading assigned on the first accelerometer sample.
            Gravity carries no heading information, so this is a convention.
        clamp_negative_timestep: Treat gyro timestamps that go backwards as
            a zero-length step instead of integrating in reverse.
        reject_zero_acceleration: Skip all-zero accelerometer samples
            instead of treating them as zero tilt.
    """

    complementary_filter_alpha: float = 0.98
    gyro_scale: Tuple[float, float, float] = (1.0, 1.0, 1.0)
    initial_yaw_rad: float = float(np.pi)
    clamp_negative_timestep: bool = False
    reject_zero_acceleration: bool = False

    def __post_init__(self) -> None:
        """Validate parameters satisfy constraints."""
        validate_open_unit_interval(
            self.complementary_filter_alpha, 'complementary_filter_alpha'
        )
        scale = as_vector3(self.gyro_scale, 'gyro_scale')
        if not np.all(np.isfinite(scale)):
            raise ValueError(
                f"gyro_scale must contain finite values, got {self.gyro_scale}"
            )
        validate_finite(self.initial_yaw_rad, 'initial_yaw_rad')
        # Normalize to a hashable tuple of floats
        object.__setattr__(self, 'gyro_scale', tuple(float(s) for s in scale))

    @property
    def gyro_scale_array(self) -> np.ndarray:
        """Gyro scale factors as a numpy array."""
        return np.array(self.gyro_scale, dtype=float)

    @classmethod
    def from_yaml(cls, yaml_path: str) -> 'RotationEstimatorConfig':
        """Load configuration from YAML file.

        Alpha is read from ``complementary_filter_alpha`` when present,
        otherwise derived from ``complementary_filter_time_constant_s`` and
        ``sampling_period_s``.

        Args:
            yaml_path: Path to YAML file containing estimator parameters

        Returns:
            RotationEstimatorConfig instance

        Raises:
            FileNotFoundError: If YAML file does not exist
            ValueError: If required parameters missing or invalid
        """
        with open(yaml_path, 'r') as file:
            config = yaml.safe_load(file) or {}

        if 'complementary_filter_alpha' in config:
            alpha = config['complementary_filter_alpha']
        elif (
            'complementary_filter_time_constant_s' in config
            and 'sampling_period_s' in config
        ):
            alpha = compute_complementary_filter_alpha(
                config['complementary_filter_time_constant_s'],
                config['sampling_period_s'],
            )
        else:
            raise ValueError(
                f"{yaml_path} must define complementary_filter_alpha or "
                f"complementary_filter_time_constant_s and sampling_period_s"
            )

        return cls(
            complementary_filter_alpha=float(alpha),
            gyro_scale=tuple(config.get('gyro_scale', (1.0, 1.0, 1.0))),
            initial_yaw_rad=float(config.get('initial_yaw_rad', np.pi)),
            clamp_negative_timestep=bool(
                config.get('clamp_negative_timestep', False)
            ),
            reject_zero_acceleration=bool(
                config.get('reject_zero_acceleration', False)
            ),
        )
