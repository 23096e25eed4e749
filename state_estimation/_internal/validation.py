"""Runtime contract validation utilities.

Internal module for parameter and input validation.
"""

from typing import Sequence, Union

import numpy as np


# Three-element vector as ndarray, list or tuple
Vector3Like = Union[np.ndarray, Sequence[float]]


def validate_open_unit_interval(value: float, name: str) -> None:
    """Validate that a value lies strictly between 0 and 1.

    Args:
        value: Value to validate
        name: Parameter name for error message

    Raises:
        ValueError: If value <= 0 or value >= 1
    """
    if not 0.0 < value < 1.0:
        raise ValueError(
            f"{name} must be in the open interval (0, 1), got {value}"
        )


def validate_finite(value: float, name: str) -> None:
    """Validate that a scalar is finite."""
    if not np.isfinite(value):
        raise ValueError(
            f"{name} must be finite, got {value}"
        )


def as_vector3(values: Vector3Like, name: str) -> np.ndarray:
    """Convert array-like input to a float vector of shape (3,).

    Values themselves are not checked; any float is accepted.

    Args:
        values: Array-like with three elements
        name: Parameter name for error message

    Returns:
        Float array of shape (3,)

    Raises:
        ValueError: If the input does not have shape (3,)
    """
    vector = np.asarray(values, dtype=float)
    if vector.shape != (3,):
        raise ValueError(
            f"{name} must have shape (3,), got {vector.shape}"
        )
    return vector
