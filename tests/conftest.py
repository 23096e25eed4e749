from __future__ import annotations

from pathlib import Path

import pytest

from state_estimation import RotationEstimator


REPO_ROOT = Path(__file__).resolve().parent.parent


@pytest.fixture
def estimator_params_path() -> Path:
    """Path to the shipped estimator parameters YAML."""
    return REPO_ROOT / 'config' / 'estimator_params.yaml'


@pytest.fixture
def estimator() -> RotationEstimator:
    """Estimator with default parameters (alpha = 0.98)."""
    return RotationEstimator()
