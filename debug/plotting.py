"""Matplotlib plotting utilities for orientation debugging.

Provides reusable plotting functions for analyzing estimator behavior.
"""

from typing import Optional
import numpy as np
import matplotlib.pyplot as plt
from matplotlib.figure import Figure

# Axis labels for plots
THETA_LABELS = [
    ('Pitch', 'θx'),
    ('Yaw', 'θy'),
    ('Roll', 'θz'),
]


def plot_orientation_history(
    time_s: np.ndarray,
    theta_history: np.ndarray,
    title: str = "Estimated Orientation",
    in_degrees: bool = True,
    reference_history: Optional[np.ndarray] = None,
    save_path: Optional[str] = None,
) -> Figure:
    """Plot estimated pitch, yaw and roll over time.

    Args:
        time_s: Time array (N,)
        theta_history: Estimate history (N, 3) in radians, [pitch, yaw, roll]
        title: Figure title
        in_degrees: Plot angles in degrees instead of radians
        reference_history: Optional ground-truth history (N, 3) in radians
        save_path: Optional path to save figure

    Returns:
        Matplotlib Figure object
    """
    theta_history = np.asarray(theta_history, dtype=float)
    if theta_history.ndim != 2 or theta_history.shape[1] != 3:
        raise ValueError(
            f"theta_history must have shape (N, 3), got {theta_history.shape}"
        )
    if len(time_s) != theta_history.shape[0]:
        raise ValueError(
            f"time_s has {len(time_s)} samples, theta_history has "
            f"{theta_history.shape[0]}"
        )

    convert = np.rad2deg if in_degrees else (lambda values: values)
    unit = 'deg' if in_degrees else 'rad'

    fig, axes = plt.subplots(3, 1, figsize=(10, 9), sharex=True)
    fig.suptitle(title, fontsize=14)

    for idx, (name, symbol) in enumerate(THETA_LABELS):
        ax = axes[idx]
        ax.plot(time_s, convert(theta_history[:, idx]), 'r-', label='Estimated', linewidth=1.5)
        if reference_history is not None:
            ax.plot(time_s, convert(np.asarray(reference_history)[:, idx]), 'b--',
                    label='Reference', linewidth=1.0)

        ax.set_ylabel(f'{symbol} ({unit})')
        ax.set_title(name)
        ax.legend(loc='best')
        ax.grid(True, alpha=0.3)

    axes[-1].set_xlabel('Time (s)')
    plt.tight_layout()

    if save_path:
        plt.savefig(save_path, dpi=150, bbox_inches='tight')

    return fig
