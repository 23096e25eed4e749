"""Debug module for estimator visualization.

Provides tools for inspecting rotation estimator behavior:
- plot_orientation_history: Plot pitch, yaw and roll over time
"""

from debug.plotting import plot_orientation_history

__all__ = [
    'plot_orientation_history',
]
