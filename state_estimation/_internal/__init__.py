"""Internal helpers for the state estimation package."""
