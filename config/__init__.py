"""Shipped estimator parameter files."""
