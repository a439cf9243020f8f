"""Collect Firefly III financial data into report snapshots."""

__version__ = "0.1.0"
