"""Kubernetes operator that manages Better Stack monitors, heartbeats and monitor groups."""

__version__ = "0.1.0"
