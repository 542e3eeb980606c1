"""Atomic CSV feed generation and heartbeat scheduling."""

__version__ = "0.1.0"
