"""Deterministic cache tags for container image builds."""

__version__ = "0.1.0"
