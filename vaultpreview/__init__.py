"""Inline document preview: content proxy gateway and viewer controller."""

__version__ = "1.0.0"
