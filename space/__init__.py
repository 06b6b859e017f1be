"""Restore build and package-manager caches from a persistent cache volume."""

__version__ = "0.1.0"
