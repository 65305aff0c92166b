"""Udyam registration backend: PIN code resolution and submission pipeline."""

__version__ = "0.1.0"
