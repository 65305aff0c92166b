"""
Logging setup for the API process and CLI.
"""

from .setup import configure_logging

__all__ = ["configure_logging"]
