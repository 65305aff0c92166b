"""
HTTP clients for external services.
"""

from .base import APIClient
from .postal_pincode import PostalPincodeClient

__all__ = ["APIClient", "PostalPincodeClient"]
