"""
API Routes
"""

from . import form_schema, health, pincode, submit

__all__ = ["form_schema", "health", "pincode", "submit"]
