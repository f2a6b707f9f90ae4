"""
API routes for the spec gateway
"""

from . import health, specs, proxy

__all__ = ["health", "specs", "proxy"]
