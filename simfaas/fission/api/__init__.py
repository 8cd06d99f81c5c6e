"""
HTTP API package.
"""

from .handlers import FissionHandlers

__all__ = [
    "FissionHandlers",
]
