"""
Data model definitions package.
"""

from .context import InvocationContext
from .metadata import ObjectMeta

__all__ = [
    "InvocationContext",
    "ObjectMeta",
]
