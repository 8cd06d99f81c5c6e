"""
Services package.

Provides the emulation facade and the function registry.
"""

from .fission import Fission
from .function_registry import FunctionRegistry

__all__ = [
    "Fission",
    "FunctionRegistry",
]
