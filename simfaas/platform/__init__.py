"""
Simulated platform package.

Function definitions, instance pools and timed executions.
"""

from .exceptions import CapacityExceededError, FunctionNotDefinedError, PlatformError
from .models import ExecutionReport, Function, FunctionConfig, FunctionInstance
from .platform import Platform

__all__ = [
    "CapacityExceededError",
    "ExecutionReport",
    "Function",
    "FunctionConfig",
    "FunctionInstance",
    "FunctionNotDefinedError",
    "Platform",
    "PlatformError",
]
