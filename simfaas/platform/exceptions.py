"""
Simulated platform exceptions.
"""


class PlatformError(Exception):
    """Base exception class for the simulated platform."""

    pass


class FunctionNotDefinedError(PlatformError):
    """Raised when an operation references a function that was never defined."""

    def __init__(self, function_name: str):
        self.function_name = function_name
        super().__init__(f"function not defined: {function_name}")


class CapacityExceededError(PlatformError):
    """Raised when no instance becomes available within the acquire timeout."""

    def __init__(self, function_name: str, timeout: float):
        self.function_name = function_name
        self.timeout = timeout
        super().__init__(
            f"no instance of {function_name} available within {timeout:.2f}s"
        )
