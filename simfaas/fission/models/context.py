"""
Invocation context model.

Encapsulates everything the invocation path needs from one HTTP request.
"""

from dataclasses import dataclass
from typing import Awaitable, Callable, Optional


async def _no_body() -> bytes:
    return b""


@dataclass(frozen=True)
class InvocationContext:
    """
    Per-request value object for /fission-function/ invocations.

    Decouples the orchestrator from FastAPI's Request object. The body is
    only read through read_body, and only when custom_fn is set.

    Attributes:
        path: request path without the query string
        function_name: last path segment
        runtime: execution duration override in seconds (None: configured)
        custom_fn: whether the custom-function header was present
        read_body: coroutine function returning the full request body
    """

    path: str
    function_name: str
    runtime: Optional[float] = None
    custom_fn: bool = False
    read_body: Callable[[], Awaitable[bytes]] = _no_body
