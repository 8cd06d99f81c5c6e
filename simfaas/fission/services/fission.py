"""
Fission - emulation of a subset of the Fission control plane and router

Maps the emulated endpoints onto the simulated Platform:
- getServiceForFunction: function name -> service name (identical)
- tapService: asynchronous pre-warm of a function
- fission-function: synchronous invocation, with optional custom responses

Unknown functions can be created on first reference so load generators may
use function names that were never declared.
"""

import asyncio
import logging
from typing import Callable, Optional, Set

from simfaas.platform import ExecutionReport, Function, FunctionConfig, Platform

from ..core.custom_handlers import CustomHandler, resolve_by_name
from ..core.exceptions import (
    BackendError,
    CustomHandlerNotFoundError,
    FunctionNotFoundError,
    InputError,
)
from ..core.function_name import function_name_from_service_url
from ..models.context import InvocationContext

logger = logging.getLogger("fission.fission")


class Fission:
    def __init__(
        self,
        platform: Platform,
        fn_factory: Callable[[str], FunctionConfig],
        create_undefined_functions: bool = False,
        custom_fn: Optional[CustomHandler] = None,
    ):
        """
        Args:
            platform: simulated platform that owns functions and instances
            fn_factory: builds the config of a function created on demand
            create_undefined_functions: register unknown functions on first use
            custom_fn: dispatcher for requests carrying the custom-function header
        """
        self.platform = platform
        self.fn_factory = fn_factory
        self.create_undefined_functions = create_undefined_functions
        self.custom_fn = custom_fn or CustomHandler(resolve=resolve_by_name)
        self._taps: Set[asyncio.Task] = set()

    async def start(self) -> None:
        await self.platform.start()

    async def close(self) -> None:
        for task in list(self._taps):
            task.cancel()
        if self._taps:
            await asyncio.gather(*self._taps, return_exceptions=True)
        await self.platform.close()

    def get_service_for_function(self, fn_name: str) -> str:
        """
        Resolve the service of a function.

        The service name is the function name.

        Raises:
            FunctionNotFoundError: unknown function and auto-creation disabled
        """
        fn = self._lookup(fn_name)
        return fn.name

    def tap_service(self, service_url: str) -> None:
        """
        Deploy (or keep deployed) an instance of the function behind service_url.

        Returns as soon as the deployment is scheduled. Its outcome is only
        logged, never reported to the caller.

        Raises:
            InputError: empty service URL
            FunctionNotFoundError: unknown function and auto-creation disabled
        """
        if not service_url:
            raise InputError("no url provided to tap")

        fn = self._lookup(function_name_from_service_url(service_url))

        task = asyncio.create_task(self._deploy(fn))
        self._taps.add(task)
        task.add_done_callback(self._taps.discard)

    async def run(self, context: InvocationContext) -> ExecutionReport:
        """
        Run the function addressed by the invocation path.

        context.runtime overrides the configured runtime unless it is None.
        With context.custom_fn set, the report's response is replaced by the
        custom handler's output for the request body. That step happens after
        the simulated execution and is not part of its timing.

        Raises:
            FunctionNotFoundError: unknown function and auto-creation disabled
            PlatformError: the simulated execution failed
            CustomHandlerNotFoundError: no generator for the resolved key
            BackendError: the resolver or the generator failed, or the
                generator returned neither bytes nor str
        """
        fn_name = self._lookup(context.function_name).name
        report = await self.platform.run(fn_name, context.runtime)

        if context.custom_fn:
            body = await context.read_body()
            try:
                res = self.custom_fn.execute(fn_name, body)
            except CustomHandlerNotFoundError:
                raise
            except Exception as e:
                raise BackendError(fn_name, e) from e
            if isinstance(res, bytes):
                res = res.decode("utf-8", errors="replace")
            elif not isinstance(res, str):
                raise BackendError(
                    fn_name,
                    TypeError(f"custom handler returned {type(res).__name__}, expected bytes"),
                )
            report.response = res

        return report

    @property
    def pending_taps(self) -> int:
        return len(self._taps)

    def _lookup(self, fn_name: str) -> Function:
        self._create_if_undefined(fn_name)
        fn = self.platform.get(fn_name)
        if fn is None:
            raise FunctionNotFoundError(fn_name)
        return fn

    def _create_if_undefined(self, fn_name: str) -> None:
        if not self.create_undefined_functions:
            return
        fn, created = self.platform.define_if_absent(fn_name, self.fn_factory)
        if created:
            logger.info(
                f"Created new function {fn_name} with config: {fn.config.model_dump()}"
            )

    async def _deploy(self, fn: Function) -> None:
        try:
            await self.platform.deploy(fn)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error(f"{fn.name}: failed to prewarm: {e}")
