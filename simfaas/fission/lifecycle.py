"""
Where: simfaas/fission/lifecycle.py
What: Emulator startup/shutdown orchestration for shared resources.
Why: Keep main.py focused on app assembly while preserving lifecycle behavior.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI

from simfaas.platform import Platform

from .api.handlers import FissionHandlers
from .config import FissionConfig
from .core.custom_handlers import build_custom_handler
from .services.fission import Fission
from .services.function_registry import FunctionRegistry

logger = logging.getLogger("fission.main")


def build_fission(fission_config: FissionConfig, registry: FunctionRegistry) -> Fission:
    """Wire the platform, the declared functions and the custom handlers."""
    platform = Platform(janitor_interval=fission_config.JANITOR_INTERVAL)
    for name, fn_config in registry.functions.items():
        platform.define(name, fn_config)

    custom_fn = build_custom_handler(
        fission_config.CUSTOM_HANDLER_RESOLVER, registry.custom_handlers
    )

    return Fission(
        platform=platform,
        fn_factory=registry.function_factory,
        create_undefined_functions=fission_config.CREATE_UNDEFINED_FUNCTIONS,
        custom_fn=custom_fn,
    )


@asynccontextmanager
async def manage_lifespan(app: FastAPI, fission_config: FissionConfig) -> AsyncIterator[None]:
    """Manage application lifecycle."""
    fission: Optional[Fission] = None

    try:
        function_registry = FunctionRegistry(fission_config)
        function_registry.load_functions_config()

        fission = build_fission(fission_config, function_registry)
        await fission.start()

        app.state.function_registry = function_registry
        app.state.fission = fission
        app.state.platform = fission.platform
        app.state.router = FissionHandlers(fission).build_router()

        logger.info(
            "Fission emulator initialized (functions: %d, create undefined: %s)",
            len(function_registry.functions),
            fission_config.CREATE_UNDEFINED_FUNCTIONS,
        )
        yield
    finally:
        if fission:
            logger.info("Fission emulator shutting down, closing platform.")
            await fission.close()
