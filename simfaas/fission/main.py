"""
Fission emulator - Fission compatible router and control plane

Emulates a subset of the Fission HTTP API on top of the simulated Platform
so load generators can drive it like a real Fission deployment.
"""

from contextlib import asynccontextmanager
from datetime import datetime, timezone
import logging

from fastapi import FastAPI, Request

from simfaas.common.core.logging_config import setup_logging

from .api.deps import PlatformDep, RouterDep
from .config import FissionConfig, config
from .exceptions import register_exception_handlers
from .lifecycle import manage_lifespan
from .middleware import request_id_middleware

# Logger setup
setup_logging(config.LOG_CONFIG_PATH)
logger = logging.getLogger("fission.main")

ALL_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"]


def create_app(fission_config: FissionConfig = config) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        async with manage_lifespan(app, fission_config):
            yield

    app = FastAPI(
        title="SimFaaS Fission Emulator",
        version="0.1.0",
        lifespan=lifespan,
        root_path=fission_config.root_path,
    )

    app.middleware("http")(request_id_middleware)
    register_exception_handlers(app)

    @app.get("/health")
    async def health_check(platform: PlatformDep):
        """Health check endpoint."""
        return {
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "pools": platform.stats(),
        }

    @app.api_route("/{path:path}", methods=ALL_METHODS, include_in_schema=False)
    async def fission_handler(request: Request, path: str, router: RouterDep):
        """
        Catch-all route: everything else goes through the wildcard router.
        """
        return await router.dispatch(request)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    host, _, port = config.BIND_ADDR.rpartition(":")
    uvicorn.run(app, host=host or "0.0.0.0", port=int(port), log_config=None)
