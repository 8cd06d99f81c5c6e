import os

import httpx
import pytest
import pytest_asyncio

# Config is created at import time, so the environment is set at the top level.
os.environ["LOG_CONFIG_PATH"] = "/tmp/simfaas-missing-logging.yml"
os.environ["FUNCTIONS_CONFIG_PATH"] = "/tmp/simfaas-missing-functions.yml"

from simfaas.fission.api.handlers import FissionHandlers  # noqa: E402
from simfaas.fission.services.fission import Fission  # noqa: E402
from simfaas.platform import FunctionConfig, Platform  # noqa: E402


def fast_factory(name: str) -> FunctionConfig:
    return FunctionConfig(runtime=0.01, cold_start=0.0, keep_warm=60.0)


@pytest.fixture
def platform():
    return Platform()


@pytest.fixture
def make_fission(platform):
    def _make(create_undefined_functions=True, custom_fn=None, fn_factory=fast_factory):
        return Fission(
            platform=platform,
            fn_factory=fn_factory,
            create_undefined_functions=create_undefined_functions,
            custom_fn=custom_fn,
        )

    return _make


@pytest.fixture
def main_app():
    from simfaas.fission.main import create_app

    return create_app()


@pytest.fixture
def bind_fission(main_app):
    """Install a Fission facade on the app without running the lifespan."""

    def _bind(fission: Fission) -> Fission:
        main_app.state.fission = fission
        main_app.state.platform = fission.platform
        main_app.state.router = FissionHandlers(fission).build_router()
        return fission

    return _bind


@pytest_asyncio.fixture
async def async_client(main_app):
    transport = httpx.ASGITransport(app=main_app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
