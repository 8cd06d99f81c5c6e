"""
Fission emulator configuration definition.

Loads configuration from environment variables and provides a Pydantic model.
Uses pydantic-settings for type safety and defaults.
"""

import sys
from typing import Literal

from pydantic import Field

from simfaas.common.core.config import BaseAppConfig


class FissionConfig(BaseAppConfig):
    """
    Configuration management for the Fission emulator.
    """

    # Server settings
    BIND_ADDR: str = Field(default="0.0.0.0:8888", description="Listen address")

    # Path settings
    FUNCTIONS_CONFIG_PATH: str = Field(
        default="config/functions.yml", description="Function definition file path"
    )

    # Function registration policy
    CREATE_UNDEFINED_FUNCTIONS: bool = Field(
        default=True, description="Register unknown functions on first reference"
    )

    # Defaults for functions created on demand (seconds)
    DEFAULT_RUNTIME: float = Field(default=1.0, ge=0, description="Execution duration")
    DEFAULT_COLD_START: float = Field(default=0.5, ge=0, description="Cold start duration")
    DEFAULT_KEEP_WARM: float = Field(default=60.0, ge=0, description="Idle keep-warm period")
    DEFAULT_MAX_INSTANCES: int = Field(default=100, ge=1, description="Instance limit")
    DEFAULT_ACQUIRE_TIMEOUT: float = Field(
        default=30.0, gt=0, description="Wait for a free instance (seconds)"
    )

    # Simulation housekeeping
    JANITOR_INTERVAL: float = Field(default=5.0, gt=0, description="Idle sweep interval")

    # Custom response generators
    CUSTOM_HANDLER_RESOLVER: Literal["name", "prefix"] = Field(
        default="name", description="How a function name maps to a custom handler key"
    )

    # FastAPI settings
    root_path: str = Field(default="", description="API root path (for proxy)")


# Load config as a singleton.
# pydantic-settings reads environment variables during instantiation.
try:
    config = FissionConfig()
except Exception as e:
    sys.stderr.write(f"Failed to load configuration: {e}\n")
    raise
