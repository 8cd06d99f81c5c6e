"""
Platform domain models.

Function configuration, simulated instances and execution reports.
"""

from dataclasses import dataclass
from datetime import datetime

from pydantic import BaseModel, Field


class FunctionConfig(BaseModel):
    """
    Simulation parameters of a single function.

    All durations are in seconds.
    """

    runtime: float = Field(default=1.0, ge=0, description="Execution duration")
    cold_start: float = Field(default=0.5, ge=0, description="Instance provisioning duration")
    keep_warm: float = Field(
        default=60.0, ge=0, description="Idle time before an instance is reclaimed"
    )
    max_instances: int = Field(default=100, ge=1, description="Instance limit")
    acquire_timeout: float = Field(
        default=30.0, gt=0, description="Max wait for a free instance when at the limit"
    )
    response: str = Field(default="", description="Payload returned by every execution")


@dataclass
class Function:
    """A function known to the platform."""

    name: str
    config: FunctionConfig


@dataclass
class FunctionInstance:
    """
    A simulated function instance.

    Equality and hashing use the id only, so last_used_at stays mutable.
    """

    id: str
    function_name: str
    created_at: float = 0.0
    last_used_at: float = 0.0

    def __eq__(self, other):
        if isinstance(other, FunctionInstance):
            return self.id == other.id
        return False

    def __hash__(self):
        return hash(self.id)


class ExecutionReport(BaseModel):
    """Result of one simulated invocation."""

    function: str
    instance_id: str
    cold_start: bool = False
    cold_start_duration: float = 0.0
    runtime: float = 0.0
    started_at: datetime
    finished_at: datetime
    response: str = ""
