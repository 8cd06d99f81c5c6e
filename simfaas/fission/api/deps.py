"""
Dependency Injection for the emulator API.

Manage request handler dependencies using FastAPI Depends.
"""

from typing import Annotated

from fastapi import Depends, Request

from simfaas.platform import Platform

from ..core.router import WildcardRouter
from ..services.fission import Fission


def get_fission(request: Request) -> Fission:
    return request.app.state.fission


def get_router(request: Request) -> WildcardRouter:
    return request.app.state.router


def get_platform(request: Request) -> Platform:
    return request.app.state.platform


FissionDep = Annotated[Fission, Depends(get_fission)]
RouterDep = Annotated[WildcardRouter, Depends(get_router)]
PlatformDep = Annotated[Platform, Depends(get_platform)]
