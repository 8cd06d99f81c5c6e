"""
HTTP handlers of the emulated Fission endpoints.

Responses mirror the emulated platform: plain-text bodies, error messages
terminated by a newline, JSON only for execution reports.
"""

import logging
import math
from typing import Optional

from fastapi import Request, Response
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import ValidationError
from pydantic_core import PydanticSerializationError
from starlette.requests import ClientDisconnect

from simfaas.platform import PlatformError

from ..core.custom_handlers import CUSTOM_FN_HEADER
from ..core.exceptions import FissionError, FunctionNotFoundError, InputError
from ..core.function_name import function_name_from_path
from ..core.router import RouterBuilder, WildcardRouter, strip_query
from ..models import InvocationContext, ObjectMeta
from ..services.fission import Fission

logger = logging.getLogger("fission.handlers")


def http_error(message: str, status_code: int) -> Response:
    return PlainTextResponse(message + "\n", status_code=status_code)


def parse_runtime(value: Optional[str]) -> Optional[float]:
    """
    Parse the runtime query parameter (seconds).

    Absent or empty means no override.

    Raises:
        InputError: not a finite number
    """
    if not value:
        return None
    try:
        seconds = float(value)
    except ValueError:
        raise InputError(f"invalid runtime {value!r}: not a number")
    if not math.isfinite(seconds):
        raise InputError(f"invalid runtime {value!r}: not a finite number")
    return seconds


def build_invocation_context(request: Request) -> InvocationContext:
    """
    Read everything the invocation path needs from the request, once.

    Raises:
        InputError: invalid runtime query parameter
    """
    path = strip_query(request.url.path)
    return InvocationContext(
        path=path,
        function_name=function_name_from_path(path),
        runtime=parse_runtime(request.query_params.get("runtime")),
        custom_fn=bool(request.headers.get(CUSTOM_FN_HEADER)),
        read_body=request.body,
    )


class FissionHandlers:
    """Binds the emulated endpoints to a Fission facade."""

    def __init__(self, fission: Fission):
        self.fission = fission

    def build_router(self) -> WildcardRouter:
        """
        Route table of the emulated endpoints.

        Later registrations win on overlapping paths.
        """
        return (
            RouterBuilder()
            .handle(r"/v2/functions/.*", self.handle_functions_get)
            .handle(r"/v2/tapService", self.handle_tap_service)
            .handle(r"/v2/getServiceForFunction", self.handle_get_service_for_function)
            .handle(r"/fission-function/.*", self.handle_function_run)
            .build()
        )

    async def handle_get_service_for_function(self, request: Request) -> Response:
        """Emulates the /v2/getServiceForFunction endpoint."""
        try:
            body = await request.body()
        except ClientDisconnect:
            return http_error("failed to read function metadata", 400)

        try:
            meta = ObjectMeta.model_validate_json(body)
        except ValidationError:
            return http_error("failed to parse function metadata", 400)

        try:
            svc = self.fission.get_service_for_function(meta.name)
        except FunctionNotFoundError as e:
            return http_error(str(e), 404)

        return PlainTextResponse(svc)

    async def handle_tap_service(self, request: Request) -> Response:
        """Emulates the /v2/tapService endpoint."""
        try:
            body = await request.body()
        except ClientDisconnect as e:
            logger.warning(f"Failed to parse service to tap: {e}")
            return http_error("failed to parse service to tap", 400)

        svc_url = body.decode("utf-8", errors="replace")
        try:
            self.fission.tap_service(svc_url)
        except FissionError as e:
            logger.warning(f"{svc_url}: failed to prewarm: {e}")
            return http_error("failed to parse service to tap", 400)

        logger.info(f"{svc_url}: prewarm scheduled")
        return Response(status_code=200)

    async def handle_functions_get(self, request: Request) -> Response:
        """
        Emulates the /v2/functions/.* endpoints.

        Always an empty object.
        """
        return JSONResponse({})

    async def handle_function_run(self, request: Request) -> Response:
        """
        Emulates the /fission-function/.* endpoints.

        The runtime query parameter overrides the runtime of the function.
        """
        try:
            context = build_invocation_context(request)
            report = await self.fission.run(context)
        except (FissionError, PlatformError) as e:
            logger.warning(f"Run of {request.url.path} failed: {e}")
            return http_error(str(e), 400)

        try:
            result = report.model_dump_json()
        except (PydanticSerializationError, ValueError) as e:
            logger.error(f"Failed to serialize report of {context.function_name}: {e}")
            return http_error(str(e), 500)

        return Response(content=result, status_code=200, media_type="application/json")
