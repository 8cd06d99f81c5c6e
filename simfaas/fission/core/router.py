"""
Wildcard route matching.

Note:
    Provides functionality different from FastAPI's APIRouter.
    Patterns are regular expressions matched anywhere in the path and the
    most recently registered matching pattern wins, which is how the
    emulated platform's own router resolves overlapping routes.
"""

import logging
import re
from dataclasses import dataclass
from typing import Awaitable, Callable, List, Pattern, Tuple, Union

from fastapi import Request, Response
from fastapi.responses import PlainTextResponse

logger = logging.getLogger("fission.router")

Handler = Callable[[Request], Awaitable[Response]]

NOT_FOUND_BODY = "404 page not found\n"


@dataclass(frozen=True)
class Route:
    pattern: Pattern[str]
    handler: Handler


def strip_query(path: str) -> str:
    """Cut the path at the first '?' so query strings never take part in matching."""
    return path.split("?", 1)[0]


class WildcardRouter:
    """
    Frozen, ordered route table.

    Built once by RouterBuilder before serving; read-only afterwards.
    """

    def __init__(self, routes: Tuple[Route, ...]):
        self._routes = routes

    @property
    def routes(self) -> Tuple[Route, ...]:
        return self._routes

    def match(self, path: str) -> Union[Route, None]:
        """
        Return the last registered route whose pattern matches the path.

        Example: with "/v2/.*" registered before "/v2/tapService",
            match("/v2/tapService?x=1") -> the "/v2/tapService" route
        """
        path = strip_query(path)
        for route in reversed(self._routes):
            if route.pattern.search(path):
                return route
        return None

    async def dispatch(self, request: Request) -> Response:
        route = self.match(request.url.path)
        if route is None:
            logger.debug(f"No route matched {request.url.path}")
            return PlainTextResponse(NOT_FOUND_BODY, status_code=404)
        return await route.handler(request)


class RouterBuilder:
    """Append-only route registration used during application setup."""

    def __init__(self):
        self._routes: List[Route] = []

    def handle(self, pattern: Union[str, Pattern[str]], handler: Handler) -> "RouterBuilder":
        if isinstance(pattern, str):
            pattern = re.compile(pattern)
        self._routes.append(Route(pattern=pattern, handler=handler))
        return self

    def build(self) -> WildcardRouter:
        return WildcardRouter(tuple(self._routes))
