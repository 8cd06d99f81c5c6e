"""
Custom response generators.

A function invoked with the X-CustomFn header gets its simulated response
replaced by the output of a generator. The generator is chosen by resolving
the function name to a key and looking that key up in a fixed registry.
"""

import importlib
import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Callable, Dict, Mapping

from .exceptions import CustomHandlerNotFoundError

logger = logging.getLogger("fission.custom_handlers")

CUSTOM_FN_HEADER = "X-CustomFn"

CustomFn = Callable[[bytes], bytes]
Resolver = Callable[[str], str]


@dataclass(frozen=True)
class CustomHandler:
    """
    Immutable dispatcher from function names to response generators.

    Attributes:
        resolve: maps a function name to a registry key; may raise
        handlers: registry of generators by key
    """

    resolve: Resolver
    handlers: Mapping[str, CustomFn] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "handlers", MappingProxyType(dict(self.handlers)))

    def execute(self, function_name: str, payload: bytes) -> bytes:
        """
        Run the generator registered for function_name on payload.

        Raises:
            CustomHandlerNotFoundError: the resolved key is not registered
            Exception: anything raised by the resolver or the generator
        """
        key = self.resolve(function_name)

        fn = self.handlers.get(key)
        if fn is None:
            raise CustomHandlerNotFoundError(key)

        return fn(payload)


# ===========================================
# Resolvers
# ===========================================


def resolve_by_name(function_name: str) -> str:
    return function_name


def resolve_by_prefix(function_name: str) -> str:
    """'resize-image-7' -> 'resize'"""
    return function_name.split("-", 1)[0]


RESOLVERS: Dict[str, Resolver] = {
    "name": resolve_by_name,
    "prefix": resolve_by_prefix,
}


# ===========================================
# Generators
# ===========================================


def echo(payload: bytes) -> bytes:
    return payload


def load_generator(target: str) -> CustomFn:
    """
    Import a generator from a "package.module:callable" reference.
    """
    module_name, sep, attr = target.partition(":")
    if not sep or not module_name or not attr:
        raise ValueError(f"invalid custom handler reference: {target!r}")

    module = importlib.import_module(module_name)
    fn = getattr(module, attr)
    if not callable(fn):
        raise TypeError(f"custom handler {target!r} is not callable")
    return fn


def build_custom_handler(resolver: str, references: Mapping[str, str]) -> CustomHandler:
    """
    Build the dispatcher from configuration.

    Args:
        resolver: name of an entry in RESOLVERS
        references: registry key -> "package.module:callable"
    """
    if resolver not in RESOLVERS:
        raise ValueError(f"unknown custom handler resolver: {resolver}")

    handlers = {key: load_generator(target) for key, target in references.items()}
    if handlers:
        logger.info(f"Loaded {len(handlers)} custom handlers: {sorted(handlers)}")
    return CustomHandler(resolve=RESOLVERS[resolver], handlers=handlers)
