"""
Core logic package.

Routing, function name derivation, custom response generators and errors.
"""

from .custom_handlers import CUSTOM_FN_HEADER, CustomHandler, build_custom_handler
from .function_name import function_name_from_path, function_name_from_service_url
from .router import RouterBuilder, WildcardRouter

__all__ = [
    "CUSTOM_FN_HEADER",
    "CustomHandler",
    "build_custom_handler",
    "function_name_from_path",
    "function_name_from_service_url",
    "RouterBuilder",
    "WildcardRouter",
]
