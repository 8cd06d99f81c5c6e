"""
Where: simfaas/fission/core/function_name.py
What: Derive function names from invocation paths and service URLs.
Why: Both derivations must produce the same names the platform is keyed by.
"""

from urllib.parse import urlsplit


def function_name_from_path(path: str) -> str:
    """
    Return the last '/'-delimited segment of an invocation path.

    "/fission-function/ns/hello" -> "hello"
    """
    return path.rsplit("/", 1)[-1]


def function_name_from_service_url(service_url: str) -> str:
    """
    Return the host component of a service URL.

    The service name of a function is the function name itself, so the host
    of "http://hello.fission/" is the function "hello.fission". The host keeps
    its port and drops any userinfo. A URL that cannot be parsed is used
    verbatim; a URL without a host yields "".
    """
    try:
        netloc = urlsplit(service_url).netloc
    except ValueError:
        return service_url
    return netloc.rpartition("@")[2]
