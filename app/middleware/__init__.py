"""Middleware modules for AwareGuard Backend"""

from .cors import setup_cors
from .logging_middleware import LoggingMiddleware
from .rate_limit import add_rate_limiting, limiter
from .request_id import RequestIDMiddleware
from .security_headers import SecurityHeadersMiddleware

__all__ = [
    "setup_cors",
    "add_rate_limiting",
    "limiter",
    "SecurityHeadersMiddleware",
    "RequestIDMiddleware",
    "LoggingMiddleware",
]
