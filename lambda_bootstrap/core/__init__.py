"""
Core logic package.

Provides configuration, error taxonomy, tracing and logging shared by the runtime.
"""

from .exceptions import (
    BootstrapError,
    ConfigurationError,
    HandlerDecodeError,
    HandlerEncodeError,
    HandlerError,
    HandlerNotFoundError,
    InvalidHandlerError,
    RegistryFrozenError,
    RuntimeProtocolError,
    TransportError,
)
from .trace import TraceId

__all__ = [
    "BootstrapError",
    "ConfigurationError",
    "HandlerDecodeError",
    "HandlerEncodeError",
    "HandlerError",
    "HandlerNotFoundError",
    "InvalidHandlerError",
    "RegistryFrozenError",
    "RuntimeProtocolError",
    "TransportError",
    "TraceId",
]
