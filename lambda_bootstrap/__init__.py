"""
Function runtime bootstrap.

Fetches invocations from the Runtime API, dispatches them to a registered
handler and reports the result.
"""

from .config import RuntimeConfig, load_config
from .core.exceptions import (
    BootstrapError,
    ConfigurationError,
    HandlerError,
    HandlerNotFoundError,
    TransportError,
)
from .models import DispatchResult, ErrorDescriptor, Failure, InvocationContext, Success
from .runtime import Runtime
from .services import HandlerRegistry

__version__ = "0.1.0"

__all__ = [
    "RuntimeConfig",
    "load_config",
    "BootstrapError",
    "ConfigurationError",
    "HandlerError",
    "HandlerNotFoundError",
    "TransportError",
    "DispatchResult",
    "ErrorDescriptor",
    "Failure",
    "InvocationContext",
    "Success",
    "Runtime",
    "HandlerRegistry",
]
