"""
Data model definitions package.

Aggregates Pydantic models for use in other modules.
"""

from .context import InvocationContext
from .invocation import Invocation
from .result import DispatchResult, ErrorDescriptor, Failure, Success

__all__ = [
    "InvocationContext",
    "Invocation",
    "DispatchResult",
    "ErrorDescriptor",
    "Failure",
    "Success",
]
