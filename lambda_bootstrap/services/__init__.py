"""
Services package.

Provides the handler layer and the Runtime API integration.
"""

from .context_builder import ContextBuilder
from .handler import (
    AsyncTypedHandler,
    AsyncUntypedHandler,
    Handler,
    HandlerVariant,
    SyncTypedHandler,
    SyncUntypedHandler,
)
from .handler_registry import HandlerRegistry
from .runtime_client import RuntimeAPIClient

__all__ = [
    "ContextBuilder",
    "AsyncTypedHandler",
    "AsyncUntypedHandler",
    "Handler",
    "HandlerVariant",
    "SyncTypedHandler",
    "SyncUntypedHandler",
    "HandlerRegistry",
    "RuntimeAPIClient",
]
