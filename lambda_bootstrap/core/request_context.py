"""
RequestContext management.
Use ContextVar to expose the current invocation's Trace ID and Request ID to logging.
"""

from contextvars import ContextVar
from typing import Optional
from .trace import TraceId


# Context variable for Trace ID (full header format).
_trace_id_var: ContextVar[Optional[str]] = ContextVar("trace_id", default=None)
# Context variable for the invocation's AWS Request ID.
_request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)


def get_trace_id() -> Optional[str]:
    """Get the current Trace ID."""
    return _trace_id_var.get()


def get_request_id() -> Optional[str]:
    """Get the current Request ID."""
    return _request_id_var.get()


def set_request_id(request_id: str) -> None:
    """Set the Request ID of the invocation being processed."""
    _request_id_var.set(request_id)


def set_trace_id(trace_id_str: str) -> str:
    """
    Set the Trace ID.

    Args:
        trace_id_str: Lambda-Runtime-Trace-Id header string

    Returns:
        The normalized Trace ID string that was set
    """
    trace = str(TraceId.parse(trace_id_str))
    _trace_id_var.set(trace)
    return trace


def clear_trace_id() -> None:
    """Clear the Trace ID and Request ID context."""
    _trace_id_var.set(None)
    _request_id_var.set(None)
