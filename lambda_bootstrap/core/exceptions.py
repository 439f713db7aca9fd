"""
Custom exception classes.

Only HandlerError and its subclasses are recoverable per invocation; every
other BootstrapError terminates the process.
"""


class BootstrapError(Exception):
    """Base exception class for the runtime bootstrap."""

    pass


class ConfigurationError(BootstrapError):
    """Raised when required settings are missing or malformed."""

    pass


class TransportError(BootstrapError):
    """Raised when a Runtime API request fails."""

    def __init__(self, operation: str, cause: Exception):
        self.operation = operation
        self.cause = cause
        super().__init__(f"Runtime API {operation} failed: {cause}")


class RuntimeProtocolError(BootstrapError):
    """Raised when the Runtime API returns something the loop cannot act on."""

    pass


class HandlerNotFoundError(BootstrapError):
    """Raised when the configured handler name is not registered."""

    def __init__(self, handler_name: str):
        self.handler_name = handler_name
        super().__init__(f"Handler not found: {handler_name}")


class InvalidHandlerError(BootstrapError):
    """Raised at registration when a callable matches no handler variant."""

    pass


class HandlerError(BootstrapError):
    """Per-invocation failure reported back to the control plane."""

    pass


class HandlerDecodeError(HandlerError):
    """Raised when the invocation payload cannot be decoded for the handler."""

    pass


class HandlerEncodeError(HandlerError):
    """Raised when the handler result cannot be encoded."""

    pass


class RegistryFrozenError(BootstrapError):
    """Raised when registering a handler after the loop has started."""

    pass
