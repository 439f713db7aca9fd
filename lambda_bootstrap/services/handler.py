"""
Handler abstraction.

Normalizes the supported calling conventions into one contract:
``apply(input_data, context) -> DispatchResult``.

Variants:
- SyncUntypedHandler:  fn(event: dict, context) -> dict
- AsyncUntypedHandler: fn(event: dict, context, completion) -> None, or ``async def``
- SyncTypedHandler:    fn(event: I, context) -> O
- AsyncTypedHandler:   fn(event: I, context, completion) -> None, or ``async def``

Callback-style handlers MUST invoke ``completion`` exactly once. A handler that
never completes and never raises blocks ``apply`` forever. Raising before
completion yields a Failure; raising after completion keeps the completed value.
"""

import asyncio
import inspect
import json
import logging
import threading
from enum import Enum
from typing import Any, Callable, Dict, Optional

from pydantic import PydanticUserError, TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError

from ..core.exceptions import HandlerDecodeError, HandlerEncodeError, InvalidHandlerError
from ..models.context import InvocationContext
from ..models.result import DispatchResult, Failure, Success

logger = logging.getLogger("bootstrap.handler")


class HandlerVariant(str, Enum):
    SYNC_UNTYPED = "sync_untyped"
    ASYNC_UNTYPED = "async_untyped"
    SYNC_TYPED = "sync_typed"
    ASYNC_TYPED = "async_typed"


class CompletionGate:
    """
    Single-use synchronization gate for callback-style handlers.

    The first ``complete`` call wins; later calls are logged and ignored.
    """

    def __init__(self):
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._value: Any = None

    def complete(self, value: Any = None) -> None:
        with self._lock:
            if self._event.is_set():
                logger.warning("Completion invoked more than once; ignoring extra result")
                return
            self._value = value
            self._event.set()

    @property
    def done(self) -> bool:
        return self._event.is_set()

    def wait(self) -> Any:
        self._event.wait()
        return self._value


class JsonObjectCodec:
    """Untyped wire codec: JSON object <-> dict."""

    def decode(self, data: bytes) -> Dict[str, Any]:
        try:
            value = json.loads(data)
        except (ValueError, UnicodeDecodeError) as e:
            raise HandlerDecodeError(f"Invalid JSON payload: {e}") from e
        if not isinstance(value, dict):
            raise HandlerDecodeError(f"Expected a JSON object, got {type(value).__name__}")
        return value

    def encode(self, value: Any) -> bytes:
        try:
            return json.dumps(value, allow_nan=False).encode("utf-8")
        except (TypeError, ValueError) as e:
            raise HandlerEncodeError(f"Handler result is not JSON serializable: {e}") from e


class TypeAdapterCodec:
    """Typed wire codec backed by pydantic TypeAdapter."""

    def __init__(self, input_type: Any, output_type: Any = None):
        self.input_type = input_type
        self.output_type = output_type
        try:
            self._input = TypeAdapter(input_type)
            # Unknown output type: serialize by the value's runtime type.
            self._output = TypeAdapter(output_type if output_type is not None else Any)
        except PydanticUserError as e:
            raise InvalidHandlerError(f"Unsupported handler payload type: {e}") from e

    def decode(self, data: bytes) -> Any:
        try:
            return self._input.validate_json(data)
        except ValidationError as e:
            raise HandlerDecodeError(f"Payload does not match {self._type_name()}: {e}") from e

    def encode(self, value: Any) -> bytes:
        try:
            return self._output.dump_json(value)
        except (PydanticSerializationError, TypeError, ValueError) as e:
            raise HandlerEncodeError(f"Handler result could not be encoded: {e}") from e

    def _type_name(self) -> str:
        return getattr(self.input_type, "__name__", repr(self.input_type))


class Handler:
    """Base of all handler variants."""

    variant: HandlerVariant

    def __init__(self, function: Callable, codec):
        self.function = function
        self.codec = codec

    @property
    def name(self) -> str:
        return getattr(self.function, "__qualname__", type(self.function).__name__)

    def apply(self, input_data: bytes, context: InvocationContext) -> DispatchResult:
        """
        Decode, invoke and encode. Every Exception becomes a Failure.
        """
        try:
            event = self.codec.decode(input_data)
            result = self.invoke(event, context)
            payload = self.codec.encode(result)
        except Exception as e:
            logger.warning(
                f"Handler {self.name} failed: {type(e).__name__}: {e}",
                exc_info=True,
                extra={"handler_variant": self.variant.value},
            )
            return Failure.from_exception(e)
        return Success(payload=payload)

    def invoke(self, event: Any, context: InvocationContext) -> Any:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"


class _SyncHandler(Handler):
    def invoke(self, event: Any, context: InvocationContext) -> Any:
        return self.function(event, context)


class _AsyncHandler(Handler):
    def invoke(self, event: Any, context: InvocationContext) -> Any:
        if is_coroutine_callable(self.function):
            return asyncio.run(self.function(event, context))

        gate = CompletionGate()
        try:
            self.function(event, context, gate.complete)
        except Exception:
            if not gate.done:
                raise
            logger.warning(
                f"Handler {self.name} raised after completing; keeping its result",
                exc_info=True,
            )
        if not gate.done:
            logger.debug(f"Waiting for {self.name} to invoke its completion")
        return gate.wait()


class SyncUntypedHandler(_SyncHandler):
    variant = HandlerVariant.SYNC_UNTYPED

    def __init__(self, function: Callable):
        super().__init__(function, JsonObjectCodec())


class AsyncUntypedHandler(_AsyncHandler):
    variant = HandlerVariant.ASYNC_UNTYPED

    def __init__(self, function: Callable):
        super().__init__(function, JsonObjectCodec())


class SyncTypedHandler(_SyncHandler):
    variant = HandlerVariant.SYNC_TYPED

    def __init__(self, function: Callable, input_type: Any, output_type: Optional[Any] = None):
        super().__init__(function, TypeAdapterCodec(input_type, output_type))


class AsyncTypedHandler(_AsyncHandler):
    variant = HandlerVariant.ASYNC_TYPED

    def __init__(self, function: Callable, input_type: Any, output_type: Optional[Any] = None):
        super().__init__(function, TypeAdapterCodec(input_type, output_type))


def is_coroutine_callable(function: Any) -> bool:
    if inspect.iscoroutinefunction(function):
        return True
    call = getattr(function, "__call__", None)
    return call is not None and inspect.iscoroutinefunction(call)
