"""
Handler registry.

Maps handler names to Handler instances. Built once at startup, frozen when
the invocation loop starts. Registering an existing name replaces it.
"""

import collections.abc
import inspect
import logging
import typing
from typing import Any, Callable, Dict, List, Optional, Tuple

from ..core.exceptions import HandlerNotFoundError, InvalidHandlerError, RegistryFrozenError
from .handler import (
    AsyncTypedHandler,
    AsyncUntypedHandler,
    Handler,
    SyncTypedHandler,
    SyncUntypedHandler,
    is_coroutine_callable,
)

logger = logging.getLogger("bootstrap.handler_registry")

_POSITIONAL = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)
_UNTYPED_ORIGINS = (dict, collections.abc.Mapping, collections.abc.MutableMapping)


def _is_untyped(annotation: Any) -> bool:
    if annotation is inspect.Parameter.empty or annotation is Any:
        return True
    origin = typing.get_origin(annotation) or annotation
    return origin in _UNTYPED_ORIGINS


def _type_hints(function: Callable) -> Dict[str, Any]:
    target = function if inspect.isroutine(function) else getattr(function, "__call__", function)
    try:
        return typing.get_type_hints(target)
    except (NameError, TypeError):
        pass

    # Some annotation is unresolvable (e.g. a TYPE_CHECKING-only import):
    # resolve the others one by one and drop only the failing ones.
    globalns = getattr(target, "__globals__", {})
    hints = {}
    for key, value in inspect.get_annotations(target).items():
        if isinstance(value, str):
            try:
                value = eval(value, globalns)
            except Exception as e:
                logger.debug(f"Ignoring unresolvable annotation {key}: {value!r} ({e})")
                continue
        hints[key] = value
    return hints


def _completion_value_type(annotation: Any) -> Optional[Any]:
    """Extract O from a ``Callable[[O], None]`` annotation."""
    if typing.get_origin(annotation) is not collections.abc.Callable:
        return None
    args = typing.get_args(annotation)
    if args and isinstance(args[0], list) and len(args[0]) == 1:
        return args[0][0]
    return None


def inspect_handler(function: Callable) -> Tuple[bool, Optional[Any], Optional[Any]]:
    """
    Work out the calling convention of ``function``.

    Returns:
        (is_async, input_type, output_type); input_type is None for untyped handlers
    """
    if not callable(function):
        raise InvalidHandlerError(f"Handler must be callable, got {type(function).__name__}")

    try:
        signature = inspect.signature(function)
    except (TypeError, ValueError) as e:
        raise InvalidHandlerError(f"Cannot inspect handler signature: {e}") from e

    params = list(signature.parameters.values())
    positional = [p for p in params if p.kind in _POSITIONAL]
    has_varargs = any(p.kind is inspect.Parameter.VAR_POSITIONAL for p in params)

    if len(positional) < 2 and not has_varargs:
        raise InvalidHandlerError(
            f"Handler {signature} must accept (event, context) or (event, context, completion)"
        )

    is_coroutine = is_coroutine_callable(function)
    takes_completion = len(positional) >= 3 and positional[2].default is inspect.Parameter.empty
    if is_coroutine and takes_completion:
        raise InvalidHandlerError("Coroutine handlers must not take a completion callback")

    hints = _type_hints(function)
    input_type = None
    if positional:
        annotation = hints.get(positional[0].name, inspect.Parameter.empty)
        if not _is_untyped(annotation):
            input_type = annotation

    if takes_completion:
        output_type = _completion_value_type(hints.get(positional[2].name))
    else:
        output_type = hints.get("return")

    return is_coroutine or takes_completion, input_type, output_type


class HandlerRegistry:
    def __init__(self):
        self._handlers: Dict[str, Handler] = {}
        self._frozen = False

    def register(
        self,
        name: str,
        function: Callable,
        *,
        input_type: Optional[Any] = None,
        output_type: Optional[Any] = None,
    ) -> Handler:
        """
        Register ``function`` under ``name``, choosing the variant from its shape.

        Args:
            name: handler name matched against the selector's exported name
            function: the user callable
            input_type: force a typed handler decoding into this type
            output_type: type used to encode the result of a typed handler
        """
        is_async, inferred_input, inferred_output = inspect_handler(function)
        input_type = input_type if input_type is not None else inferred_input
        if output_type is None:
            output_type = inferred_output

        if input_type is None:
            handler_cls = AsyncUntypedHandler if is_async else SyncUntypedHandler
            return self.add(name, handler_cls(function))

        handler_cls = AsyncTypedHandler if is_async else SyncTypedHandler
        return self.add(name, handler_cls(function, input_type, output_type))

    def register_sync_untyped(self, name: str, function: Callable) -> Handler:
        return self.add(name, SyncUntypedHandler(function))

    def register_async_untyped(self, name: str, function: Callable) -> Handler:
        return self.add(name, AsyncUntypedHandler(function))

    def register_sync_typed(
        self, name: str, function: Callable, input_type: Any, output_type: Optional[Any] = None
    ) -> Handler:
        return self.add(name, SyncTypedHandler(function, input_type, output_type))

    def register_async_typed(
        self, name: str, function: Callable, input_type: Any, output_type: Optional[Any] = None
    ) -> Handler:
        return self.add(name, AsyncTypedHandler(function, input_type, output_type))

    def add(self, name: str, handler: Handler) -> Handler:
        if self._frozen:
            raise RegistryFrozenError(f"Cannot register '{name}': the runtime loop has started")
        if name in self._handlers:
            logger.debug(f"Replacing handler '{name}' ({self._handlers[name]!r} -> {handler!r})")
        self._handlers[name] = handler
        logger.debug(f"Registered handler '{name}' as {handler.variant.value}")
        return handler

    def get(self, name: str) -> Handler:
        """
        Resolve a handler by name.

        Raises:
            HandlerNotFoundError: no handler registered under ``name``
        """
        handler = self._handlers.get(name)
        if handler is None:
            raise HandlerNotFoundError(name)
        return handler

    def freeze(self) -> None:
        self._frozen = True

    def names(self) -> List[str]:
        return sorted(self._handlers)

    def __contains__(self, name: str) -> bool:
        return name in self._handlers
