"""
Runtime loop.

Drives the fetch -> dispatch -> report cycle against the Runtime API, one
invocation at a time, until a fatal error occurs or the host kills the process.
"""

import logging
from typing import Any, Callable, Optional

from .config import RuntimeConfig, load_config
from .core import request_context
from .core.exceptions import TransportError
from .core.http_client import HttpClientFactory
from .models.result import DispatchResult, Success
from .services.context_builder import ContextBuilder
from .services.handler import Handler
from .services.handler_registry import HandlerRegistry
from .services.runtime_client import RuntimeAPIClient

logger = logging.getLogger("bootstrap.runtime")


class Runtime:
    def __init__(
        self,
        config: Optional[RuntimeConfig] = None,
        client: Optional[RuntimeAPIClient] = None,
        registry: Optional[HandlerRegistry] = None,
    ):
        """
        Args:
            config: RuntimeConfig; loaded from the environment when omitted
            client: RuntimeAPIClient; built from config when omitted
            registry: HandlerRegistry; a fresh one when omitted

        Raises:
            ConfigurationError: config omitted and the environment is invalid
        """
        self.config = config if config is not None else load_config()
        self.handler_name = self.config.handler_name
        self.registry = registry if registry is not None else HandlerRegistry()
        if client is None:
            http_client = HttpClientFactory(self.config).create_sync_client()
            client = RuntimeAPIClient(http_client, self.config.runtime_api_url)
        self.client = client
        self.context_builder = ContextBuilder(self.config)
        self.invocation_count = 0

    def register(
        self,
        name: str,
        function: Callable,
        *,
        input_type: Optional[Any] = None,
        output_type: Optional[Any] = None,
    ) -> Handler:
        """Register a handler; see HandlerRegistry.register."""
        return self.registry.register(
            name, function, input_type=input_type, output_type=output_type
        )

    def handler(
        self,
        name: Optional[str] = None,
        *,
        input_type: Optional[Any] = None,
        output_type: Optional[Any] = None,
    ):
        """
        Decorator form of ``register``.

        Usage:
            @runtime.handler("myHandler")
            def my_handler(event, context):
                return {"ok": True}
        """

        def decorator(function: Callable) -> Callable:
            self.register(
                name or function.__name__,
                function,
                input_type=input_type,
                output_type=output_type,
            )
            return function

        return decorator

    def start(self) -> None:
        """
        Run the invocation loop forever.

        Returns only by raising: TransportError (fetch failed), HandlerNotFoundError
        or RuntimeProtocolError. Handler failures are reported and never escape.
        """
        self.registry.freeze()
        logger.info(
            f"Starting runtime loop for handler '{self.handler_name}'",
            extra={
                "runtime_api": self.config.AWS_LAMBDA_RUNTIME_API,
                "registered_handlers": self.registry.names(),
            },
        )
        try:
            while True:
                self.run_once()
        finally:
            self.client.close()

    def run_once(self) -> DispatchResult:
        """Fetch, dispatch and report exactly one invocation."""
        invocation = self.client.next_invocation()
        self.invocation_count += 1
        logger.info(f"Invocation-Counter: {self.invocation_count}")

        handler = self.registry.get(self.handler_name)
        context = self.context_builder.build(invocation)

        request_context.set_request_id(context.aws_request_id)
        if context.trace_id:
            request_context.set_trace_id(context.trace_id)
        try:
            result = handler.apply(invocation.body, context)
            self._report(context.aws_request_id, result)
        finally:
            request_context.clear_trace_id()
        return result

    def _report(self, request_id: str, result: DispatchResult) -> None:
        try:
            if isinstance(result, Success):
                self.client.post_response(request_id, result.payload)
            else:
                self.client.post_error(request_id, result.error)
        except TransportError as e:
            # The next fetch is the recovery point.
            logger.error(
                f"Failed to report invocation {request_id}: {e}",
                extra={"operation": e.operation, "error_type": type(e.cause).__name__},
            )
