"""
Invocation context construction.

Merges static process configuration with the per-invocation headers returned
by the next-invocation call.
"""

import json
import logging
import os
from typing import Any, Dict, Optional

from ..config import RuntimeConfig
from ..core.exceptions import RuntimeProtocolError
from ..models.context import InvocationContext
from ..models.invocation import Invocation

logger = logging.getLogger("bootstrap.context_builder")

REQUEST_ID_HEADER = "Lambda-Runtime-Aws-Request-Id"
DEADLINE_HEADER = "Lambda-Runtime-Deadline-Ms"
FUNCTION_ARN_HEADER = "Lambda-Runtime-Invoked-Function-Arn"
TRACE_ID_HEADER = "Lambda-Runtime-Trace-Id"
CLIENT_CONTEXT_HEADER = "Lambda-Runtime-Client-Context"
COGNITO_IDENTITY_HEADER = "Lambda-Runtime-Cognito-Identity"

TRACE_ENV_VAR = "_X_AMZN_TRACE_ID"


class ContextBuilder:
    def __init__(self, config: RuntimeConfig):
        self.config = config

    def build(self, invocation: Invocation) -> InvocationContext:
        """
        Build the InvocationContext for one fetched invocation.

        Raises:
            RuntimeProtocolError: the request id header is missing
        """
        request_id = invocation.header(REQUEST_ID_HEADER)
        if not request_id:
            raise RuntimeProtocolError(f"Next invocation response is missing {REQUEST_ID_HEADER}")

        trace_id = invocation.header(TRACE_ID_HEADER) or None
        if self.config.PROPAGATE_TRACE_ENV:
            propagate_trace_env(trace_id)

        return InvocationContext(
            aws_request_id=request_id,
            deadline_ms=_parse_deadline(invocation.header(DEADLINE_HEADER)),
            invoked_function_arn=invocation.header(FUNCTION_ARN_HEADER) or "",
            trace_id=trace_id,
            memory_limit_mb=self.config.AWS_LAMBDA_FUNCTION_MEMORY_SIZE,
            log_group_name=self.config.AWS_LAMBDA_LOG_GROUP_NAME,
            log_stream_name=self.config.AWS_LAMBDA_LOG_STREAM_NAME,
            function_name=self.config.AWS_LAMBDA_FUNCTION_NAME,
            function_version=self.config.AWS_LAMBDA_FUNCTION_VERSION,
            client_context=_parse_json_header(invocation, CLIENT_CONTEXT_HEADER),
            identity=_parse_json_header(invocation, COGNITO_IDENTITY_HEADER),
        )


def propagate_trace_env(trace_id: Optional[str]) -> None:
    """
    Mirror the most recent invocation's trace id into the process environment.

    Not safe if invocations are ever processed concurrently.
    """
    if trace_id:
        os.environ[TRACE_ENV_VAR] = trace_id
    else:
        os.environ.pop(TRACE_ENV_VAR, None)


def _parse_deadline(value: Optional[str]) -> int:
    if not value:
        return 0
    try:
        return int(value)
    except ValueError:
        logger.warning(f"Ignoring malformed {DEADLINE_HEADER}: {value!r}")
        return 0


def _parse_json_header(invocation: Invocation, name: str) -> Optional[Dict[str, Any]]:
    raw = invocation.header(name)
    if not raw:
        return None
    try:
        value = json.loads(raw)
    except ValueError:
        logger.warning(f"Ignoring undecodable {name} header")
        return None
    return value if isinstance(value, dict) else None
