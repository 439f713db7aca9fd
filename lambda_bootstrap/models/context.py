"""
Invocation context model.

Immutable per-invocation metadata handed to handler code.
"""

import time
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict


class InvocationContext(BaseModel):
    """
    Static process configuration merged with per-invocation response headers.

    Handlers should read ``trace_id`` from here rather than from the
    ``_X_AMZN_TRACE_ID`` environment variable.
    """

    model_config = ConfigDict(frozen=True)

    aws_request_id: str
    deadline_ms: int = 0
    invoked_function_arn: str = ""
    trace_id: Optional[str] = None
    memory_limit_mb: int = 128
    log_group_name: str = ""
    log_stream_name: str = ""
    function_name: str = ""
    function_version: str = "$LATEST"
    client_context: Optional[Dict[str, Any]] = None
    identity: Optional[Dict[str, Any]] = None

    def get_remaining_time_in_millis(self) -> int:
        """Milliseconds left before the deadline (never negative)."""
        return max(self.deadline_ms - int(time.time() * 1000), 0)
