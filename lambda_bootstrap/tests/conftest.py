import logging
import os

import pytest

from lambda_bootstrap.config import RuntimeConfig
from lambda_bootstrap.core import request_context
from lambda_bootstrap.models.context import InvocationContext

RUNTIME_API = "127.0.0.1:9001"
BASE_URL = f"http://{RUNTIME_API}/2018-06-01"

_MANAGED_ENV = (
    "AWS_LAMBDA_RUNTIME_API",
    "_HANDLER",
    "AWS_LAMBDA_FUNCTION_NAME",
    "AWS_LAMBDA_FUNCTION_VERSION",
    "AWS_LAMBDA_FUNCTION_MEMORY_SIZE",
    "AWS_LAMBDA_LOG_GROUP_NAME",
    "AWS_LAMBDA_LOG_STREAM_NAME",
    "LAMBDA_TASK_ROOT",
    "PROPAGATE_TRACE_ENV",
    "_X_AMZN_TRACE_ID",
)


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch):
    """Start every test without host-provided runtime variables."""
    for name in _MANAGED_ENV:
        monkeypatch.delenv(name, raising=False)
    request_context.clear_trace_id()
    yield
    request_context.clear_trace_id()
    os.environ.pop("_X_AMZN_TRACE_ID", None)


@pytest.fixture
def runtime_env(monkeypatch):
    monkeypatch.setenv("AWS_LAMBDA_RUNTIME_API", RUNTIME_API)
    monkeypatch.setenv("_HANDLER", "file.myHandler")
    monkeypatch.setenv("AWS_LAMBDA_FUNCTION_NAME", "test-func")
    monkeypatch.setenv("AWS_LAMBDA_FUNCTION_VERSION", "7")
    monkeypatch.setenv("AWS_LAMBDA_FUNCTION_MEMORY_SIZE", "256")
    monkeypatch.setenv("AWS_LAMBDA_LOG_GROUP_NAME", "/aws/lambda/test-func")
    monkeypatch.setenv("AWS_LAMBDA_LOG_STREAM_NAME", "2026/10/19/[7]abcdef")


@pytest.fixture
def config(runtime_env) -> RuntimeConfig:
    return RuntimeConfig()


@pytest.fixture
def context() -> InvocationContext:
    return InvocationContext(aws_request_id="abc", function_name="test-func")


@pytest.fixture
def restore_root_logger():
    """setup_logging reconfigures the root logger; put it back afterwards."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)
