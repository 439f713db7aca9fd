"""
Runtime configuration definition.

Loads the settings the execution host injects through environment variables.
Uses pydantic-settings for type safety and defaults.
"""

from pydantic import Field, ValidationError, field_validator

from .core.config import BaseAppConfig
from .core.exceptions import ConfigurationError

RUNTIME_API_VERSION = "2018-06-01"


class RuntimeConfig(BaseAppConfig):
    """
    Configuration management for the runtime bootstrap.
    """

    # Control endpoint and handler selection (required from env)
    AWS_LAMBDA_RUNTIME_API: str = Field(..., min_length=1, description="Runtime API host:port")
    HANDLER: str = Field(
        ..., validation_alias="_HANDLER", description="Handler selector (<module>.<name>)"
    )

    # Static invocation context inputs
    AWS_LAMBDA_FUNCTION_NAME: str = Field(default="", description="Function name")
    AWS_LAMBDA_FUNCTION_VERSION: str = Field(default="$LATEST", description="Function version")
    AWS_LAMBDA_FUNCTION_MEMORY_SIZE: int = Field(default=128, description="Memory limit (MB)")
    AWS_LAMBDA_LOG_GROUP_NAME: str = Field(default="", description="CloudWatch log group")
    AWS_LAMBDA_LOG_STREAM_NAME: str = Field(default="", description="CloudWatch log stream")
    LAMBDA_TASK_ROOT: str = Field(default="", description="Directory holding the handler code")

    # Keep _X_AMZN_TRACE_ID in the process environment for legacy consumers
    PROPAGATE_TRACE_ENV: bool = Field(default=True, description="Export _X_AMZN_TRACE_ID")

    @field_validator("HANDLER")
    @classmethod
    def _check_selector(cls, value: str) -> str:
        module, sep, name = value.rpartition(".")
        if not sep:
            raise ValueError(f"handler selector '{value}' must be of the form <module>.<name>")
        if not module or not name:
            raise ValueError(f"handler selector '{value}' has an empty module or name part")
        return value

    @property
    def handler_name(self) -> str:
        """Registered name resolved from the selector (after the final '.')."""
        return self.HANDLER.rpartition(".")[2]

    @property
    def handler_module(self) -> str:
        return self.HANDLER.rpartition(".")[0]

    @property
    def runtime_api_url(self) -> str:
        return f"http://{self.AWS_LAMBDA_RUNTIME_API}/{RUNTIME_API_VERSION}"


def load_config(**overrides) -> RuntimeConfig:
    """
    Load RuntimeConfig from the environment.

    Raises:
        ConfigurationError: required settings are missing or malformed
    """
    try:
        return RuntimeConfig(**overrides)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid runtime configuration: {e}") from e
