"""
Dispatch result models.

Standardizes the output of Handler.apply for the reporting step.
"""

from typing import Union

from pydantic import BaseModel, Field


class ErrorDescriptor(BaseModel):
    """Error information sent to the control plane."""

    message: str = Field(serialization_alias="errorMessage")
    error_type: str = "Error"

    def to_wire(self) -> bytes:
        """Encode the error body (``{"errorMessage": ...}``)."""
        return self.model_dump_json(include={"message"}, by_alias=True).encode()


class Success(BaseModel):
    payload: bytes = b""


class Failure(BaseModel):
    error: ErrorDescriptor

    @classmethod
    def from_exception(cls, exc: BaseException) -> "Failure":
        """Wrap any exception into a Failure with a best-effort description."""
        message = str(exc) or type(exc).__name__
        return cls(error=ErrorDescriptor(message=message, error_type=type(exc).__name__))


DispatchResult = Union[Success, Failure]
