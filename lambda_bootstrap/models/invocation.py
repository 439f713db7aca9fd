"""
Invocation model.

One unit of work fetched from the Runtime API next-invocation resource.
"""

from typing import Dict, Optional

from pydantic import BaseModel, Field


class Invocation(BaseModel):
    """Raw payload plus response headers (names lower-cased)."""

    body: bytes = b""
    headers: Dict[str, str] = Field(default_factory=dict)

    def header(self, name: str) -> Optional[str]:
        """Case-insensitive header lookup."""
        return self.headers.get(name.lower())
