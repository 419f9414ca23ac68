"""
Request-side data models.

A RequestDescriptor is produced by the RequestGenerator and handed to an
AttemptLoop, which reuses the same descriptor for every attempt.
"""

import json
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


DEFAULT_HEADERS: dict[str, str] = {"Content-Type": "application/json"}


class PostPayload(BaseModel):
    """
    JSON body template sent with every request of a batch.

    Wire format: {"title": <string>, "body": <string>}
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    title: str = Field(default="POST Request", description="Title parameter of the POST request")
    body: str = Field(default="This is a POST request", description="Body parameter of the POST request")

    def encode(self) -> bytes:
        """Serialize to the exact bytes sent on the wire."""
        return json.dumps({"title": self.title, "body": self.body}).encode("utf-8")


class RequestDescriptor(BaseModel):
    """
    Immutable description of one outbound request.

    The index is the request's position in canonical order (0-based) and
    is the key under which its FinalResult is reported.
    """

    model_config = ConfigDict(frozen=True)

    index: int = Field(..., ge=0, description="Position in the batch (0-based)")
    method: Literal["POST"] = "POST"
    url: str = Field(..., min_length=1, description="Destination URL")
    headers: dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_HEADERS))
    body: bytes = Field(..., description="Encoded request body")
