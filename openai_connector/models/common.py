"""Shared base classes for OpenAI request and response models."""

from typing import Any

from pydantic import BaseModel, ConfigDict


class OpenAIRequest(BaseModel):
    """Base class for request bodies sent to the API."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)


class OpenAIResponse(BaseModel):
    """Base class for response bodies; unknown fields are kept."""

    model_config = ConfigDict(extra="allow")


class FileContent(BaseModel):
    """Binary content uploaded as one multipart file part.

    ``content`` may be raw bytes, a filesystem path or a binary file-like
    object. It is read only when the request body is built.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    content: Any
    file_name: str | None = None
    content_type: str | None = None
