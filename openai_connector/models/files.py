"""File management models."""

from typing import Any

from pydantic import Field

from .common import FileContent, OpenAIRequest, OpenAIResponse


class CreateFileRequest(OpenAIRequest):
    """Multipart body for ``POST /files``."""

    file: FileContent = Field(
        ..., description="The JSON Lines file to upload"
    )
    purpose: str = Field(
        ..., description="The intended purpose of the uploaded document, e.g. 'fine-tune'"
    )


class OpenAIFile(OpenAIResponse):
    id: str
    object: str = "file"
    bytes: int | None = None
    created_at: int | None = None
    filename: str | None = None
    purpose: str | None = None
    status: str | None = None
    status_details: Any | None = None


class ListFilesResponse(OpenAIResponse):
    object: str = "list"
    data: list[OpenAIFile]


class DeleteFileResponse(OpenAIResponse):
    id: str
    object: str = "file"
    deleted: bool
