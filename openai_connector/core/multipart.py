"""Conversion of upload requests into multipart/form-data body parts."""

import os
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, TypeAlias

import structlog
from pydantic import BaseModel, ValidationError

from openai_connector.exceptions import BodyEncodingError
from openai_connector.models.common import FileContent


logger = structlog.get_logger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"


@dataclass(frozen=True)
class FilePart:
    """A part carrying file content."""

    name: str
    content: bytes
    filename: str
    content_type: str = DEFAULT_CONTENT_TYPE


@dataclass(frozen=True)
class FieldPart:
    """A plain form field."""

    name: str
    value: str


BodyPart: TypeAlias = FilePart | FieldPart

HttpxFiles: TypeAlias = list[tuple[str, tuple[str | None, bytes, str | None]]]


def _iter_fields(payload: BaseModel | Mapping[str, Any]) -> list[tuple[str, Any]]:
    if isinstance(payload, BaseModel):
        return [
            (info.alias or name, getattr(payload, name))
            for name, info in type(payload).model_fields.items()
        ]
    return list(payload.items())


def _read_content(name: str, source: Any) -> bytes:
    if isinstance(source, bytes | bytearray | memoryview):
        return bytes(source)

    if isinstance(source, str | os.PathLike):
        try:
            return Path(source).read_bytes()
        except OSError as e:
            raise BodyEncodingError(name, f"Cannot read file for '{name}': {e}") from e

    read = getattr(source, "read", None)
    if callable(read):
        seekable = getattr(source, "seekable", None)
        try:
            position = source.tell() if callable(seekable) and seekable() else None
            data = read()
            if position is not None:
                source.seek(position)
        except (OSError, ValueError) as e:
            raise BodyEncodingError(name, f"Cannot read stream for '{name}': {e}") from e
        if not isinstance(data, bytes):
            raise BodyEncodingError(
                name, f"Stream for '{name}' must be opened in binary mode"
            )
        return data

    raise BodyEncodingError(
        name, f"Unsupported content type for '{name}': {type(source).__name__}"
    )


def _file_name(name: str, file: FileContent) -> str:
    if file.file_name:
        return file.file_name
    source = file.content
    if isinstance(source, str | os.PathLike):
        return Path(source).name
    stream_name = getattr(source, "name", None)
    if isinstance(stream_name, str) and stream_name:
        return Path(stream_name).name
    raise BodyEncodingError(name, f"No file name given for '{name}'")


def _stringify(name: str, value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, str | int | float):
        return str(value)
    raise BodyEncodingError(
        name, f"Unsupported value for form field '{name}': {type(value).__name__}"
    )


class MultipartRequestBuilder:
    """Builds the ordered body parts of a multipart upload request.

    Fields are visited in declaration order. File content becomes a
    ``FilePart``, scalars become a ``FieldPart`` and unset (None) fields are
    left out. Streams are rewound after reading so building is repeatable.
    """

    def build_parts(self, payload: BaseModel | Mapping[str, Any]) -> list[BodyPart]:
        parts: list[BodyPart] = []
        for name, value in _iter_fields(payload):
            if value is None:
                continue
            if isinstance(value, Mapping) and "content" in value:
                try:
                    value = FileContent.model_validate(value)
                except ValidationError as e:
                    raise BodyEncodingError(name) from e
            if isinstance(value, FileContent):
                parts.append(
                    FilePart(
                        name=name,
                        content=_read_content(name, value.content),
                        filename=_file_name(name, value),
                        content_type=value.content_type or DEFAULT_CONTENT_TYPE,
                    )
                )
            else:
                parts.append(FieldPart(name=name, value=_stringify(name, value)))

        logger.debug(
            "multipart_parts_built",
            files=sum(isinstance(p, FilePart) for p in parts),
            fields=sum(isinstance(p, FieldPart) for p in parts),
        )
        return parts


def build_parts(payload: BaseModel | Mapping[str, Any]) -> list[BodyPart]:
    """Module-level shortcut for ``MultipartRequestBuilder().build_parts``."""
    return MultipartRequestBuilder().build_parts(payload)


def to_httpx_files(parts: list[BodyPart]) -> HttpxFiles:
    """Render parts as the ``files=`` argument of httpx, keeping their order.

    Field parts are sent without a filename so they arrive as plain form fields.
    """
    files: HttpxFiles = []
    for part in parts:
        if isinstance(part, FilePart):
            files.append((part.name, (part.filename, part.content, part.content_type)))
        else:
            files.append((part.name, (None, part.value.encode("utf-8"), None)))
    return files
