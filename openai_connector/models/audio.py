"""Audio transcription and translation models."""

from typing import Literal

from pydantic import Field

from .common import FileContent, OpenAIRequest, OpenAIResponse


# Only JSON formats; text/srt/vtt are not decoded into a typed response
AudioResponseFormat = Literal["json", "verbose_json"]


class CreateTranscriptionRequest(OpenAIRequest):
    """Multipart body for ``POST /audio/transcriptions``."""

    file: FileContent = Field(
        ...,
        description="The audio file to transcribe (mp3, mp4, mpeg, mpga, m4a, wav or webm)",
    )
    model: str = Field("whisper-1", description="ID of the model to use")
    prompt: str | None = Field(
        None, description="Optional text to guide the model's style"
    )
    response_format: AudioResponseFormat | None = Field(
        None, description="The format of the transcript output"
    )
    temperature: float | None = Field(None, ge=0.0, le=1.0)
    language: str | None = Field(
        None, description="The language of the input audio in ISO-639-1 format"
    )


class CreateTranslationRequest(OpenAIRequest):
    """Multipart body for ``POST /audio/translations``."""

    file: FileContent = Field(..., description="The audio file to translate")
    model: str = Field("whisper-1", description="ID of the model to use")
    prompt: str | None = None
    response_format: AudioResponseFormat | None = None
    temperature: float | None = Field(None, ge=0.0, le=1.0)


class TranscriptionResponse(OpenAIResponse):
    text: str


class TranslationResponse(OpenAIResponse):
    text: str
