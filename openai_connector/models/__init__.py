"""Typed request and response models for the OpenAI API."""

from .audio import (
    CreateTranscriptionRequest,
    CreateTranslationRequest,
    TranscriptionResponse,
    TranslationResponse,
)
from .chat import (
    ChatCompletionChoice,
    ChatCompletionFunctions,
    ChatCompletionRequestMessage,
    ChatCompletionResponse,
    ChatCompletionResponseMessage,
    CompletionUsage,
    CreateChatCompletionRequest,
)
from .common import FileContent, OpenAIRequest, OpenAIResponse
from .files import CreateFileRequest, DeleteFileResponse, ListFilesResponse, OpenAIFile
from .fine_tunes import (
    CreateFineTuneRequest,
    FineTune,
    FineTuneEvent,
    ListFineTuneEventsResponse,
    ListFineTunesResponse,
)
from .images import (
    CreateImageEditRequest,
    CreateImageRequest,
    CreateImageVariationRequest,
    ImageData,
    ImagesResponse,
)
from .model_info import DeleteModelResponse, ListModelsResponse, Model


__all__ = [
    "ChatCompletionChoice",
    "ChatCompletionFunctions",
    "ChatCompletionRequestMessage",
    "ChatCompletionResponse",
    "ChatCompletionResponseMessage",
    "CompletionUsage",
    "CreateChatCompletionRequest",
    "CreateFileRequest",
    "CreateFineTuneRequest",
    "CreateImageEditRequest",
    "CreateImageRequest",
    "CreateImageVariationRequest",
    "CreateTranscriptionRequest",
    "CreateTranslationRequest",
    "DeleteFileResponse",
    "DeleteModelResponse",
    "FileContent",
    "FineTune",
    "FineTuneEvent",
    "ImageData",
    "ImagesResponse",
    "ListFilesResponse",
    "ListFineTuneEventsResponse",
    "ListFineTunesResponse",
    "ListModelsResponse",
    "Model",
    "OpenAIFile",
    "OpenAIRequest",
    "OpenAIResponse",
    "TranscriptionResponse",
    "TranslationResponse",
]
