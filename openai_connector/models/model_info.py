"""Model listing models."""

from .common import OpenAIResponse


class Model(OpenAIResponse):
    id: str
    object: str = "model"
    created: int | None = None
    owned_by: str | None = None


class ListModelsResponse(OpenAIResponse):
    object: str = "list"
    data: list[Model]


class DeleteModelResponse(OpenAIResponse):
    id: str
    object: str = "model"
    deleted: bool
