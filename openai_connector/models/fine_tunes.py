"""Fine-tuning job models."""

from typing import Any

from pydantic import Field

from .common import OpenAIRequest, OpenAIResponse
from .files import OpenAIFile


class CreateFineTuneRequest(OpenAIRequest):
    """Request body for ``POST /fine-tunes``."""

    training_file: str = Field(..., description="ID of an uploaded JSONL training file")
    validation_file: str | None = Field(
        None, description="ID of an uploaded JSONL validation file"
    )
    model: str | None = Field(
        None, description="Base model to fine-tune (ada, babbage, curie, davinci)"
    )
    n_epochs: int | None = Field(None, ge=1)
    batch_size: int | None = Field(None, ge=1)
    learning_rate_multiplier: float | None = Field(None, gt=0)
    prompt_loss_weight: float | None = Field(None, ge=0)
    compute_classification_metrics: bool | None = None
    classification_n_classes: int | None = Field(None, ge=1)
    classification_positive_class: str | None = None
    classification_betas: list[float] | None = None
    suffix: str | None = Field(
        None, description="Up to 40 characters added to the fine-tuned model name", max_length=40
    )


class FineTuneEvent(OpenAIResponse):
    object: str = "fine-tune-event"
    created_at: int
    level: str
    message: str


class FineTune(OpenAIResponse):
    id: str
    object: str = "fine-tune"
    created_at: int | None = None
    updated_at: int | None = None
    model: str | None = None
    fine_tuned_model: str | None = None
    organization_id: str | None = None
    status: str | None = None
    hyperparams: dict[str, Any] | None = None
    training_files: list[OpenAIFile] = Field(default_factory=list)
    validation_files: list[OpenAIFile] = Field(default_factory=list)
    result_files: list[OpenAIFile] = Field(default_factory=list)
    events: list[FineTuneEvent] | None = None


class ListFineTunesResponse(OpenAIResponse):
    object: str = "list"
    data: list[FineTune]


class ListFineTuneEventsResponse(OpenAIResponse):
    object: str = "list"
    data: list[FineTuneEvent]
