"""Chat completion models."""

from typing import Any, Literal

from pydantic import Field, model_validator

from .common import OpenAIRequest, OpenAIResponse


ChatRole = Literal["system", "user", "assistant", "function"]


class ChatCompletionFunctionCall(OpenAIRequest):
    name: str
    arguments: str


class ChatCompletionRequestMessage(OpenAIRequest):
    """A message in the conversation sent to the model."""

    role: ChatRole = Field(..., description="The role of the author of this message")
    content: str | None = Field(None, description="The contents of the message")
    name: str | None = Field(
        None, description="The name of the author; required for function messages"
    )
    function_call: ChatCompletionFunctionCall | None = None

    @model_validator(mode="after")
    def validate_function_name(self) -> "ChatCompletionRequestMessage":
        """Function messages must name the function they answer."""
        if self.role == "function" and not self.name:
            raise ValueError("name is required when role is 'function'")
        return self


class ChatCompletionFunctions(OpenAIRequest):
    name: str = Field(..., description="The name of the function to be called")
    description: str | None = None
    parameters: dict[str, Any] = Field(
        default_factory=dict,
        description="The parameters the function accepts, described as a JSON Schema object",
    )


class CreateChatCompletionRequest(OpenAIRequest):
    """Request body for ``POST /chat/completions``."""

    model: str = Field(..., description="ID of the model to use")
    messages: list[ChatCompletionRequestMessage] = Field(..., min_length=1)
    functions: list[ChatCompletionFunctions] | None = None
    function_call: Literal["none", "auto"] | dict[str, str] | None = None
    temperature: float | None = Field(None, ge=0.0, le=2.0)
    top_p: float | None = Field(None, ge=0.0, le=1.0)
    n: int | None = Field(None, ge=1, le=128)
    stop: str | list[str] | None = None
    max_tokens: int | None = Field(None, ge=1)
    presence_penalty: float | None = Field(None, ge=-2.0, le=2.0)
    frequency_penalty: float | None = Field(None, ge=-2.0, le=2.0)
    logit_bias: dict[str, int] | None = None
    user: str | None = None


class ChatCompletionResponseMessage(OpenAIResponse):
    role: ChatRole
    content: str | None = None
    function_call: dict[str, Any] | None = None


class ChatCompletionChoice(OpenAIResponse):
    index: int
    message: ChatCompletionResponseMessage
    finish_reason: str | None = None


class CompletionUsage(OpenAIResponse):
    prompt_tokens: int
    completion_tokens: int
    total_tokens: int


class ChatCompletionResponse(OpenAIResponse):
    id: str
    object: str = "chat.completion"
    created: int
    model: str
    choices: list[ChatCompletionChoice]
    usage: CompletionUsage | None = None
