"""Synchronous OpenAI REST connector."""

import time
from collections.abc import Mapping
from types import TracebackType
from typing import Any, TypeVar
from urllib.parse import quote

import httpx
import structlog
from pydantic import BaseModel, ValidationError

from openai_connector.config.connection import (
    DEFAULT_SERVICE_URL,
    ConnectionConfig,
    ResolvedHttpClientConfig,
)
from openai_connector.core.http_client import HTTPClientFactory
from openai_connector.core.multipart import MultipartRequestBuilder, to_httpx_files
from openai_connector.core.resolver import ConfigurationResolver
from openai_connector.exceptions import TransportError
from openai_connector.models import (
    ChatCompletionResponse,
    CreateChatCompletionRequest,
    CreateFileRequest,
    CreateFineTuneRequest,
    CreateImageEditRequest,
    CreateImageRequest,
    CreateImageVariationRequest,
    CreateTranscriptionRequest,
    CreateTranslationRequest,
    DeleteFileResponse,
    DeleteModelResponse,
    FineTune,
    ImagesResponse,
    ListFilesResponse,
    ListFineTuneEventsResponse,
    ListFineTunesResponse,
    ListModelsResponse,
    Model,
    OpenAIFile,
    OpenAIRequest,
    TranscriptionResponse,
    TranslationResponse,
)


logger = structlog.get_logger(__name__)

RequestT = TypeVar("RequestT", bound=OpenAIRequest)
ResponseT = TypeVar("ResponseT", bound=BaseModel)

_ERROR_BODY_LIMIT = 2000


def _coerce(model: type[RequestT], request: RequestT | Mapping[str, Any]) -> RequestT:
    """Validate a mapping into ``model``; ``ValidationError`` propagates."""
    if isinstance(request, model):
        return request
    return model.model_validate(request)


def _segment(value: str) -> str:
    return quote(value, safe="")


def _status_error(response: httpx.Response) -> TransportError:
    """Build a TransportError from an OpenAI error response."""
    message = response.reason_phrase or "request failed"
    error_type = "transport_error"
    details: dict[str, Any] = {}
    try:
        error = response.json().get("error") or {}
    except (ValueError, AttributeError):
        error = {}
    if isinstance(error, dict):
        message = error.get("message") or message
        error_type = error.get("type") or error_type
        if error.get("code") is not None:
            details["code"] = error["code"]
        if error.get("param") is not None:
            details["param"] = error["param"]
    return TransportError(
        f"OpenAI API returned {response.status_code}: {message}",
        status_code=response.status_code,
        body=response.text[:_ERROR_BODY_LIMIT],
        error_type=error_type,
        details=details,
    )


class OpenAIConnector:
    """Client bound to one configured HTTP transport.

    The connection configuration is resolved once at construction; a
    ``ConfigValidationError`` raised there is propagated to the caller. Every
    method issues exactly one HTTP request and returns the typed response, or
    raises ``TransportError`` (``BodyEncodingError`` for uploads that cannot
    be encoded). A request given as a mapping is validated against its
    request model first; a malformed one raises ``pydantic.ValidationError``
    and nothing is sent.

    Example:
        with OpenAIConnector({"auth": {"token": "sk-..."}}) as openai:
            models = openai.list_models()
    """

    def __init__(
        self,
        config: ConnectionConfig | Mapping[str, Any],
        service_url: str = DEFAULT_SERVICE_URL,
        *,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._config = ConfigurationResolver().resolve(config)
        self._builder = MultipartRequestBuilder()
        self.service_url = service_url.rstrip("/")
        self._client = HTTPClientFactory.create_client(
            self._config, base_url=self.service_url, transport=transport
        )

    @property
    def config(self) -> ResolvedHttpClientConfig:
        return self._config

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "OpenAIConnector":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    # Images

    def create_image(
        self, request: CreateImageRequest | Mapping[str, Any]
    ) -> ImagesResponse:
        """Create images from a prompt."""
        return self._execute(
            "POST",
            "/images/generations",
            json_body=_coerce(CreateImageRequest, request),
            response_model=ImagesResponse,
        )

    def create_image_edit(
        self, request: CreateImageEditRequest | Mapping[str, Any]
    ) -> ImagesResponse:
        """Edit an image given the original, an optional mask and a prompt."""
        return self._execute(
            "POST",
            "/images/edits",
            payload=_coerce(CreateImageEditRequest, request),
            response_model=ImagesResponse,
        )

    def create_image_variation(
        self, request: CreateImageVariationRequest | Mapping[str, Any]
    ) -> ImagesResponse:
        """Create variations of an image."""
        return self._execute(
            "POST",
            "/images/variations",
            payload=_coerce(CreateImageVariationRequest, request),
            response_model=ImagesResponse,
        )

    # Audio

    def create_transcription(
        self, request: CreateTranscriptionRequest | Mapping[str, Any]
    ) -> TranscriptionResponse:
        """Transcribe audio into the input language."""
        return self._execute(
            "POST",
            "/audio/transcriptions",
            payload=_coerce(CreateTranscriptionRequest, request),
            response_model=TranscriptionResponse,
        )

    def create_translation(
        self, request: CreateTranslationRequest | Mapping[str, Any]
    ) -> TranslationResponse:
        """Translate audio into English."""
        return self._execute(
            "POST",
            "/audio/translations",
            payload=_coerce(CreateTranslationRequest, request),
            response_model=TranslationResponse,
        )

    # Files

    def list_files(self) -> ListFilesResponse:
        return self._execute("GET", "/files", response_model=ListFilesResponse)

    def create_file(self, request: CreateFileRequest | Mapping[str, Any]) -> OpenAIFile:
        """Upload a file for use with other endpoints such as fine-tuning."""
        return self._execute(
            "POST",
            "/files",
            payload=_coerce(CreateFileRequest, request),
            response_model=OpenAIFile,
        )

    def retrieve_file(self, file_id: str) -> OpenAIFile:
        return self._execute(
            "GET", f"/files/{_segment(file_id)}", response_model=OpenAIFile
        )

    def delete_file(self, file_id: str) -> DeleteFileResponse:
        return self._execute(
            "DELETE", f"/files/{_segment(file_id)}", response_model=DeleteFileResponse
        )

    def download_file(self, file_id: str) -> str:
        """Return the raw contents of an uploaded file."""
        return self._execute("GET", f"/files/{_segment(file_id)}/content", raw=True)

    # Fine-tunes

    def create_fine_tune(
        self, request: CreateFineTuneRequest | Mapping[str, Any]
    ) -> FineTune:
        """Start a fine-tuning job."""
        return self._execute(
            "POST",
            "/fine-tunes",
            json_body=_coerce(CreateFineTuneRequest, request),
            response_model=FineTune,
        )

    def list_fine_tunes(self) -> ListFineTunesResponse:
        return self._execute("GET", "/fine-tunes", response_model=ListFineTunesResponse)

    def retrieve_fine_tune(self, fine_tune_id: str) -> FineTune:
        return self._execute(
            "GET", f"/fine-tunes/{_segment(fine_tune_id)}", response_model=FineTune
        )

    def cancel_fine_tune(self, fine_tune_id: str) -> FineTune:
        return self._execute(
            "POST",
            f"/fine-tunes/{_segment(fine_tune_id)}/cancel",
            response_model=FineTune,
        )

    def list_fine_tune_events(self, fine_tune_id: str) -> ListFineTuneEventsResponse:
        # Streaming events are not supported, so stream is always false
        return self._execute(
            "GET",
            f"/fine-tunes/{_segment(fine_tune_id)}/events",
            params={"stream": "false"},
            response_model=ListFineTuneEventsResponse,
        )

    # Models

    def list_models(self) -> ListModelsResponse:
        return self._execute("GET", "/models", response_model=ListModelsResponse)

    def retrieve_model(self, model: str) -> Model:
        return self._execute("GET", f"/models/{_segment(model)}", response_model=Model)

    def delete_model(self, model: str) -> DeleteModelResponse:
        """Delete a fine-tuned model owned by your organization."""
        return self._execute(
            "DELETE", f"/models/{_segment(model)}", response_model=DeleteModelResponse
        )

    # Chat

    def create_chat_completion(
        self, request: CreateChatCompletionRequest | Mapping[str, Any]
    ) -> ChatCompletionResponse:
        """Create a model response for the given chat conversation."""
        return self._execute(
            "POST",
            "/chat/completions",
            json_body=_coerce(CreateChatCompletionRequest, request),
            response_model=ChatCompletionResponse,
        )

    def _execute(
        self,
        method: str,
        path: str,
        *,
        response_model: type[ResponseT] | None = None,
        json_body: OpenAIRequest | None = None,
        payload: OpenAIRequest | None = None,
        params: dict[str, str] | None = None,
        raw: bool = False,
    ) -> Any:
        """Send one request and decode its response.

        Args:
            method: HTTP method
            path: Resource path relative to the service URL
            response_model: Model the JSON response is decoded into
            json_body: Request sent as a JSON body
            payload: Request sent as a multipart body
            params: Query parameters
            raw: Return the response text instead of decoding JSON

        Raises:
            BodyEncodingError: The multipart payload could not be encoded
            TransportError: Network failure, error status or undecodable body
        """
        kwargs: dict[str, Any] = {}
        if json_body is not None:
            kwargs["json"] = json_body.model_dump(mode="json", exclude_none=True, by_alias=True)
        if payload is not None:
            kwargs["files"] = to_httpx_files(self._builder.build_parts(payload))

        start = time.perf_counter()
        try:
            response = self._client.request(method, path, params=params, **kwargs)
        except httpx.HTTPError as e:
            logger.warning(
                "openai_request_failed",
                method=method,
                path=path,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise TransportError(f"{method} {path} failed: {e}") from e

        logger.debug(
            "openai_request_sent",
            method=method,
            path=path,
            status_code=response.status_code,
            duration_ms=round((time.perf_counter() - start) * 1000, 2),
        )

        if response.is_error:
            error = _status_error(response)
            logger.warning(
                "openai_error_response",
                method=method,
                path=path,
                status_code=response.status_code,
                error_type=error.error_type,
            )
            raise error

        if raw:
            return response.text

        try:
            data = response.json()
        except ValueError as e:
            raise TransportError(
                f"{method} {path} returned a body that is not JSON",
                status_code=response.status_code,
                body=response.text[:_ERROR_BODY_LIMIT],
            ) from e

        if response_model is None:
            return data
        if not isinstance(data, dict):
            raise TransportError(
                f"{method} {path} returned {type(data).__name__}, expected an object",
                status_code=response.status_code,
                body=response.text[:_ERROR_BODY_LIMIT],
            )
        if not self._config.validation:
            return response_model.model_construct(**data)
        try:
            return response_model.model_validate(data)
        except ValidationError as e:
            raise TransportError(
                f"{method} {path} returned a body that does not match {response_model.__name__}",
                status_code=response.status_code,
                body=response.text[:_ERROR_BODY_LIMIT],
                details={"errors": e.errors(include_url=False)},
            ) from e
