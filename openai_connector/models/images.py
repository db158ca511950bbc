"""Image generation, edit and variation models."""

from typing import Literal

from pydantic import Field

from .common import FileContent, OpenAIRequest, OpenAIResponse


ImageSize = Literal["256x256", "512x512", "1024x1024"]
ImageResponseFormat = Literal["url", "b64_json"]


class CreateImageRequest(OpenAIRequest):
    """Request body for ``POST /images/generations``."""

    prompt: str = Field(
        ..., description="A text description of the desired image(s)", max_length=1000
    )
    n: int | None = Field(1, description="The number of images to generate", ge=1, le=10)
    size: ImageSize | None = Field("1024x1024", description="The size of the generated images")
    response_format: ImageResponseFormat | None = Field(
        "url", description="The format in which the generated images are returned"
    )
    user: str | None = Field(
        None, description="A unique identifier representing your end-user"
    )


class CreateImageEditRequest(OpenAIRequest):
    """Multipart body for ``POST /images/edits``."""

    image: FileContent = Field(
        ..., description="The square PNG image to edit, less than 4MB"
    )
    mask: FileContent | None = Field(
        None, description="PNG whose transparent areas indicate where to edit"
    )
    prompt: str = Field(
        ..., description="A text description of the desired image(s)", max_length=1000
    )
    n: int | None = Field(1, ge=1, le=10)
    size: ImageSize | None = Field("1024x1024")
    response_format: ImageResponseFormat | None = Field("url")
    user: str | None = None


class CreateImageVariationRequest(OpenAIRequest):
    """Multipart body for ``POST /images/variations``."""

    image: FileContent = Field(
        ..., description="The square PNG image to use as the basis for the variation(s)"
    )
    n: int | None = Field(1, ge=1, le=10)
    size: ImageSize | None = Field("1024x1024")
    response_format: ImageResponseFormat | None = Field("url")
    user: str | None = None


class ImageData(OpenAIResponse):
    url: str | None = None
    b64_json: str | None = None


class ImagesResponse(OpenAIResponse):
    created: int
    data: list[ImageData]
