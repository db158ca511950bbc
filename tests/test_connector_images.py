"""Tests for image endpoints of OpenAIConnector."""

import json

import pytest
from pytest_httpx import HTTPXMock

from openai_connector import OpenAIConnector
from openai_connector.exceptions import BodyEncodingError
from openai_connector.models import (
    CreateImageEditRequest,
    CreateImageRequest,
    FileContent,
    ImagesResponse,
)
from tests.conftest import API_BASE


IMAGES_RESPONSE = {
    "created": 1589478378,
    "data": [{"url": "https://images.example/1.png"}, {"url": "https://images.example/2.png"}],
}


@pytest.mark.integration
class TestCreateImage:
    """Test POST /images/generations."""

    def test_sends_json_body(self, connector: OpenAIConnector, httpx_mock: HTTPXMock) -> None:
        httpx_mock.add_response(
            method="POST", url=f"{API_BASE}/images/generations", json=IMAGES_RESPONSE
        )

        result = connector.create_image(
            CreateImageRequest(prompt="A cute baby sea otter", n=2)
        )

        assert isinstance(result, ImagesResponse)
        assert [d.url for d in result.data] == [
            "https://images.example/1.png",
            "https://images.example/2.png",
        ]
        request = httpx_mock.get_request()
        assert request.headers["Content-Type"] == "application/json"
        assert json.loads(request.read()) == {
            "prompt": "A cute baby sea otter",
            "n": 2,
            "size": "1024x1024",
            "response_format": "url",
        }

    def test_accepts_mapping(self, connector: OpenAIConnector, httpx_mock: HTTPXMock) -> None:
        httpx_mock.add_response(
            method="POST",
            url=f"{API_BASE}/images/generations",
            json={"created": 1, "data": [{"b64_json": "aGk="}]},
        )

        result = connector.create_image({"prompt": "otter", "response_format": "b64_json"})

        assert result.data[0].b64_json == "aGk="


@pytest.mark.integration
class TestCreateImageEdit:
    """Test POST /images/edits."""

    def test_sends_multipart_in_field_order(
        self, connector: OpenAIConnector, httpx_mock: HTTPXMock, png_bytes: bytes
    ) -> None:
        httpx_mock.add_response(
            method="POST", url=f"{API_BASE}/images/edits", json=IMAGES_RESPONSE
        )

        connector.create_image_edit(
            CreateImageEditRequest(
                image=FileContent(content=png_bytes, file_name="otter.png"),
                mask=FileContent(content=png_bytes, file_name="mask.png"),
                prompt="A sunlit indoor lounge area with a pool",
            )
        )

        request = httpx_mock.get_request()
        assert request.headers["Content-Type"].startswith("multipart/form-data; boundary=")
        body = request.read()
        image_at = body.index(b'name="image"; filename="otter.png"')
        mask_at = body.index(b'name="mask"; filename="mask.png"')
        prompt_at = body.index(b'name="prompt"')
        n_at = body.index(b'name="n"')
        assert image_at < mask_at < prompt_at < n_at
        assert png_bytes in body
        assert b"A sunlit indoor lounge area with a pool" in body
        assert b'name="user"' not in body

    def test_unreadable_image_raises_before_sending(
        self, connector: OpenAIConnector, httpx_mock: HTTPXMock
    ) -> None:
        with pytest.raises(BodyEncodingError) as exc_info:
            connector.create_image_edit(
                {"image": {"content": "/nonexistent/otter.png"}, "prompt": "hat"}
            )

        assert exc_info.value.field == "image"
        assert httpx_mock.get_requests() == []


@pytest.mark.integration
class TestCreateImageVariation:
    """Test POST /images/variations."""

    def test_sends_image_part(
        self, connector: OpenAIConnector, httpx_mock: HTTPXMock, png_bytes: bytes
    ) -> None:
        httpx_mock.add_response(
            method="POST", url=f"{API_BASE}/images/variations", json=IMAGES_RESPONSE
        )

        result = connector.create_image_variation(
            {"image": {"content": png_bytes, "file_name": "otter.png"}, "n": 2}
        )

        assert len(result.data) == 2
        body = httpx_mock.get_request().read()
        assert b'name="image"; filename="otter.png"' in body
        assert b"Content-Type: application/octet-stream" in body
