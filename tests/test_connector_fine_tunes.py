"""Tests for fine-tune endpoints of OpenAIConnector."""

import json

import pytest
from pytest_httpx import HTTPXMock

from openai_connector import OpenAIConnector
from openai_connector.models import CreateFineTuneRequest, FineTune
from tests.conftest import API_BASE


FINE_TUNE = {
    "id": "ft-AF1WoRqd3aJAHsqc9NY7iL8F",
    "object": "fine-tune",
    "model": "curie",
    "created_at": 1614807352,
    "events": [
        {
            "object": "fine-tune-event",
            "created_at": 1614807352,
            "level": "info",
            "message": "Job enqueued. Waiting for jobs ahead to complete.",
        }
    ],
    "fine_tuned_model": None,
    "hyperparams": {"batch_size": 4, "n_epochs": 4},
    "organization_id": "org-123",
    "result_files": [],
    "status": "pending",
    "validation_files": [],
    "training_files": [
        {"id": "file-XGinujblHPwGLSztz8cPS8XY", "object": "file", "bytes": 1547276}
    ],
    "updated_at": 1614807352,
}


@pytest.mark.integration
class TestFineTunes:
    """Test the /fine-tunes endpoints."""

    def test_create_fine_tune(self, connector: OpenAIConnector, httpx_mock: HTTPXMock) -> None:
        httpx_mock.add_response(method="POST", url=f"{API_BASE}/fine-tunes", json=FINE_TUNE)

        result = connector.create_fine_tune(
            CreateFineTuneRequest(training_file="file-XGinujblHPwGLSztz8cPS8XY", n_epochs=4)
        )

        assert isinstance(result, FineTune)
        assert result.status == "pending"
        assert result.training_files[0].bytes == 1547276
        assert json.loads(httpx_mock.get_request().read()) == {
            "training_file": "file-XGinujblHPwGLSztz8cPS8XY",
            "n_epochs": 4,
        }

    def test_list_fine_tunes(self, connector: OpenAIConnector, httpx_mock: HTTPXMock) -> None:
        httpx_mock.add_response(
            method="GET",
            url=f"{API_BASE}/fine-tunes",
            json={"object": "list", "data": [FINE_TUNE]},
        )

        result = connector.list_fine_tunes()

        assert [ft.id for ft in result.data] == ["ft-AF1WoRqd3aJAHsqc9NY7iL8F"]

    def test_retrieve_fine_tune(
        self, connector: OpenAIConnector, httpx_mock: HTTPXMock
    ) -> None:
        httpx_mock.add_response(
            method="GET", url=f"{API_BASE}/fine-tunes/ft-AF1WoRqd3aJAHsqc9NY7iL8F", json=FINE_TUNE
        )

        result = connector.retrieve_fine_tune("ft-AF1WoRqd3aJAHsqc9NY7iL8F")

        assert result.events[0].level == "info"

    def test_cancel_fine_tune(self, connector: OpenAIConnector, httpx_mock: HTTPXMock) -> None:
        httpx_mock.add_response(
            method="POST",
            url=f"{API_BASE}/fine-tunes/ft-AF1WoRqd3aJAHsqc9NY7iL8F/cancel",
            json={**FINE_TUNE, "status": "cancelled"},
        )

        result = connector.cancel_fine_tune("ft-AF1WoRqd3aJAHsqc9NY7iL8F")

        assert result.status == "cancelled"
        assert httpx_mock.get_request().read() == b""

    def test_list_events_never_streams(
        self, connector: OpenAIConnector, httpx_mock: HTTPXMock
    ) -> None:
        httpx_mock.add_response(
            method="GET",
            url=f"{API_BASE}/fine-tunes/ft-AF1WoRqd3aJAHsqc9NY7iL8F/events?stream=false",
            json={"object": "list", "data": FINE_TUNE["events"]},
        )

        result = connector.list_fine_tune_events("ft-AF1WoRqd3aJAHsqc9NY7iL8F")

        assert result.data[0].message.startswith("Job enqueued")
