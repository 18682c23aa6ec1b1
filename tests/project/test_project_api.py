# ruff: noqa: S101

"""Tests for the project endpoints."""

from pathlib import Path

import pytest
from fastapi import status
from fastapi.testclient import TestClient

from dlama.config import settings
from tests.utils import PNG_BYTES

_WRONG_ID = "00000000-0000-0000-0000-000000000000"


def _create_project(client: TestClient, data_type: str) -> str:
    response = client.post(
        "/projects", json={"name": f"{data_type} project", "data_type": data_type}
    )
    assert response.status_code == status.HTTP_201_CREATED
    return response.headers["Location"].split("/")[-1]


@pytest.mark.project
class TestProjects:
    """Tests for POST, GET and DELETE /projects."""

    @staticmethod
    def test_create_text_project(client: TestClient) -> None:
        """A text project is created without a storage directory."""
        project_id = _create_project(client, "text")

        response = client.get(f"/projects/{project_id}")
        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body["id"] == project_id
        assert body["data_type"] == "text"
        assert body["version"] == 0
        assert "storage_path" not in body
        assert not (settings.project_storage_dir / f"project_{project_id}").exists()

    @staticmethod
    def test_create_image_project_creates_storage(client: TestClient) -> None:
        """An image project gets its own storage directory."""
        project_id = _create_project(client, "image")

        assert (settings.project_storage_dir / f"project_{project_id}").is_dir()

    @pytest.mark.edge_cases
    @pytest.mark.parametrize(
        "payload",
        [
            {"name": "", "data_type": "text"},
            {"name": "audio", "data_type": "audio"},
            {"data_type": "text"},
        ],
    )
    @staticmethod
    def test_create_invalid_project(client: TestClient, payload: dict) -> None:
        """Invalid project payloads are rejected."""
        response = client.post("/projects", json=payload)

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    @staticmethod
    def test_get_unknown_project(client: TestClient) -> None:
        """Unknown project IDs yield 404."""
        response = client.get(f"/projects/{_WRONG_ID}")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["code"] == "NOT_FOUND"

    @staticmethod
    def test_delete_project_removes_data_and_files(client: TestClient) -> None:
        """Deleting a project removes its data points and storage directory."""
        project_id = _create_project(client, "image")
        client.post(
            f"/projects/{project_id}/datapoints",
            files={"file": ("a.png", PNG_BYTES, "image/png")},
        )
        directory: Path = settings.project_storage_dir / f"project_{project_id}"
        assert any(directory.iterdir())

        response = client.delete(f"/projects/{project_id}")

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert not directory.exists()
        assert (
            client.get(f"/projects/{project_id}").status_code
            == status.HTTP_404_NOT_FOUND
        )
        assert (
            client.get(f"/projects/{project_id}/datapoints").status_code
            == status.HTTP_404_NOT_FOUND
        )

    @staticmethod
    def test_delete_unknown_project(client: TestClient) -> None:
        """Deleting an unknown project yields 404."""
        response = client.delete(f"/projects/{_WRONG_ID}")

        assert response.status_code == status.HTTP_404_NOT_FOUND
