"""Fixtures for API tests backed by a temporary SQLite database."""

import pytest
from fastapi.testclient import TestClient

from app.core.config import Settings, get_settings
from app.main import create_app


@pytest.fixture
def settings(tmp_path):
    """Settings pointing at a fresh database and log directory."""
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        log_dir=tmp_path / "logs",
        llm_provider_type="simulated",
        llm_chat_model="sim-model",
        default_system_prompt="You are a test assistant.",
    )


@pytest.fixture
def client(settings):
    """TestClient running the app lifespan against the temporary database."""
    app = create_app(settings)
    app.dependency_overrides[get_settings] = lambda: settings

    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def create_template(client):
    """Factory fixture creating a template through the API."""

    def _create(**overrides):
        payload = {
            "name": "Greeting",
            "description": "Friendly greeting",
            "category": "Onboarding",
            "content": "Hello {{name}}, welcome to {{company}}!",
        }
        payload.update(overrides)
        response = client.post("/templates", json=payload)
        assert response.status_code == 201, response.text
        return response.json()

    return _create
