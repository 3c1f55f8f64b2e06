import os

# Keep every test offline regardless of the developer's shell
os.environ["GTM_ANTHROPIC_API_KEY"] = ""
os.environ["ANTHROPIC_API_KEY"] = ""

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from factories import FakeLLM  # noqa: E402
from gtm_engine.config import Settings, get_settings  # noqa: E402
from gtm_engine.generator import ContentService  # noqa: E402
from gtm_engine.main import app, get_content_service  # noqa: E402
from gtm_engine.workspace import workspace  # noqa: E402

get_settings.cache_clear()


@pytest.fixture(autouse=True)
def clean_workspace():
    workspace.reset()
    yield
    workspace.reset()
    app.dependency_overrides.clear()


@pytest.fixture
def settings() -> Settings:
    return Settings(stream_progress_every=2)


@pytest.fixture
def fake_llm() -> FakeLLM:
    return FakeLLM()


@pytest.fixture
def service(fake_llm, settings) -> ContentService:
    return ContentService(fake_llm, settings)


@pytest.fixture
def client(service) -> TestClient:
    app.dependency_overrides[get_content_service] = lambda: service
    return TestClient(app)


@pytest.fixture
def offline_client(settings) -> TestClient:
    app.dependency_overrides[get_content_service] = lambda: ContentService(None, settings)
    return TestClient(app)
