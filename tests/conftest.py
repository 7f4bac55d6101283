"""Shared fixtures: an in-process app with a scripted chat model."""

from collections.abc import AsyncGenerator, Generator
from typing import Annotated

import pytest
from fastapi import Depends, FastAPI
from fastapi.testclient import TestClient
from langchain_core.language_models.fake_chat_models import FakeListChatModel

from genchat.app import get_app
from genchat.configs.config import AppConfig, get_app_config
from genchat.core.llm import build_llm
from genchat.infra.lifespan import get_app as get_lifespan_app

ASSISTANT_REPLY = "Hello! How can I help you today?"


@pytest.fixture
def app_config() -> AppConfig:
    return AppConfig(
        third_party={"postgres_uri": None},
        auth={"token_secret": "test-secret", "client_url": "http://client.test"},
        google={
            "client_id": "google-client-id",
            "client_secret": "google-client-secret",
            "redirect_uri": "http://testserver/google-auth/callback",
        },
        llm={"api_key": "test-key", "timeout": 5},
        logging={"json_output": False},
    )


@pytest.fixture
def fake_llm() -> FakeListChatModel:
    return FakeListChatModel(responses=[ASSISTANT_REPLY])


@pytest.fixture
def app(app_config: AppConfig, fake_llm: FakeListChatModel) -> FastAPI:
    app = get_app(app_config)

    async def build_fake_llm(
        app: Annotated[FastAPI, Depends(get_lifespan_app)],
    ) -> AsyncGenerator[None, None]:
        app.state.llm = fake_llm
        yield

    app.dependency_overrides[get_app_config] = lambda: app_config
    app.dependency_overrides[build_llm] = build_fake_llm
    return app


@pytest.fixture
def client(app: FastAPI) -> Generator[TestClient, None, None]:
    with TestClient(app) as client:
        yield client


def signup_and_login(
    client: TestClient,
    name: str = "A",
    email: str = "a@x.com",
    password: str = "secret123",
) -> str:
    """Register an account, log in (storing the cookie), return the user id."""
    response = client.post(
        "/signup", json={"name": name, "email": email, "password": password}
    )
    assert response.status_code == 201, response.text
    response = client.post("/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return response.json()["userId"]
