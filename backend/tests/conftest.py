"""
Shared pytest fixtures for nooklet tests.

Every test gets its own SQLite file; Backboard is replaced by an in-memory fake.
"""

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from nooklet.app import create_app
from nooklet.database.db import init_db
from nooklet.models import (
    AssistantCreated,
    ChatResponse,
    DocumentCreated,
    RegisterRequest,
    ThreadCreated,
)
from nooklet.services.auth import AuthService
from nooklet.services.nooklets import NookletService
from nooklet.services.profiles import ProfileService


class FakeBackboard:
    """Records calls and returns canned results instead of calling Backboard.io."""

    def __init__(self, available: bool = True):
        self.is_available = available
        self.assistants: list[dict] = []
        self.documents: list[dict] = []
        self.prompts: list[str] = []
        self.retrieved_files = 3

    async def create_assistant(self, name: str, description: str = "") -> AssistantCreated:
        if not self.is_available:
            return AssistantCreated(success=False)
        assistant_id = f"asst-{len(self.assistants) + 1}"
        self.assistants.append({"id": assistant_id, "name": name, "description": description})
        return AssistantCreated(success=True, id=assistant_id)

    async def create_thread(self, assistant_id: str) -> ThreadCreated:
        if not self.is_available:
            return ThreadCreated(success=False)
        return ThreadCreated(success=True, id=f"thread-{assistant_id}")

    async def upload_document(self, assistant_id: str, document_name: str, content: str) -> DocumentCreated:
        if not self.is_available:
            return DocumentCreated(success=False, error="Backboard service unavailable")
        self.documents.append({"assistant_id": assistant_id, "name": document_name, "content": content})
        return DocumentCreated(success=True, id=f"doc-{len(self.documents)}")

    async def chat(self, thread_id: str, prompt: str) -> ChatResponse:
        if not self.is_available:
            return ChatResponse(success=False, error="Backboard service unavailable")
        self.prompts.append(prompt)
        return ChatResponse(
            success=True,
            response="You went hiking on Saturday.",
            retrieved_files_count=self.retrieved_files,
        )


@pytest.fixture
def db_path(tmp_path: Path) -> str:
    return str(tmp_path / "nooklet.db")


@pytest.fixture
async def profile_service(db_path: str) -> ProfileService:
    await init_db(db_path)
    return ProfileService(db_path=db_path)


@pytest.fixture
async def auth_service(db_path: str, profile_service: ProfileService) -> AuthService:
    return AuthService(db_path=db_path, profiles=profile_service, secret_key="test-secret")


@pytest.fixture
async def nooklet_service(db_path: str, profile_service: ProfileService) -> NookletService:
    return NookletService(db_path=db_path)


@pytest.fixture
async def owner_id(auth_service: AuthService) -> str:
    _, profile = await auth_service.register(
        RegisterRequest(
            email="owner@example.com",
            password="correct-horse",
            password_confirmation="correct-horse",
        )
    )
    return profile.id


@pytest.fixture
async def other_owner_id(auth_service: AuthService) -> str:
    _, profile = await auth_service.register(
        RegisterRequest(
            email="other@example.com",
            password="correct-horse",
            password_confirmation="correct-horse",
        )
    )
    return profile.id


@pytest.fixture
def fake_backboard() -> FakeBackboard:
    return FakeBackboard()


@pytest.fixture
def client(db_path: str, fake_backboard: FakeBackboard):
    app = create_app(db_path=db_path, backboard=fake_backboard)
    with TestClient(app) as test_client:
        yield test_client


def register_and_login(client: TestClient, email: str, username: str | None = None) -> dict[str, str]:
    """Create an account through the API and return bearer headers for it."""
    body = {
        "email": email,
        "password": "correct-horse",
        "passwordConfirmation": "correct-horse",
    }
    if username:
        body["username"] = username
    response = client.post("/register", json=body)
    assert response.status_code == 201, response.text

    response = client.post("/login", json={"email": email, "password": "correct-horse"})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['accessToken']}"}


@pytest.fixture
def auth_headers(client: TestClient) -> dict[str, str]:
    return register_and_login(client, "writer@example.com")
