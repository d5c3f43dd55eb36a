"""
Фикстуры тестов TeamDocs.

- часы с шагом в секунду: отметки времени различны и упорядочены
- хранилища (в памяти и SQLite через aiosqlite) для контрактных тестов
- подменный генератор текста вместо Gemini
- тестовый клиент FastAPI поверх хранилища в памяти
"""
import os
import uuid
from datetime import datetime, timedelta, timezone

# Настройки читаются при импорте
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("STORAGE_BACKEND", "memory")

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from sqlalchemy import delete

from teamdocs.core.config import Settings
from teamdocs.db.backends import MemoryBackend, SqlBackend
from teamdocs.db.models import User as UserModel
from teamdocs.domains.assistant.generators import TextGenerator
from teamdocs.domains.identity.entities import User
from teamdocs.main import create_app


class TickingClock:
    """Каждый вызов возвращает момент на секунду позже предыдущего"""

    def __init__(self, start=datetime(2026, 1, 1, tzinfo=timezone.utc), step=timedelta(seconds=1)):
        self.current = start
        self.step = step

    def __call__(self):
        self.current += self.step
        return self.current


class FakeGenerator(TextGenerator):
    """Отдает заготовленные ответы по очереди и запоминает вызовы"""

    def __init__(self, responses=None, error=None):
        self.responses = list(responses or [])
        self.error = error
        self.calls = []

    async def generate(self, prompt, *, model, system_instruction=None, response_schema=None):
        self.calls.append({
            "prompt": prompt,
            "model": model,
            "system_instruction": system_instruction,
            "response_schema": response_schema,
        })
        if self.error is not None:
            raise self.error
        return self.responses.pop(0) if self.responses else ""


def make_user(email, name=None, role="user"):
    """Пользователь с фиктивным хешем; хеширование проверяется в test_identity"""
    return User(
        id=uuid.uuid4(),
        email=email,
        password_hash="not-a-real-hash",
        name=name or email.split("@")[0].title(),
        role=role,
    )


@pytest.fixture
def settings():
    return Settings(
        jwt_secret="test-secret",
        storage_backend="memory",
        database_url="sqlite+aiosqlite:///:memory:",
        admin_emails=["admin@example.com"],
        semantic_relevance_threshold=30,
    )


@pytest_asyncio.fixture(params=["memory", "sql"])
async def backend(request, settings):
    clock = TickingClock()
    if request.param == "sql":
        backend = SqlBackend(settings.model_copy(update={"storage_backend": "sql"}), clock=clock)
    else:
        backend = MemoryBackend(clock=clock)
    await backend.startup()
    yield backend
    await backend.shutdown()


@pytest_asyncio.fixture
async def repos(backend):
    async with backend.open() as repositories:
        yield repositories


@pytest_asyncio.fixture
async def alice(repos):
    return await repos.users.create(make_user("alice@example.com"))


@pytest_asyncio.fixture
async def bob(repos):
    return await repos.users.create(make_user("bob@example.com"))


@pytest.fixture
def remove_user(backend, repos):
    """Удаление пользователя в обход репозитория (штатного удаления нет)"""

    async def _remove(user_id):
        if isinstance(backend, MemoryBackend):
            del backend.store.users[user_id]
        else:
            session = repos.documents.session
            await session.execute(delete(UserModel).where(UserModel.id == user_id))
            await session.commit()

    return _remove


@pytest.fixture
def generator():
    return FakeGenerator()


@pytest.fixture
def client(settings, generator):
    app = create_app(settings, backend=MemoryBackend(clock=TickingClock()), generator=generator)
    with TestClient(app) as test_client:
        yield test_client


def register(client, email, password="secret123", name=None):
    response = client.post("/api/auth/register", json={
        "email": email,
        "password": password,
        "name": name or email.split("@")[0].title(),
    })
    assert response.status_code == 201, response.text
    body = response.json()
    return {"Authorization": f"Bearer {body['token']}"}, body["user"]
