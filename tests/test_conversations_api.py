"""Integration tests covering direct conversation endpoints."""
from __future__ import annotations

import os
from typing import Callable, Iterator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import delete

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///./test_friendline.db")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")

from friendline.config import get_settings  # noqa: E402
from friendline.database import Base, SessionLocal, engine  # noqa: E402
from friendline.main import app  # noqa: E402
from friendline.models import Conversation, ConversationMessage, User  # noqa: E402
from friendline.services import get_current_user  # noqa: E402


@pytest.fixture(scope="module", autouse=True)
def _create_schema() -> Iterator[None]:
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)
    engine.dispose()
    if engine.url.get_backend_name() == "sqlite" and engine.url.database and os.path.exists(engine.url.database):
        os.remove(engine.url.database)


@pytest.fixture(autouse=True)
def _clean_database() -> Iterator[None]:
    with SessionLocal() as session:
        session.execute(delete(ConversationMessage))
        session.execute(delete(Conversation))
        session.execute(delete(User))
        session.commit()
    yield


@pytest.fixture
def user_factory() -> Callable[[str], User]:
    def _factory(username: str) -> User:
        with SessionLocal() as session:
            user = User(username=username, hashed_password="test-hash")
            session.add(user)
            session.commit()
            session.refresh(user)
            return user
    return _factory


@pytest.fixture
def authed_client() -> Iterator[Callable[[User], TestClient]]:
    with TestClient(app) as client:
        def _with_user(user: User) -> TestClient:
            def _override() -> User:
                return user
            app.dependency_overrides[get_current_user] = _override
            return client
        yield _with_user
    app.dependency_overrides.clear()


def test_conversation_flow(authed_client, user_factory):
    alice = user_factory("alice")
    bob = user_factory("bob")

    client = authed_client(alice)
    opened = client.post(f"/conversations/with/{bob.id}")
    assert opened.status_code == 200, opened.text
    thread = opened.json()
    assert thread["messages"] == []
    assert thread["last_message"] is None
    assert sorted(thread["participants"]) == sorted([str(alice.id), str(bob.id)])
    conversation_id = thread["id"]

    for content in ("a", "b", "c"):
        sent = client.post(f"/conversations/{conversation_id}/messages", json={"content": content})
        assert sent.status_code == 201, sent.text
        assert sent.json()["sender_id"] == str(alice.id)

    client = authed_client(bob)
    reopened = client.post(f"/conversations/with/{alice.id}").json()
    assert reopened["id"] == conversation_id
    assert [message["content"] for message in reopened["messages"]] == ["a", "b", "c"]
    assert reopened["last_message"]["content"] == "c"
    assert reopened["last_message"]["sender_id"] == str(alice.id)

    reply = client.post(f"/conversations/{conversation_id}/messages", json={"content": "hi"})
    assert reply.status_code == 201

    detail = client.get(f"/conversations/{conversation_id}").json()
    assert detail["last_message"]["content"] == "hi"
    assert detail["last_message"]["sender_id"] == str(bob.id)

    listing = client.get("/conversations/").json()
    assert [item["id"] for item in listing] == [conversation_id]


def test_conversation_errors(authed_client, user_factory):
    alice = user_factory("alice")
    bob = user_factory("bob")
    mallory = user_factory("mallory")

    client = authed_client(alice)
    assert client.post(f"/conversations/with/{alice.id}").status_code == 400
    conversation_id = client.post(f"/conversations/with/{bob.id}").json()["id"]
    assert client.post(f"/conversations/{conversation_id}/messages", json={"content": "   "}).status_code == 400
    assert client.post(f"/conversations/{conversation_id}/messages", json={"content": ""}).status_code == 400
    assert client.post(f"/conversations/{conversation_id}/messages", json={"content": "x" * 2001}).status_code == 400

    client = authed_client(mallory)
    assert client.get(f"/conversations/{conversation_id}").status_code == 404
    assert client.post(f"/conversations/{conversation_id}/messages", json={"content": "hey"}).status_code == 404
    assert client.get("/conversations/").json() == []


def test_message_limit_follows_configuration(authed_client, user_factory, monkeypatch):
    alice = user_factory("alice")
    bob = user_factory("bob")
    client = authed_client(alice)
    conversation_id = client.post(f"/conversations/with/{bob.id}").json()["id"]

    monkeypatch.setattr(get_settings(), "message_max_length", 5000)
    accepted = client.post(f"/conversations/{conversation_id}/messages", json={"content": "x" * 3000})
    assert accepted.status_code == 201, accepted.text

    monkeypatch.setattr(get_settings(), "message_max_length", 10)
    rejected = client.post(f"/conversations/{conversation_id}/messages", json={"content": "x" * 11})
    assert rejected.status_code == 400
    assert rejected.json()["detail"] == "Message content exceeds 10 characters"
