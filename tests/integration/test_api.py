"""Integration smoke tests for the REST API, backed by an in-memory container."""
from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from apex_chat.app import create_app
from apex_chat.container import build_container
from apex_chat.infrastructure.memory.store import InMemoryChatStore
from tests.conftest import T0, TickingClock, make_conversation, make_message, make_token


def _auth(user_id: str = "u1", role: str = "candidate") -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token(user_id, role)}"}


@pytest.fixture
def api_store() -> InMemoryChatStore:
    return InMemoryChatStore()


@pytest.fixture
def client(api_store):
    app = create_app(build_container(store=api_store, clock=TickingClock()))
    return TestClient(app, raise_server_exceptions=False)


def test_healthz(client):
    resp = client.get("/healthz")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


def test_readyz_reports_store_sizes(client, api_store):
    api_store.conversations.append(make_conversation())
    api_store.messages.append(make_message())

    resp = client.get("/readyz")

    assert resp.status_code == 200
    assert resp.json() == {"status": "ready", "conversations": 1, "messages": 1, "connections": 0}


def test_correlation_id_is_echoed(client):
    resp = client.get("/healthz", headers={"X-Request-ID": "req-123"})
    assert resp.headers["X-Request-ID"] == "req-123"


def test_list_conversations_requires_token(client):
    resp = client.get("/api/v1/chat/conversations")
    assert resp.status_code == 401


def test_list_conversations_rejects_bad_token(client):
    resp = client.get(
        "/api/v1/chat/conversations",
        headers={"Authorization": "Bearer not-a-jwt"},
    )
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Invalid token"


def test_list_conversations_empty(client):
    resp = client.get("/api/v1/chat/conversations", headers=_auth())
    assert resp.status_code == 200
    assert resp.json() == []


def test_list_conversations_with_unread_count(client, api_store):
    api_store.conversations.append(make_conversation("u1", "u2"))
    api_store.messages.extend([
        make_message(message_id="msg_1", sender_id="u2", receiver_id="u1"),
        make_message(message_id="msg_2", sender_id="u2", receiver_id="u1", read_at=T0),
    ])

    resp = client.get("/api/v1/chat/conversations", headers=_auth("u1"))

    assert resp.status_code == 200
    [conversation] = resp.json()
    assert conversation["_id"] == "conv_X"
    assert conversation["participants"] == ["u1", "u2"]
    assert conversation["isActive"] is True
    assert conversation["unreadCount"] == 1


def test_message_history_pagination(client, api_store):
    api_store.conversations.append(make_conversation())
    for i in range(3):
        api_store.messages.append(
            make_message(message_id=f"msg_{i}", content=f"m{i}", created_at=T0.replace(minute=i)),
        )

    resp = client.get(
        "/api/v1/chat/conversations/conv_X/messages",
        params={"page": 1, "limit": 2},
        headers=_auth("u2", "company"),
    )

    assert resp.status_code == 200
    body = resp.json()
    assert body["conversationId"] == "conv_X"
    assert [m["content"] for m in body["messages"]] == ["m1", "m2"]
    assert body["messages"][0]["_id"] == "msg_1"
    assert body["pagination"] == {"currentPage": 1, "limit": 2, "total": 3, "hasMore": True}


def test_message_history_rejects_bad_paging(client, api_store):
    api_store.conversations.append(make_conversation())
    resp = client.get(
        "/api/v1/chat/conversations/conv_X/messages",
        params={"page": 0},
        headers=_auth(),
    )
    assert resp.status_code == 422


def test_message_history_unknown_conversation(client):
    resp = client.get("/api/v1/chat/conversations/conv_missing/messages", headers=_auth())
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Conversation not found"


def test_message_history_of_someone_elses_conversation(client, api_store):
    api_store.conversations.append(make_conversation())
    resp = client.get("/api/v1/chat/conversations/conv_X/messages", headers=_auth("u3"))
    assert resp.status_code == 403


def test_admin_routes_reject_non_admins(client, api_store):
    api_store.conversations.append(make_conversation())

    notify = client.post(
        "/api/v1/chat/admin/notifications",
        json={"userId": "u2", "title": "Hi", "message": "There"},
        headers=_auth("u1", "company"),
    )
    system = client.post(
        "/api/v1/chat/admin/conversations/conv_X/system-messages",
        json={"content": "Interview booked"},
        headers=_auth("u1", "candidate"),
    )

    assert notify.status_code == 403
    assert notify.json()["detail"] == "Admin access required"
    assert system.status_code == 403
    assert api_store.messages == []


def test_admin_notification_to_offline_user(client):
    resp = client.post(
        "/api/v1/chat/admin/notifications",
        json={"userId": "u2", "title": "Application update", "message": "You were shortlisted"},
        headers=_auth("admin1", "admin"),
    )
    assert resp.status_code == 202
    assert resp.json() == {"userId": "u2", "online": False}


def test_admin_posts_system_message(client, api_store):
    api_store.conversations.append(make_conversation())

    resp = client.post(
        "/api/v1/chat/admin/conversations/conv_X/system-messages",
        json={"content": "Interview booked for Monday"},
        headers=_auth("root", "master_admin"),
    )

    assert resp.status_code == 201
    body = resp.json()
    assert body["type"] == "system"
    assert body["senderId"] == "system"
    assert body["receiverId"] == "all"
    assert body["readAt"] is not None
    [stored] = api_store.messages
    assert stored.id == body["_id"]
    assert api_store.conversations[0].last_message == "Interview booked for Monday"


def test_admin_system_message_to_unknown_conversation(client):
    resp = client.post(
        "/api/v1/chat/admin/conversations/conv_missing/system-messages",
        json={"content": "Hello"},
        headers=_auth("root", "admin"),
    )
    assert resp.status_code == 404


def test_admin_system_message_requires_content(client, api_store):
    api_store.conversations.append(make_conversation())
    resp = client.post(
        "/api/v1/chat/admin/conversations/conv_X/system-messages",
        json={"content": "   "},
        headers=_auth("root", "admin"),
    )
    assert resp.status_code == 422
    assert resp.json()["detail"] == "Message content is required"
