"""
Shared fixtures: an in-process fake backend served through httpx.MockTransport.

The fake follows the backend contract: a missing or unknown bearer token is
answered with 401 ``{success: false, message}``; every other response is a
``{success, ...}`` envelope.
"""

import asyncio
from datetime import timedelta
from typing import Any, Callable, Optional

import httpx
import pytest
import pytest_asyncio

from quickchat import AsyncChatApp, MemoryStore, Notice
from quickchat.models.chat import EPOCH


class Hold:
    """Parks one request until the test releases it."""

    def __init__(self) -> None:
        self.arrived = asyncio.Event()
        self.released = asyncio.Event()

    def release(self) -> None:
        self.released.set()


class FakeBackend:
    def __init__(self) -> None:
        self.users: dict[str, dict[str, Any]] = {
            "T1": {"_id": "u1", "name": "Ada", "email": "ada@example.com", "credits": 20},
            "T2": {"_id": "u2", "name": "Grace", "email": "grace@example.com", "credits": 5},
        }
        self.chats: dict[str, list[dict[str, Any]]] = {
            "u1": [
                {"_id": "a", "userId": "u1", "userName": "Ada", "name": "first", "messages": [], "updatedAt": 10},
                {"_id": "b", "userId": "u1", "userName": "Ada", "name": "second", "messages": [], "updatedAt": 30},
                {"_id": "c", "userId": "u1", "userName": "Ada", "name": "third", "messages": [], "updatedAt": 20},
            ],
            "u2": [],
        }
        self.next_updated_at = 999
        self.requests: list[httpx.Request] = []
        self.overrides: dict[str, Callable[[httpx.Request], httpx.Response]] = {}
        self.holds: dict[str, list[Hold]] = {}

    def hold(self, path: str) -> Hold:
        h = Hold()
        self.holds.setdefault(path, []).append(h)
        return h

    def paths(self) -> list[str]:
        return [r.url.path for r in self.requests]

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        # Responses are computed when the request arrives, as a real server would.
        response = self._respond(request)
        pending = self.holds.get(path)
        if pending:
            h = pending.pop(0)
            h.arrived.set()
            await h.released.wait()
        return response

    def _respond(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        if path in self.overrides:
            return self.overrides[path](request)

        user = self._authenticate(request)
        if user is None:
            return httpx.Response(401, json={"success": False, "message": "Not authorized, token failed"})

        if path == "/api/user/data":
            return httpx.Response(200, json={"success": True, "user": user})
        if path == "/api/chat/get":
            return httpx.Response(200, json={"success": True, "chats": list(self.chats.get(user["_id"], []))})
        if path == "/api/chat/create":
            chats = self.chats.setdefault(user["_id"], [])
            chats.append({
                "_id": f"new{len(chats)}",
                "userId": user["_id"],
                "userName": user["name"],
                "name": "New Chat",
                "messages": [],
                "updatedAt": self.next_updated_at,
            })
            self.next_updated_at += 1
            return httpx.Response(200, json={"success": True, "message": "Chat created"})
        return httpx.Response(404, json={"success": False, "message": "Not found"})

    def _authenticate(self, request: httpx.Request) -> Optional[dict[str, Any]]:
        header = request.headers.get("Authorization", "")
        if not header.startswith("Bearer "):
            return None
        return self.users.get(header.split(" ", 1)[1])


class EventRecorder:
    def __init__(self) -> None:
        self.events: list[tuple[str, Any]] = []

    def __call__(self, event: str, data: Any) -> None:
        self.events.append((event, data))

    def count(self, event: str, data: Any = None) -> int:
        return sum(1 for e, d in self.events if e == event and (data is None or d == data))


def json_response(status: int, body: Any) -> Callable[[httpx.Request], httpx.Response]:
    return lambda request: httpx.Response(status, json=body)


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def notices() -> list[Notice]:
    return []


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def recorder() -> EventRecorder:
    return EventRecorder()


@pytest_asyncio.fixture
async def app(backend, notices, store, recorder):
    app = AsyncChatApp(
        base_url="http://chat.test",
        store=store,
        sink=notices.append,
        transport=httpx.MockTransport(backend.handler),
    )
    app.add_listener(recorder)
    yield app
    await app.close()


@pytest_asyncio.fixture
async def logged_in(app):
    await app.login("T1")
    return app


def millis(moment) -> int:
    return (moment - EPOCH) // timedelta(milliseconds=1)
