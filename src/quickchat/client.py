"""
AsyncChatApp / ChatApp: application state objects.

One instance per process: it builds the transport, store, notifier, event
bus and the two coordinators, and wires identity changes into the chat list.
"""

import asyncio
import logging
from pathlib import Path
from typing import Any, Optional

import httpx

from quickchat.chats import ChatListCoordinator
from quickchat.events import EventBus, Listener
from quickchat.models.chat import ChatSummary
from quickchat.models.user import User
from quickchat.notify import NotificationSink, Notifier
from quickchat.session import SessionManager
from quickchat.storage import JsonFileStore, KeyValueStore
from quickchat.theme import ThemePreference
from quickchat.transport.http import DEFAULT_BASE_URL, DEFAULT_TIMEOUT_S, HttpClient

STATE_FILE = Path.home() / ".quickchat" / "config.json"

logger = logging.getLogger(__name__)


class AsyncChatApp:
    """Async application state (primary)."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        store: Optional[KeyValueStore] = None,
        sink: Optional[NotificationSink] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = DEFAULT_TIMEOUT_S,
    ):
        self.store: KeyValueStore = store if store is not None else JsonFileStore(STATE_FILE)
        self.events = EventBus()
        self.notifier = Notifier(sink)
        self.http = HttpClient(base_url=base_url, timeout=timeout, transport=transport)
        self.session = SessionManager(self.http, self.store, self.notifier, self.events)
        self.chats = ChatListCoordinator(self.session, self.notifier, self.events)
        self.theme = ThemePreference(self.store, self.events)
        self.events.add_listener(self.chats.on_session_event)

    async def __aenter__(self) -> "AsyncChatApp":
        await self.start()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    @property
    def identity(self) -> Optional[User]:
        return self.session.identity

    def add_listener(self, listener: Listener):
        """Subscribe to state events. Returns a cleanup function."""
        return self.events.add_listener(listener)

    async def start(self) -> Optional[User]:
        """Resolve the identity for a token restored from the store."""
        if self.session.token is None:
            logger.debug("No stored token, starting anonymous")
            return None
        return await self.session.fetch_identity()

    async def login(self, token: str) -> Optional[User]:
        return await self.session.set_token(token)

    async def logout(self) -> None:
        await self.session.logout()

    async def load_chats(self) -> Optional[list[ChatSummary]]:
        return await self.chats.load_chats()

    async def create_chat(self) -> Optional[ChatSummary]:
        return await self.chats.create_chat()

    async def select_chat(self, chat_id: str) -> bool:
        return await self.chats.select_chat(chat_id)

    async def close(self) -> None:
        await self.http.close()


class ChatApp:
    """Sync wrapper around AsyncChatApp. Runs the event loop internally."""

    def __init__(self, **kwargs: Any):
        self._async = AsyncChatApp(**kwargs)
        self._loop = asyncio.new_event_loop()

    def _run(self, coro: Any) -> Any:
        return self._loop.run_until_complete(coro)

    @property
    def session(self) -> SessionManager:
        return self._async.session

    @property
    def chats(self) -> ChatListCoordinator:
        return self._async.chats

    @property
    def theme(self) -> ThemePreference:
        return self._async.theme

    @property
    def identity(self) -> Optional[User]:
        return self._async.identity

    def add_listener(self, listener: Listener):
        return self._async.add_listener(listener)

    def start(self) -> Optional[User]:
        return self._run(self._async.start())

    def login(self, token: str) -> Optional[User]:
        return self._run(self._async.login(token))

    def logout(self) -> None:
        self._run(self._async.logout())

    def load_chats(self) -> Optional[list[ChatSummary]]:
        return self._run(self._async.load_chats())

    def create_chat(self) -> Optional[ChatSummary]:
        return self._run(self._async.create_chat())

    def select_chat(self, chat_id: str) -> bool:
        return self._run(self._async.select_chat(chat_id))

    def set_theme(self, theme: str) -> None:
        self._run(self._async.theme.set(theme))

    def close(self) -> None:
        self._run(self._async.close())
        self._loop.close()
