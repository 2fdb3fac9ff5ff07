"""
Chat list coordinator: the ordered chat collection and the selected chat.

The list is always replaced wholesale from the server and re-sorted, never
patched in place. Each reload carries a ticket (generation, session epoch);
a reload whose ticket is no longer the newest is dropped on arrival.

Creating a chat leaves a pending "select newest" request. Whichever reload
next applies under a live ticket honours it, so a create whose own reload
was superseded still ends on the newest chat.
"""

import asyncio
import logging
from typing import Any, NamedTuple, Optional

from quickchat.errors import GuardViolation, QuickChatError, UnauthorizedError
from quickchat.events import HOME_ROUTE, EventBus, StateEvent
from quickchat.models.chat import ChatSummary, sort_by_recency
from quickchat.models.responses import ActionResponse, ChatListResponse, parse_response
from quickchat.notify import Notifier
from quickchat.session import SessionManager

logger = logging.getLogger(__name__)

CHATS_PATH = "/api/chat/get"
CREATE_CHAT_PATH = "/api/chat/create"
LOGIN_REQUIRED_MESSAGE = "Login to create a new chat"
FETCH_CHATS_FAILED_MESSAGE = "Failed to fetch chats"
CREATE_CHAT_FAILED_MESSAGE = "Failed to create chat"


class _Ticket(NamedTuple):
    generation: int
    epoch: int


class ChatListCoordinator:
    def __init__(self, session: SessionManager, notifier: Notifier, events: EventBus):
        self._session = session
        self._notifier = notifier
        self._events = events
        self._chats: list[ChatSummary] = []
        self._selected: Optional[ChatSummary] = None
        self._generation = 0
        self._newest_wanted: Optional[asyncio.Future] = None

    @property
    def chats(self) -> list[ChatSummary]:
        return list(self._chats)

    @property
    def selected(self) -> Optional[ChatSummary]:
        return self._selected

    async def on_session_event(self, event: str, data: Any) -> None:
        if event != StateEvent.IDENTITY_CHANGED:
            return
        if data is None:
            await self.clear()
        else:
            await self.load_chats()

    async def load_chats(self) -> Optional[list[ChatSummary]]:
        """Reload and re-sort the list. Returns None when nothing was applied."""
        if self._session.identity is None:
            logger.debug("load_chats skipped: no identity")
            return None

        ticket = self._issue()
        try:
            chats = await self._fetch_sorted()
        except UnauthorizedError:
            return None
        except QuickChatError as e:
            if self._is_live(ticket):
                self._notifier.error(e.user_message(FETCH_CHATS_FAILED_MESSAGE))
                self._settle_newest(None)
            return None

        if not self._is_live(ticket):
            logger.debug("Dropping stale chat list (generation %d)", ticket.generation)
            return None
        await self._apply(chats)
        return self.chats

    async def create_chat(self) -> Optional[ChatSummary]:
        """Create a chat, reload, select the newest and navigate home.

        The new chat is taken from the reloaded list rather than built
        locally so server-assigned fields are present.
        """
        try:
            self._require_identity()
        except GuardViolation as e:
            self._notifier.info(e.message)
            return None

        epoch = self._session.epoch
        try:
            payload = await self._session.request("GET", CREATE_CHAT_PATH)
            parse_response(ActionResponse, payload)
        except UnauthorizedError:
            return None
        except QuickChatError as e:
            if self._session.is_current(epoch):
                self._notifier.error(e.user_message(CREATE_CHAT_FAILED_MESSAGE))
            return None
        if not self._session.is_current(epoch):
            return None

        newest = self._want_newest()
        ticket = self._issue()
        try:
            chats: Optional[list[ChatSummary]] = await self._fetch_sorted()
        except UnauthorizedError:
            return None
        except QuickChatError as e:
            if self._is_live(ticket):
                self._settle_newest(None)
                self._notifier.error(e.user_message(CREATE_CHAT_FAILED_MESSAGE))
                return None
            chats = None

        if chats is not None and self._is_live(ticket):
            await self._apply(chats)
        elif not newest.done():
            logger.debug("Reload after create superseded (generation %d), waiting for newer", ticket.generation)

        chat = await newest
        if chat is None or not self._session.is_current(epoch):
            return None
        await self._events.publish(StateEvent.NAVIGATE, HOME_ROUTE)
        return chat

    async def select_chat(self, chat_id: str) -> bool:
        for chat in self._chats:
            if chat.id == chat_id:
                if chat is not self._selected:
                    self._selected = chat
                    await self._events.publish(StateEvent.SELECTION_CHANGED, chat)
                return True
        logger.debug("select_chat ignored unknown id %s", chat_id)
        return False

    async def clear(self) -> None:
        """Empty the list and drop any reload still in flight."""
        self._generation += 1
        self._settle_newest(None)
        had_state = bool(self._chats) or self._selected is not None
        self._chats = []
        self._selected = None
        if had_state:
            await self._events.publish(StateEvent.CHATS_CHANGED, [])
            await self._events.publish(StateEvent.SELECTION_CHANGED, None)

    def _require_identity(self) -> None:
        if self._session.identity is None:
            raise GuardViolation(LOGIN_REQUIRED_MESSAGE)

    def _issue(self) -> _Ticket:
        self._generation += 1
        return _Ticket(self._generation, self._session.epoch)

    def _is_live(self, ticket: _Ticket) -> bool:
        return ticket.generation == self._generation and self._session.is_current(ticket.epoch)

    async def _fetch_sorted(self) -> list[ChatSummary]:
        payload = await self._session.request("GET", CHATS_PATH)
        return sort_by_recency(parse_response(ChatListResponse, payload).chats)

    def _want_newest(self) -> asyncio.Future:
        if self._newest_wanted is None or self._newest_wanted.done():
            self._newest_wanted = asyncio.get_running_loop().create_future()
        return self._newest_wanted

    def _settle_newest(self, chat: Optional[ChatSummary]) -> None:
        wanted, self._newest_wanted = self._newest_wanted, None
        if wanted is not None and not wanted.done():
            wanted.set_result(chat)

    async def _apply(self, chats: list[ChatSummary]) -> None:
        previous = self._selected
        self._chats = chats
        if self._newest_wanted is not None:
            self._selected = chats[0] if chats else None
        else:
            self._selected = self._repair_selection(previous)

        await self._events.publish(StateEvent.CHATS_CHANGED, self.chats)
        if self._selected is not previous:
            await self._events.publish(StateEvent.SELECTION_CHANGED, self._selected)
        self._settle_newest(self._selected)

    def _repair_selection(self, previous: Optional[ChatSummary]) -> Optional[ChatSummary]:
        # Re-point at the freshly loaded object so the selection never dangles.
        if previous is not None:
            for chat in self._chats:
                if chat.id == previous.id:
                    return chat
        return self._chats[0] if self._chats else None
