"""
quickchat: chat backend client SDK for Python.

Session and chat-list state for a bearer-token chat backend: token, identity,
ordered chats and the selected chat kept consistent across racing requests.
"""

from quickchat.client import ChatApp, AsyncChatApp
from quickchat.session import SessionManager, SessionState
from quickchat.chats import ChatListCoordinator
from quickchat.errors import QuickChatError, UnauthorizedError, ApplicationError, TransportError, GuardViolation
from quickchat.events import StateEvent, EventBus
from quickchat.models.chat import ChatSummary
from quickchat.models.user import User
from quickchat.notify import Notice, NoticeKind
from quickchat.storage import MemoryStore, JsonFileStore

__version__ = "0.1.0"
__all__ = [
    "ChatApp",
    "AsyncChatApp",
    "SessionManager",
    "SessionState",
    "ChatListCoordinator",
    "QuickChatError",
    "UnauthorizedError",
    "ApplicationError",
    "TransportError",
    "GuardViolation",
    "StateEvent",
    "EventBus",
    "ChatSummary",
    "User",
    "Notice",
    "NoticeKind",
    "MemoryStore",
    "JsonFileStore",
]
