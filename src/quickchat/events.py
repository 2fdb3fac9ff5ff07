"""
State change events.

Every mutation of session, chat or preference state is published on an
EventBus. Listeners are plain callables ``(event, data)``; a listener may
return an awaitable, which is awaited before the next listener runs.
"""

import inspect
import logging
from typing import Any, Awaitable, Callable, Optional, Union

logger = logging.getLogger(__name__)

Listener = Callable[[str, Any], Optional[Awaitable[None]]]

LOGIN_ROUTE = "/login"
HOME_ROUTE = "/"


class StateEvent:
    TOKEN_CHANGED = "session:token"
    IDENTITY_CHANGED = "session:identity"
    LOADING_CHANGED = "session:loading"
    SESSION_EXPIRED = "session:expired"
    CHATS_CHANGED = "chats:changed"
    SELECTION_CHANGED = "chats:selected"
    THEME_CHANGED = "ui:theme"
    NAVIGATE = "ui:navigate"


class EventBus:
    def __init__(self) -> None:
        self._listeners: list[Listener] = []

    def add_listener(self, listener: Listener) -> Callable[[], None]:
        """Add a listener. Returns a cleanup function."""
        self._listeners.append(listener)

        def remove() -> None:
            try:
                self._listeners.remove(listener)
            except ValueError:
                pass
        return remove

    async def publish(self, event: str, data: Any = None) -> None:
        logger.debug("publish %s", event)
        for listener in list(self._listeners):
            result: Union[None, Awaitable[None]] = listener(event, data)
            if inspect.isawaitable(result):
                await result
