"""
Theme preference: ``"light"`` or ``"dark"``, persisted under ``theme``.
"""

import logging

from quickchat.events import EventBus, StateEvent
from quickchat.storage import THEME_KEY, KeyValueStore

logger = logging.getLogger(__name__)

LIGHT = "light"
DARK = "dark"
THEMES = (LIGHT, DARK)
DEFAULT_THEME = LIGHT


class ThemePreference:
    def __init__(self, store: KeyValueStore, events: EventBus):
        self._store = store
        self._events = events
        stored = store.get(THEME_KEY)
        if stored is not None and stored not in THEMES:
            logger.warning("Unknown stored theme %r, using %s", stored, DEFAULT_THEME)
        self._theme = stored if stored in THEMES else DEFAULT_THEME

    @property
    def theme(self) -> str:
        return self._theme

    async def set(self, theme: str) -> None:
        if theme not in THEMES:
            raise ValueError(f"theme must be one of {THEMES}, got {theme!r}")
        self._store.set(THEME_KEY, theme)
        changed = theme != self._theme
        self._theme = theme
        if changed:
            await self._events.publish(StateEvent.THEME_CHANGED, theme)

    async def toggle(self) -> str:
        await self.set(DARK if self._theme == LIGHT else LIGHT)
        return self._theme
