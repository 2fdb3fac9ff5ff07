"""
Session manager: owns the bearer token and the identity derived from it.

Every token change and every teardown advances ``epoch``. Network results
are applied only if the epoch they were issued under is still current, so a
response that belongs to a replaced or expired session is dropped.

States:
  anonymous       token absent
  authenticating  token present, identity not fetched (yet)
  authenticated   token present, identity present
"""

import logging
from enum import Enum
from typing import Any, Optional

from quickchat.errors import QuickChatError, UnauthorizedError
from quickchat.events import LOGIN_ROUTE, EventBus, StateEvent
from quickchat.models.responses import UserDataResponse, parse_response
from quickchat.models.user import User
from quickchat.notify import Notifier
from quickchat.storage import TOKEN_KEY, KeyValueStore
from quickchat.transport.http import HttpClient

logger = logging.getLogger(__name__)

USER_DATA_PATH = "/api/user/data"
SESSION_EXPIRED_MESSAGE = "Session expired. Please log in again."
FETCH_USER_FAILED_MESSAGE = "Failed to fetch user data"


class SessionState(str, Enum):
    ANONYMOUS = "anonymous"
    AUTHENTICATING = "authenticating"
    AUTHENTICATED = "authenticated"


class SessionManager:
    def __init__(self, http: HttpClient, store: KeyValueStore, notifier: Notifier, events: EventBus):
        self._http = http
        self._store = store
        self._notifier = notifier
        self._events = events
        self._token: Optional[str] = store.get(TOKEN_KEY) or None
        self._identity: Optional[User] = None
        self._loading = self._token is not None
        self._epoch = 0

    @property
    def token(self) -> Optional[str]:
        return self._token

    @property
    def identity(self) -> Optional[User]:
        return self._identity

    @property
    def loading(self) -> bool:
        """True while the identity for the current token has not been resolved."""
        return self._loading

    @property
    def epoch(self) -> int:
        return self._epoch

    @property
    def state(self) -> SessionState:
        if self._token is None:
            return SessionState.ANONYMOUS
        if self._identity is None:
            return SessionState.AUTHENTICATING
        return SessionState.AUTHENTICATED

    def is_current(self, epoch: int) -> bool:
        return epoch == self._epoch

    async def set_token(self, token: Optional[str]) -> Optional[User]:
        """Replace the token and resolve the identity that goes with it.

        The store is written before memory changes. Identity from the previous
        token never survives, even if the new token is the same string.
        """
        token = token or None
        if token is None:
            self._store.delete(TOKEN_KEY)
        else:
            self._store.set(TOKEN_KEY, token)

        self._epoch += 1
        epoch = self._epoch
        had_identity = self._identity is not None
        self._token = token
        self._identity = None
        self._loading = token is not None
        logger.debug("Token %s (epoch %d)", "set" if token else "cleared", epoch)

        if had_identity:
            await self._events.publish(StateEvent.IDENTITY_CHANGED, None)
        await self._events.publish(StateEvent.TOKEN_CHANGED, token)
        await self._events.publish(StateEvent.LOADING_CHANGED, self._loading)

        if token is None or not self.is_current(epoch):
            return None
        return await self.fetch_identity()

    async def logout(self) -> None:
        await self.set_token(None)

    async def fetch_identity(self) -> Optional[User]:
        if self._token is None:
            return None
        epoch = self._epoch
        if not self._loading:
            self._loading = True
            await self._events.publish(StateEvent.LOADING_CHANGED, True)

        try:
            payload = await self.request("GET", USER_DATA_PATH)
            user = parse_response(UserDataResponse, payload).user
        except UnauthorizedError:
            return None
        except QuickChatError as e:
            if self.is_current(epoch):
                self._notifier.error(e.user_message(FETCH_USER_FAILED_MESSAGE))
                await self._finish_loading()
            else:
                logger.debug("Dropping identity failure from stale epoch %d", epoch)
            return None

        if not self.is_current(epoch):
            logger.debug("Dropping identity from stale epoch %d", epoch)
            return None

        self._identity = user
        self._loading = False
        await self._events.publish(StateEvent.IDENTITY_CHANGED, user)
        if not self.is_current(epoch):
            return None
        await self._events.publish(StateEvent.LOADING_CHANGED, False)
        return user

    async def invalidate(self) -> None:
        """Tear the session down. No-op when already anonymous."""
        await self._expire(self._epoch)

    async def request(self, method: str, path: str) -> dict[str, Any]:
        """Send an authenticated request under the current epoch.

        A 401 expires the epoch the request was sent under before the
        UnauthorizedError reaches the caller.
        """
        epoch, token = self._epoch, self._token
        try:
            return await self._http.request(method, path, token=token)
        except UnauthorizedError:
            logger.info("%s %s rejected as unauthorized (epoch %d)", method, path, epoch)
            await self._expire(epoch)
            raise

    async def _expire(self, epoch: int) -> None:
        if not self.is_current(epoch):
            return
        if self._token is None and self._identity is None:
            return

        self._notifier.error(SESSION_EXPIRED_MESSAGE)
        self._store.delete(TOKEN_KEY)
        self._epoch += 1
        had_identity = self._identity is not None
        self._token = None
        self._identity = None
        self._loading = False
        logger.info("Session expired (epoch %d -> %d)", epoch, self._epoch)

        await self._events.publish(StateEvent.SESSION_EXPIRED, epoch)
        if had_identity:
            await self._events.publish(StateEvent.IDENTITY_CHANGED, None)
        await self._events.publish(StateEvent.TOKEN_CHANGED, None)
        await self._events.publish(StateEvent.LOADING_CHANGED, False)
        await self._events.publish(StateEvent.NAVIGATE, LOGIN_ROUTE)

    async def _finish_loading(self) -> None:
        if self._loading:
            self._loading = False
            await self._events.publish(StateEvent.LOADING_CHANGED, False)
