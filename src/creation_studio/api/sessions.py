"""Per-client authentication sessions for the HTTP surface."""

import asyncio
import logging
import secrets
from contextlib import suppress
from dataclasses import dataclass

from creation_studio.adapters.oauth_callback import OAuthCallbackBroker
from creation_studio.containers import AuthSessionFactory
from creation_studio.domain.auth import AuthSession
from creation_studio.services.auth import SessionManager

logger = logging.getLogger(__name__)

SESSION_COOKIE = "creation_studio_session"
DEFAULT_MAX_SESSIONS = 1000

SIGNED_OUT = AuthSession(loading=False)


@dataclass
class ClientSession:
    """One browser's session manager and its pending OAuth flow."""

    manager: SessionManager
    broker: OAuthCallbackBroker
    sign_in_task: asyncio.Task[None] | None = None

    async def close(self) -> None:
        """Cancel a pending sign-in and tear the manager down."""
        task = self.sign_in_task
        if task is not None and not task.done():
            task.cancel()
            with suppress(asyncio.CancelledError):
                await task
        self.manager.close()


class SessionRegistry:
    """Maps session cookie values to client sessions.

    Each client gets its own identity provider connection, so one caller's
    sign-in is never visible to another. The oldest session is dropped once
    ``max_sessions`` is reached.
    """

    def __init__(
        self, factory: AuthSessionFactory, max_sessions: int = DEFAULT_MAX_SESSIONS
    ) -> None:
        self._factory = factory
        self._max_sessions = max_sessions
        self._sessions: dict[str, ClientSession] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def get(self, session_id: str | None) -> ClientSession | None:
        """Return the session for a cookie value, if it is known."""
        if not session_id:
            return None
        return self._sessions.get(session_id)

    async def create(self) -> tuple[str, ClientSession]:
        """Start a new client session and return its id."""
        while len(self._sessions) >= self._max_sessions:
            oldest_id = next(iter(self._sessions))
            logger.info("Evicting oldest auth session")
            await self._sessions.pop(oldest_id).close()
        manager, broker = self._factory()
        manager.start()
        session_id = secrets.token_urlsafe(32)
        session = ClientSession(manager=manager, broker=broker)
        self._sessions[session_id] = session
        return session_id, session

    async def close(self) -> None:
        """Tear down every client session."""
        sessions = list(self._sessions.values())
        self._sessions.clear()
        for session in sessions:
            await session.close()
