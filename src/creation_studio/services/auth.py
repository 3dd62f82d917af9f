"""Authentication session manager.

The manager keeps a single authoritative view of who is signed in. The
identity provider's state listener is the only writer of identity: sign-in and
sign-out ask the provider to act and then wait for the listener to report the
resulting identity, so there is exactly one path that sets it. The explicit
operations only touch the loading flag and the last error.

A fallback timer clears the loading flag when the provider never reports an
initial state.
"""

import asyncio
import logging
from collections.abc import Callable, Sequence
from dataclasses import replace
from typing import Protocol

import httpx

from creation_studio.domain.auth import (
    AuthEvent,
    AuthSession,
    Identity,
    IdentityChanged,
    NoIdentity,
    ProviderError,
)
from creation_studio.errors import AuthError, AuthErrorKind

logger = logging.getLogger(__name__)

SIGN_IN_SCOPES: tuple[str, ...] = ("email", "profile")
DEFAULT_TIMEOUT_SECONDS = 5.0

SessionListener = Callable[[AuthSession], None]


class IdentityProvider(Protocol):
    """Interface for an external identity provider."""

    def subscribe(
        self,
        on_change: Callable[[Identity | None], None],
        on_error: Callable[[Exception], None],
    ) -> Callable[[], None]:
        """Register state callbacks and return an unsubscribe callable."""

    async def sign_in(self, scopes: Sequence[str]) -> None:
        """Run the interactive sign-in flow."""

    async def sign_out(self) -> None:
        """End the provider session."""


_CODE_KINDS: dict[str, AuthErrorKind] = {
    "auth/popup-closed-by-user": AuthErrorKind.CANCELLED,
    "auth/cancelled-popup-request": AuthErrorKind.CANCELLED,
    "auth/user-cancelled": AuthErrorKind.CANCELLED,
    "access_denied": AuthErrorKind.CANCELLED,
    "auth/popup-blocked": AuthErrorKind.POPUP_BLOCKED,
    "auth/network-request-failed": AuthErrorKind.NETWORK,
    "auth/unauthorized-domain": AuthErrorKind.UNAUTHORIZED_DOMAIN,
    "unauthorized_client": AuthErrorKind.UNAUTHORIZED_DOMAIN,
}

AUTH_ERROR_MESSAGES: dict[AuthErrorKind, str] = {
    AuthErrorKind.CANCELLED: "Sign-in was cancelled. Please try again.",
    AuthErrorKind.POPUP_BLOCKED: (
        "The sign-in pop-up was blocked. "
        "Please allow pop-ups for this site and try again."
    ),
    AuthErrorKind.NETWORK: (
        "A network error occurred during sign-in. "
        "Please check your connection and try again."
    ),
    AuthErrorKind.UNAUTHORIZED_DOMAIN: (
        "This domain is not authorized for sign-in. Please contact support."
    ),
}


def auth_error(kind: AuthErrorKind, detail: str = "") -> AuthError:
    """Build an AuthError with the user-facing text for its kind."""
    message = AUTH_ERROR_MESSAGES.get(kind, f"Google sign in failed: {detail}")
    return AuthError(kind, message)


def classify_auth_error(exc: Exception) -> AuthError:
    """Map a provider failure onto one of the sign-in error classes."""
    if isinstance(exc, AuthError):
        return auth_error(exc.kind, exc.message)
    code = getattr(exc, "code", None)
    kind = _CODE_KINDS.get(code) if isinstance(code, str) else None
    if kind is None and isinstance(
        exc, httpx.TransportError | ConnectionError | TimeoutError
    ):
        kind = AuthErrorKind.NETWORK
    if kind is None:
        return auth_error(AuthErrorKind.GENERIC, str(exc) or type(exc).__name__)
    return auth_error(kind)


class SessionManager:
    """Bridges identity provider notifications into application state."""

    def __init__(
        self,
        provider: IdentityProvider,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self.provider = provider
        self.timeout_seconds = timeout_seconds
        self._state = AuthSession()
        self._listeners: list[SessionListener] = []
        self._loop: asyncio.AbstractEventLoop | None = None
        self._unsubscribe: Callable[[], None] | None = None
        self._timer: asyncio.TimerHandle | None = None
        self._notified = False

    @property
    def state(self) -> AuthSession:
        """Return the current session snapshot."""
        return self._state

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """Observe state changes; returns a callable that stops observing."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def __aenter__(self) -> "SessionManager":
        self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        self.close()

    def start(self) -> None:
        """Register the provider listener and arm the fallback timer."""
        if self._loop is not None:
            raise RuntimeError("Session manager already started")
        self._loop = asyncio.get_running_loop()
        self._notified = False
        self._update(identity=None, loading=True, error=None)
        logger.info("Setting up identity provider listener")
        try:
            self._unsubscribe = self.provider.subscribe(
                self._on_provider_change, self._on_provider_error
            )
        except Exception as exc:
            logger.exception("Failed to set up auth state listener")
            self._update(
                loading=False,
                error=f"Failed to initialize authentication: {exc}",
            )
            return
        if not self._notified:
            self._timer = self._loop.call_later(self.timeout_seconds, self._on_timeout)

    def close(self) -> None:
        """Tear down the listener and any pending timer."""
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        if self._unsubscribe is not None:
            logger.info("Unsubscribing from identity provider listener")
            self._unsubscribe()
            self._unsubscribe = None
        self._loop = None

    async def sign_in_with_identity_provider(self) -> None:
        """Start the interactive sign-in flow.

        Identity is not set here; the provider listener reports it. Failures
        are classified and recorded as the session error.
        """
        self._update(loading=True, error=None)
        changes: dict[str, object] = {"loading": False}
        try:
            logger.info("Attempting Google sign in")
            await self.provider.sign_in(SIGN_IN_SCOPES)
            logger.info("Google sign in completed")
        except Exception as exc:
            error = classify_auth_error(exc)
            logger.warning(
                "Google sign in failed",
                extra={"kind": error.kind.value, "detail": str(exc)},
            )
            changes["error"] = error.message
        finally:
            self._update(**changes)

    async def sign_out(self) -> None:
        """Ask the provider to end the session."""
        self._update(error=None)
        try:
            logger.info("Attempting to sign out")
            await self.provider.sign_out()
        except Exception as exc:
            logger.exception("Error signing out")
            self._update(error=str(exc) or type(exc).__name__)

    def clear_error(self) -> None:
        """Forget the last recorded error."""
        self._update(error=None)

    def handle_event(self, event: AuthEvent) -> None:
        """Apply a provider notification to the session state."""
        self._notified = True
        if isinstance(event, IdentityChanged):
            logger.info("Auth state changed: user logged in")
            self._update(identity=event.identity, loading=False)
        elif isinstance(event, NoIdentity):
            logger.info("Auth state changed: no user")
            self._update(identity=None, loading=False)
        elif isinstance(event, ProviderError):
            logger.error("Error in auth state listener: %s", event.message)
            self._update(
                loading=False, error=f"Authentication error: {event.message}"
            )

    def _on_provider_change(self, identity: Identity | None) -> None:
        self._dispatch(IdentityChanged(identity) if identity else NoIdentity())

    def _on_provider_error(self, exc: Exception) -> None:
        self._dispatch(ProviderError(str(exc) or type(exc).__name__))

    def _dispatch(self, event: AuthEvent) -> None:
        """Apply an event on the manager's loop, whichever thread sent it."""
        loop = self._loop
        if loop is None:
            self.handle_event(event)
            return
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None
        if running is loop:
            self.handle_event(event)
        else:
            loop.call_soon_threadsafe(self.handle_event, event)

    def _on_timeout(self) -> None:
        self._timer = None
        if self._notified or not self._state.loading:
            return
        logger.warning(
            "No auth state received after %ss, assuming signed out",
            self.timeout_seconds,
        )
        self._update(loading=False)

    def _update(self, **changes: object) -> None:
        updated = replace(self._state, **changes)
        if updated == self._state:
            return
        self._state = updated
        for listener in list(self._listeners):
            try:
                listener(updated)
            except Exception:
                logger.exception("Session listener failed")
