"""Hand-off between a pending OAuth flow and its redirect callback."""

import asyncio
import logging

logger = logging.getLogger(__name__)


class OAuthCallbackBroker:
    """Interactive authorize step driven by the HTTP redirect callback.

    ``authorize`` publishes the provider's authorization URL and waits until
    the browser comes back through the callback with a code, or with an error
    that means the user closed the flow. Only one flow is pending at a time.
    """

    def __init__(self) -> None:
        self._url: str | None = None
        self._url_ready = asyncio.Event()
        self._code: asyncio.Future[str | None] | None = None

    @property
    def pending_url(self) -> str | None:
        """Return the authorization URL of the pending flow, if any."""
        return self._url

    async def authorize(self, url: str) -> str | None:
        """Publish the URL and wait for the callback to deliver a code."""
        if self._code is not None and not self._code.done():
            self._code.set_result(None)
        code = asyncio.get_running_loop().create_future()
        self._code = code
        self._url = url
        self._url_ready.set()
        logger.info("Waiting for OAuth callback")
        try:
            return await code
        finally:
            if self._code is code:
                self._url = None
                self._url_ready.clear()

    async def wait_for_url(self) -> str:
        """Wait until a flow publishes its authorization URL."""
        while True:
            await self._url_ready.wait()
            if self._url is not None:
                return self._url

    def complete(self, code: str) -> bool:
        """Deliver the authorization code to the pending flow."""
        return self._resolve(code)

    def cancel(self) -> bool:
        """End the pending flow as cancelled by the user."""
        return self._resolve(None)

    def _resolve(self, value: str | None) -> bool:
        if self._code is None or self._code.done():
            logger.warning("OAuth callback received with no pending sign-in")
            return False
        self._code.set_result(value)
        return True
