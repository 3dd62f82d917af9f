"""Tests for the OAuth callback broker."""

import asyncio

from creation_studio.adapters.oauth_callback import OAuthCallbackBroker


def test_authorize_returns_code_from_callback() -> None:
    broker = OAuthCallbackBroker()

    async def scenario() -> tuple[str, str | None, str | None]:
        flow = asyncio.create_task(broker.authorize("https://auth.test/start"))
        url = await broker.wait_for_url()
        assert broker.complete("code-1") is True
        code = await flow
        return url, code, broker.pending_url

    url, code, pending = asyncio.run(scenario())

    assert url == "https://auth.test/start"
    assert code == "code-1"
    assert pending is None


def test_cancel_resolves_flow_without_code() -> None:
    broker = OAuthCallbackBroker()

    async def scenario() -> str | None:
        flow = asyncio.create_task(broker.authorize("https://auth.test/start"))
        await broker.wait_for_url()
        broker.cancel()
        return await flow

    assert asyncio.run(scenario()) is None


def test_callback_without_pending_flow_is_ignored() -> None:
    broker = OAuthCallbackBroker()

    assert broker.complete("stray") is False
    assert broker.cancel() is False


def test_new_flow_supersedes_pending_one() -> None:
    broker = OAuthCallbackBroker()

    async def scenario() -> tuple[str | None, str | None, str | None]:
        first = asyncio.create_task(broker.authorize("https://auth.test/one"))
        await broker.wait_for_url()
        second = asyncio.create_task(broker.authorize("https://auth.test/two"))
        first_code = await first
        pending = broker.pending_url
        broker.complete("code-2")
        return first_code, pending, await second

    assert asyncio.run(scenario()) == (None, "https://auth.test/two", "code-2")
