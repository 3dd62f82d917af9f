"""Tests for container wiring."""

import asyncio

from creation_studio.containers import build_container


def test_build_container_creates_services(settings) -> None:
    container = build_container(settings)

    assert callable(container.auth_session_factory)
    assert container.generation_service.client is not None
    assert container.coloring_book_service.client is not None
    assert container.prompt_generation_service.client is not None
    asyncio.run(container.close_resources())


def test_build_container_disables_unconfigured_services(settings) -> None:
    settings = settings.model_copy(
        update={"replicate_api_token": "  ", "anthropic_api_key": None}
    )

    container = build_container(settings)

    assert container.coloring_book_service.client is None
    assert container.prompt_generation_service.client is None
    assert container.generation_service.client is None
    assert container.image_download_service.timeout_seconds == 30.0
    asyncio.run(container.close_resources())
