"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import ClientOptions, create_client

from creation_studio.adapters.anthropic_client import HttpxAnthropicClient
from creation_studio.adapters.image_client import HttpxImageClient
from creation_studio.adapters.oauth_callback import OAuthCallbackBroker
from creation_studio.adapters.replicate_client import ReplicateInferenceClient
from creation_studio.adapters.supabase_document_store import SupabaseDocumentStore
from creation_studio.adapters.supabase_identity_provider import (
    SupabaseIdentityProvider,
)
from creation_studio.config import Settings, is_configured
from creation_studio.services.auth import SessionManager
from creation_studio.services.coloring_book import ColoringBookService
from creation_studio.services.creations import CreationRepository
from creation_studio.services.downloads import ImageDownloadService
from creation_studio.services.generation import GenerationService
from creation_studio.services.prompt_generation import PromptGenerationService

AuthSessionFactory = Callable[[], tuple[SessionManager, OAuthCallbackBroker]]


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    auth_session_factory: AuthSessionFactory
    creation_repository: CreationRepository
    generation_service: GenerationService
    coloring_book_service: ColoringBookService
    prompt_generation_service: PromptGenerationService
    image_download_service: ImageDownloadService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_key
    )
    creation_repository = CreationRepository(SupabaseDocumentStore(supabase_client))

    def auth_session_factory() -> tuple[SessionManager, OAuthCallbackBroker]:
        # Each client session holds its own GoTrue session storage.
        auth_client = create_client(
            resolved_settings.supabase_url,
            resolved_settings.supabase_key,
            options=ClientOptions(flow_type="pkce"),
        )
        oauth_broker = OAuthCallbackBroker()
        identity_provider = SupabaseIdentityProvider(
            client=auth_client,
            authorize=oauth_broker.authorize,
            redirect_url=resolved_settings.auth_redirect_url,
        )
        session_manager = SessionManager(
            identity_provider, timeout_seconds=resolved_settings.auth_timeout_seconds
        )
        return session_manager, oauth_broker

    inference_client = (
        ReplicateInferenceClient.create(resolved_settings.replicate_api_token)
        if is_configured(resolved_settings.replicate_api_token)
        else None
    )
    anthropic_client = (
        HttpxAnthropicClient.create(
            api_key=resolved_settings.anthropic_api_key,
            base_url=resolved_settings.anthropic_base_url,
        )
        if is_configured(resolved_settings.anthropic_api_key)
        else None
    )
    image_client = HttpxImageClient.create()

    async def close_resources() -> None:
        await image_client.close()
        if anthropic_client is not None:
            await anthropic_client.close()

    return AppContainer(
        settings=resolved_settings,
        auth_session_factory=auth_session_factory,
        creation_repository=creation_repository,
        generation_service=GenerationService(inference_client),
        coloring_book_service=ColoringBookService(inference_client),
        prompt_generation_service=PromptGenerationService(
            client=anthropic_client, model=resolved_settings.anthropic_model
        ),
        image_download_service=ImageDownloadService(
            client=image_client,
            timeout_seconds=resolved_settings.download_timeout_seconds,
        ),
        close_resources=close_resources,
    )
