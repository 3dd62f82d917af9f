"""Supabase Auth implementation of the identity provider."""

from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass

from supabase import Client

from creation_studio.domain.auth import Identity
from creation_studio.errors import AuthErrorKind
from creation_studio.services.auth import IdentityProvider, auth_error

Authorize = Callable[[str], Awaitable[str | None]]


@dataclass
class SupabaseIdentityProvider(IdentityProvider):
    """Google OAuth through Supabase Auth using the PKCE flow."""

    client: Client
    authorize: Authorize
    redirect_url: str | None = None
    oauth_provider: str = "google"

    def subscribe(
        self,
        on_change: Callable[[Identity | None], None],
        on_error: Callable[[Exception], None],
    ) -> Callable[[], None]:
        """Forward Supabase auth state changes as identities."""

        def callback(_event: object, session: object | None) -> None:
            try:
                identity = _parse_identity(session)
            except Exception as exc:
                on_error(exc)
                return
            on_change(identity)

        subscription = self.client.auth.on_auth_state_change(callback)
        return subscription.unsubscribe

    async def sign_in(self, scopes: Sequence[str]) -> None:
        """Open the OAuth flow and exchange the returned code for a session."""
        options: dict[str, object] = {"scopes": " ".join(scopes)}
        if self.redirect_url:
            options["redirect_to"] = self.redirect_url
        response = self.client.auth.sign_in_with_oauth(
            {"provider": self.oauth_provider, "options": options}
        )
        code = await self.authorize(response.url)
        if not code:
            raise auth_error(AuthErrorKind.CANCELLED)
        params: dict[str, object] = {"auth_code": code}
        if self.redirect_url:
            params["redirect_to"] = self.redirect_url
        self.client.auth.exchange_code_for_session(params)

    async def sign_out(self) -> None:
        """Sign out of Supabase Auth."""
        self.client.auth.sign_out()


def _parse_identity(session: object | None) -> Identity | None:
    """Build an identity from a Supabase session, if it carries a user."""
    user = getattr(session, "user", None)
    if user is None:
        return None
    metadata = getattr(user, "user_metadata", None) or {}
    return Identity(
        uid=str(user.id),
        email=getattr(user, "email", None),
        display_name=metadata.get("full_name") or metadata.get("name"),
        photo_url=metadata.get("avatar_url") or metadata.get("picture"),
    )
