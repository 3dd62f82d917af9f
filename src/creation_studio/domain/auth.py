"""Domain models for the authenticated session."""

from dataclasses import dataclass

INITIALIZING = "initializing"
AUTHENTICATED = "authenticated"
UNAUTHENTICATED = "unauthenticated"


@dataclass(frozen=True)
class Identity:
    """A signed-in user as reported by the identity provider."""

    uid: str
    email: str | None = None
    display_name: str | None = None
    photo_url: str | None = None


@dataclass(frozen=True)
class AuthSession:
    """Current view of who is signed in."""

    identity: Identity | None = None
    loading: bool = True
    error: str | None = None

    @property
    def status(self) -> str:
        """Return the session state name."""
        if self.identity is not None:
            return AUTHENTICATED
        if self.loading:
            return INITIALIZING
        return UNAUTHENTICATED


@dataclass(frozen=True)
class IdentityChanged:
    """Provider reported a signed-in identity."""

    identity: Identity


@dataclass(frozen=True)
class NoIdentity:
    """Provider reported that nobody is signed in."""


@dataclass(frozen=True)
class ProviderError:
    """Provider reported a failure on its state channel."""

    message: str


AuthEvent = IdentityChanged | NoIdentity | ProviderError
