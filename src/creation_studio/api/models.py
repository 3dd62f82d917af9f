"""Request and response models for the HTTP API."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from creation_studio.domain.auth import AuthSession, Identity
from creation_studio.domain.creations import Creation, CreationInput, SavedPrompt


class WireModel(BaseModel):
    """Base model using the camelCase wire format."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        protected_namespaces=(),
    )

    def to_wire(self) -> dict[str, object]:
        """Dump with camelCase keys and explicit nulls."""
        return self.model_dump(by_alias=True, mode="json")


class SaveCreationsRequest(WireModel):
    user_id: str | None = None
    items: list[CreationInput] | None = None


class CreationOut(WireModel):
    id: str
    user_id: str
    type: str
    prompt: str
    image_url: str | None
    model_url: str | None
    background_removed_url: str | None
    source_image_id: str | None
    aspect_ratio: str | None
    model: str | None
    metadata: dict[str, object]
    created_at: datetime | None
    updated_at: datetime | None

    @classmethod
    def from_domain(cls, creation: Creation) -> "CreationOut":
        return cls.model_validate(creation)


class SavePromptRequest(WireModel):
    user_id: str | None = None
    text: str
    metadata: dict[str, object] | None = None


class PromptOut(WireModel):
    id: str
    user_id: str
    text: str
    metadata: dict[str, object]
    created_at: datetime | None
    updated_at: datetime | None

    @classmethod
    def from_domain(cls, prompt: SavedPrompt) -> "PromptOut":
        return cls.model_validate(prompt)


class SaveImageRequest(WireModel):
    image_url: str | None = None
    prompt: str | None = None
    model_url: str | None = None
    user_id: str | None = None


class ColoringBookBody(WireModel):
    """Coloring-book options; accepts snake_case or camelCase keys."""

    image_url: str | None = None
    prompt: str | None = None
    prompt_strength: float = 0.8
    guidance_scale: float = 7.5
    num_inference_steps: int = 50
    negative_prompt: str = ""
    seed: int | str | None = None
    scheduler: str = "K_EULER"


class GenerateImageBody(WireModel):
    prompt: str | None = None
    aspect_ratio: str = "1:1"


class Generate3DBody(WireModel):
    image_url: str | None = None
    prompt: str | None = None


class GeneratePromptBody(WireModel):
    template: str | None = None
    variables: dict[str, object] | None = None


class IdentityOut(WireModel):
    uid: str
    email: str | None
    display_name: str | None
    photo_url: str | None


class SessionOut(WireModel):
    status: str
    loading: bool
    error: str | None
    user: IdentityOut | None

    @classmethod
    def from_domain(cls, session: AuthSession) -> "SessionOut":
        identity: Identity | None = session.identity
        return cls(
            status=session.status,
            loading=session.loading,
            error=session.error,
            user=IdentityOut.model_validate(identity) if identity else None,
        )
