"""Domain models for creations and saved prompts."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

CreationKind = Literal["image", "3d-model", "coloring-book", "background-removed"]

CREATION_KINDS: frozenset[str] = frozenset(
    {"image", "3d-model", "coloring-book", "background-removed"}
)

OPTIONAL_CREATION_FIELDS = (
    "image_url",
    "model_url",
    "background_removed_url",
    "source_image_id",
    "aspect_ratio",
    "model",
)


class CreationInput(BaseModel):
    """Fields supplied by the client for a new creation."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        protected_namespaces=(),
    )

    type: str
    prompt: str = ""
    image_url: str | None = None
    model_url: str | None = None
    background_removed_url: str | None = None
    source_image_id: str | None = None
    aspect_ratio: str | None = None
    model: str | None = None
    metadata: dict[str, object] | None = None


@dataclass(frozen=True)
class Creation:
    """A persisted generated artifact and its provenance."""

    id: str
    user_id: str
    type: str
    prompt: str
    image_url: str | None = None
    model_url: str | None = None
    background_removed_url: str | None = None
    source_image_id: str | None = None
    aspect_ratio: str | None = None
    model: str | None = None
    metadata: dict[str, object] = field(default_factory=dict)
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class SavedPrompt:
    """Reusable prompt text owned by a user."""

    id: str
    user_id: str
    text: str
    metadata: dict[str, object] = field(default_factory=dict)
    created_at: datetime | None = None
    updated_at: datetime | None = None
