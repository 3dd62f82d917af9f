"""Creation and saved-prompt persistence over a document store."""

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

from creation_studio.domain.creations import (
    CREATION_KINDS,
    OPTIONAL_CREATION_FIELDS,
    Creation,
    CreationInput,
    SavedPrompt,
)
from creation_studio.errors import StorageError, ValidationError

logger = logging.getLogger(__name__)

CREATIONS = "creations"
PROMPTS = "prompts"
IMAGES = "images"


class DocumentStore(Protocol):
    """Generic collection-scoped document storage."""

    def insert(self, collection: str, data: dict[str, object]) -> str:
        """Insert a document and return its generated id."""

    def query(
        self, collection: str, filters: Mapping[str, object]
    ) -> list[dict[str, object]]:
        """Return documents whose fields equal every filter value."""

    def delete(self, collection: str, document_id: str) -> None:
        """Delete a document by id."""

    def server_timestamp(self) -> object:
        """Return a marker the store replaces with its own clock."""


@dataclass
class CreationRepository:
    """Typed facade for creations and prompts scoped by owning user."""

    store: DocumentStore

    def list_creations(self, owner_id: str, kind: str | None = None) -> list[Creation]:
        """Return the owner's creations, optionally restricted to one kind."""
        _require_owner(owner_id)
        filters: dict[str, object] = {"user_id": owner_id}
        if kind:
            _require_kind(kind)
            filters["type"] = kind
        try:
            rows = self.store.query(CREATIONS, filters)
        except Exception as exc:
            logger.exception("Failed to list creations", extra={"user_id": owner_id})
            raise StorageError(str(exc)) from exc
        return [_parse_creation(row) for row in rows]

    def save_creations(
        self, owner_id: str, items: Sequence[CreationInput]
    ) -> list[str]:
        """Insert each item in order and return the generated ids.

        Items are written one at a time with no rollback: when a later insert
        fails, the earlier documents stay persisted and their ids are attached
        to the raised StorageError as ``saved_ids``.
        """
        _require_owner(owner_id)
        if not items:
            raise ValidationError("No items to save")
        for item in items:
            _require_kind(item.type)

        ids: list[str] = []
        for item in items:
            payload = self._creation_payload(owner_id, item)
            try:
                ids.append(self.store.insert(CREATIONS, payload))
            except Exception as exc:
                logger.exception(
                    "Failed to save creation",
                    extra={"user_id": owner_id, "saved": len(ids)},
                )
                raise StorageError(str(exc), saved_ids=list(ids)) from exc
        logger.info("Saved creations", extra={"user_id": owner_id, "count": len(ids)})
        return ids

    def save_creation(self, owner_id: str, item: CreationInput) -> str:
        """Insert a single creation and return its id."""
        [creation_id] = self.save_creations(owner_id, [item])
        return creation_id

    def delete_creation_by_id(self, creation_id: str) -> bool:
        """Delete a creation. Ownership is the caller's responsibility."""
        self._delete(CREATIONS, creation_id)
        return True

    def save_prompt(
        self,
        owner_id: str,
        text: str,
        metadata: dict[str, object] | None = None,
    ) -> str:
        """Store a reusable prompt and return its id."""
        _require_owner(owner_id)
        now = self.store.server_timestamp()
        payload: dict[str, object] = {
            "user_id": owner_id,
            "text": text,
            "metadata": metadata or {},
            "created_at": now,
            "updated_at": now,
        }
        try:
            return self.store.insert(PROMPTS, payload)
        except Exception as exc:
            logger.exception("Failed to save prompt", extra={"user_id": owner_id})
            raise StorageError(str(exc)) from exc

    def list_user_prompts(self, owner_id: str) -> list[SavedPrompt]:
        """Return every prompt saved by the owner."""
        _require_owner(owner_id)
        try:
            rows = self.store.query(PROMPTS, {"user_id": owner_id})
        except Exception as exc:
            logger.exception("Failed to list prompts", extra={"user_id": owner_id})
            raise StorageError(str(exc)) from exc
        return [_parse_prompt(row) for row in rows]

    def delete_prompt_by_id(self, prompt_id: str) -> bool:
        """Delete a saved prompt."""
        self._delete(PROMPTS, prompt_id)
        return True

    def save_image(
        self,
        image_url: str,
        prompt: str,
        user_id: str | None = None,
        model_url: str | None = None,
    ) -> str:
        """Store a legacy image-library record and return its id."""
        if not image_url or not prompt:
            raise ValidationError("Missing required fields: imageUrl and prompt")
        payload: dict[str, object] = {
            "image_url": image_url,
            "prompt": prompt,
            "user_id": user_id or "anonymous",
            "created_at": self.store.server_timestamp(),
        }
        if model_url:
            payload["model_url"] = model_url
        try:
            image_id = self.store.insert(IMAGES, payload)
        except Exception as exc:
            logger.exception("Failed to save image", extra={"user_id": user_id})
            raise StorageError(str(exc)) from exc
        logger.info("Image saved", extra={"image_id": image_id})
        return image_id

    def _creation_payload(
        self, owner_id: str, item: CreationInput
    ) -> dict[str, object]:
        now = self.store.server_timestamp()
        payload: dict[str, object] = {"type": item.type, "prompt": item.prompt}
        for name in OPTIONAL_CREATION_FIELDS:
            payload[name] = getattr(item, name) or None
        payload["metadata"] = item.metadata or {}
        payload["user_id"] = owner_id
        payload["created_at"] = now
        payload["updated_at"] = now
        return payload

    def _delete(self, collection: str, document_id: str) -> None:
        if not document_id:
            raise ValidationError("Missing id")
        try:
            self.store.delete(collection, document_id)
        except Exception as exc:
            logger.exception(
                "Failed to delete document",
                extra={"collection": collection, "document_id": document_id},
            )
            raise StorageError(str(exc)) from exc


def _require_owner(owner_id: str | None) -> None:
    if not owner_id:
        raise ValidationError("Missing userId")


def _require_kind(kind: str) -> None:
    if kind not in CREATION_KINDS:
        raise ValidationError(f"Unknown creation type: {kind}")


def _parse_timestamp(raw: object) -> datetime | None:
    if isinstance(raw, datetime):
        return raw
    if isinstance(raw, str) and raw:
        return datetime.fromisoformat(raw)
    return None


def _parse_creation(row: dict[str, object]) -> Creation:
    """Parse a creation document into a domain model."""
    return Creation(
        id=str(row["id"]),
        user_id=str(row["user_id"]),
        type=str(row.get("type", "")),
        prompt=str(row.get("prompt") or ""),
        image_url=row.get("image_url"),
        model_url=row.get("model_url"),
        background_removed_url=row.get("background_removed_url"),
        source_image_id=row.get("source_image_id"),
        aspect_ratio=row.get("aspect_ratio"),
        model=row.get("model"),
        metadata=dict(row.get("metadata") or {}),
        created_at=_parse_timestamp(row.get("created_at")),
        updated_at=_parse_timestamp(row.get("updated_at")),
    )


def _parse_prompt(row: dict[str, object]) -> SavedPrompt:
    """Parse a prompt document into a domain model."""
    return SavedPrompt(
        id=str(row["id"]),
        user_id=str(row["user_id"]),
        text=str(row.get("text") or ""),
        metadata=dict(row.get("metadata") or {}),
        created_at=_parse_timestamp(row.get("created_at")),
        updated_at=_parse_timestamp(row.get("updated_at")),
    )
