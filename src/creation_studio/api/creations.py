"""Creation library endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Query, Request

from creation_studio.api.models import (
    CreationOut,
    PromptOut,
    SaveCreationsRequest,
    SaveImageRequest,
    SavePromptRequest,
)
from creation_studio.errors import ValidationError

if TYPE_CHECKING:
    from creation_studio.containers import AppContainer

router = APIRouter(tags=["creations"])


@router.get("/creations")
async def list_creations(
    request: Request,
    user_id: str | None = Query(default=None, alias="userId"),
    kind: str | None = Query(default=None, alias="type"),
) -> dict[str, object]:
    """Return a user's creations, optionally of one type."""
    container: AppContainer = request.app.state.container
    creations = container.creation_repository.list_creations(user_id or "", kind)
    return {"items": [CreationOut.from_domain(item).to_wire() for item in creations]}


@router.post("/creations")
async def save_creations(
    body: SaveCreationsRequest, request: Request
) -> dict[str, object]:
    """Save a batch of creations for a user."""
    container: AppContainer = request.app.state.container
    if not body.user_id:
        raise ValidationError("Missing userId")
    ids = container.creation_repository.save_creations(body.user_id, body.items or [])
    return {"success": True, "created": [{"id": creation_id} for creation_id in ids]}


@router.delete("/creations/{creation_id}")
async def delete_creation(creation_id: str, request: Request) -> dict[str, object]:
    """Delete a creation by id."""
    container: AppContainer = request.app.state.container
    container.creation_repository.delete_creation_by_id(creation_id)
    return {"success": True}


@router.get("/prompts")
async def list_prompts(
    request: Request, user_id: str | None = Query(default=None, alias="userId")
) -> dict[str, object]:
    """Return a user's saved prompts."""
    container: AppContainer = request.app.state.container
    prompts = container.creation_repository.list_user_prompts(user_id or "")
    return {"items": [PromptOut.from_domain(item).to_wire() for item in prompts]}


@router.post("/prompts")
async def save_prompt(body: SavePromptRequest, request: Request) -> dict[str, object]:
    """Save a reusable prompt."""
    container: AppContainer = request.app.state.container
    prompt_id = container.creation_repository.save_prompt(
        body.user_id or "", body.text, body.metadata
    )
    return {"success": True, "id": prompt_id}


@router.delete("/prompts/{prompt_id}")
async def delete_prompt(prompt_id: str, request: Request) -> dict[str, object]:
    """Delete a saved prompt by id."""
    container: AppContainer = request.app.state.container
    container.creation_repository.delete_prompt_by_id(prompt_id)
    return {"success": True}


@router.post("/save-image")
async def save_image(body: SaveImageRequest, request: Request) -> dict[str, object]:
    """Save an image to the legacy image library."""
    container: AppContainer = request.app.state.container
    image_id = container.creation_repository.save_image(
        image_url=body.image_url or "",
        prompt=body.prompt or "",
        user_id=body.user_id,
        model_url=body.model_url,
    )
    return {"success": True, "id": image_id, "message": "Image saved successfully"}
