"""Endpoints that proxy hosted generation and media services."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Query, Request
from fastapi.responses import JSONResponse, Response

from creation_studio.api.models import (
    ColoringBookBody,
    Generate3DBody,
    GenerateImageBody,
    GeneratePromptBody,
)
from creation_studio.services.coloring_book import ColoringBookRequest

if TYPE_CHECKING:
    from creation_studio.containers import AppContainer

router = APIRouter(tags=["media"])

DEFAULT_FILENAME = "download.png"

TRANSCRIPTION_DISABLED_TEXT = (
    "Audio transcription is currently disabled. Please configure OPENAI_API_KEY "
    "in environment variables to enable this feature."
)


def attachment_filename(filename: str) -> str:
    """Keep the printable ASCII of a filename, minus quotes and backslashes."""
    cleaned = "".join(
        char for char in filename if " " <= char <= "~" and char not in '"\\'
    ).strip()
    return cleaned or DEFAULT_FILENAME


@router.get("/download-image")
async def download_image(
    request: Request,
    url: str | None = None,
    filename: str = Query(default=DEFAULT_FILENAME),
) -> Response:
    """Fetch an external image and return it as an attachment."""
    container: AppContainer = request.app.state.container
    image = await container.image_download_service.download(url)
    return Response(
        content=image.content,
        media_type=image.content_type,
        headers={
            "Content-Disposition": (
                f'attachment; filename="{attachment_filename(filename)}"'
            )
        },
    )


@router.post("/replicate/coloring-book")
async def coloring_book(body: ColoringBookBody, request: Request) -> dict[str, object]:
    """Convert an image into a coloring-book page."""
    container: AppContainer = request.app.state.container
    result = await container.coloring_book_service.convert(
        ColoringBookRequest(
            image_url=body.image_url or "",
            prompt=body.prompt,
            prompt_strength=body.prompt_strength,
            guidance_scale=body.guidance_scale,
            num_inference_steps=body.num_inference_steps,
            negative_prompt=body.negative_prompt,
            seed=body.seed,
            scheduler=body.scheduler,
        )
    )
    return {"imageUrl": result.image_url, "originalImageUrl": result.original_image_url}


@router.post("/openai/transcribe")
async def transcribe() -> JSONResponse:
    """Audio transcription is switched off."""
    return JSONResponse(
        {
            "text": TRANSCRIPTION_DISABLED_TEXT,
            "error": "API_KEY_MISSING",
            "disabled": True,
        },
        status_code=503,
    )


@router.post("/anthropic/generate-prompt")
async def generate_prompt(
    body: GeneratePromptBody, request: Request
) -> dict[str, object]:
    """Expand a prompt template with the language model."""
    container: AppContainer = request.app.state.container
    result = await container.prompt_generation_service.generate(
        body.template, body.variables
    )
    return {
        "generatedPrompt": result.generated_prompt,
        "originalTemplate": result.original_template,
        "processedTemplate": result.processed_template,
        "variables": result.variables,
    }


@router.post("/replicate/generate-image")
async def generate_image(
    body: GenerateImageBody, request: Request
) -> dict[str, object]:
    """Generate an image from a text prompt."""
    container: AppContainer = request.app.state.container
    image_url = await container.generation_service.generate_image(
        body.prompt, body.aspect_ratio
    )
    return {"output": image_url}


@router.post("/generate-3d")
async def generate_3d(body: Generate3DBody, request: Request) -> dict[str, object]:
    """Generate a 3D model from an image."""
    container: AppContainer = request.app.state.container
    model_url = await container.generation_service.generate_3d(body.image_url)
    return {"modelUrl": model_url}
