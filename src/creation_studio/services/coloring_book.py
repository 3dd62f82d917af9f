"""Coloring-book conversion through a hosted image-to-image model."""

import logging
from dataclasses import dataclass
from typing import Protocol

from creation_studio.errors import (
    ServiceDisabledError,
    UpstreamServiceError,
    ValidationError,
)

logger = logging.getLogger(__name__)

COLORING_BOOK_MODEL = (
    "pnickolas1/sdxl-coloringbook:"
    "d2b110483fdce03119b21786d823f10bb3f5a7c49a7429da784c5017df096d33"
)
COLORING_BOOK_PROMPT = (
    "black and white coloring page, line art, simple outlines, "
    "no shading, coloring book style"
)


class InferenceClient(Protocol):
    """Interface for running hosted models."""

    async def run(self, model: str, input: dict[str, object]) -> list[str]:
        """Run a model and return its output URLs."""


@dataclass(frozen=True)
class ColoringBookRequest:
    """Parameters for a coloring-book conversion."""

    image_url: str
    prompt: str | None = None
    prompt_strength: float = 0.8
    guidance_scale: float = 7.5
    num_inference_steps: int = 50
    negative_prompt: str = ""
    seed: int | str | None = None
    scheduler: str = "K_EULER"


@dataclass(frozen=True)
class ColoringBookResult:
    """Converted image location with its source."""

    image_url: str
    original_image_url: str


@dataclass
class ColoringBookService:
    """Builds the model input and unwraps the first output image."""

    client: InferenceClient | None

    async def convert(self, request: ColoringBookRequest) -> ColoringBookResult:
        """Convert an image into a coloring-book page."""
        if self.client is None:
            raise ServiceDisabledError(
                "The REPLICATE_API_TOKEN environment variable is not set."
            )
        if not request.image_url:
            raise ValidationError("Image URL is required")

        params: dict[str, object] = {
            "prompt": COLORING_BOOK_PROMPT,
            "image": request.image_url,
            "prompt_strength": request.prompt_strength,
            "guidance_scale": request.guidance_scale,
            "num_inference_steps": request.num_inference_steps,
            "scheduler": request.scheduler,
        }
        if request.negative_prompt and request.negative_prompt.strip():
            params["negative_prompt"] = request.negative_prompt
        if request.seed is not None:
            params["seed"] = _parse_seed(request.seed)

        logger.info(
            "Running coloring book model", extra={"image_url": request.image_url}
        )
        try:
            outputs = await self.client.run(COLORING_BOOK_MODEL, params)
        except Exception as exc:
            logger.exception("Coloring book model failed")
            raise UpstreamServiceError(str(exc)) from exc
        if not outputs or not outputs[0]:
            raise UpstreamServiceError("No coloring book image generated")
        return ColoringBookResult(
            image_url=outputs[0], original_image_url=request.image_url
        )


def _parse_seed(raw: int | str) -> int:
    try:
        return int(raw)
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"Invalid seed: {raw}") from exc
