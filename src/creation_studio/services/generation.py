"""Image and 3D model generation through hosted models."""

import logging
from dataclasses import dataclass

from creation_studio.errors import (
    ModelUnavailableError,
    ServiceDisabledError,
    UpstreamServiceError,
    UpstreamTimeoutError,
    ValidationError,
)
from creation_studio.services.coloring_book import InferenceClient
from creation_studio.services.downloads import validate_image_url

logger = logging.getLogger(__name__)

IMAGE_MODEL = "google/imagen-4-fast"
ASPECT_RATIOS = ("1:1", "4:3", "3:4", "16:9", "9:16")

MODEL_3D = (
    "ndreca/hunyuan3d-2:"
    "4ac0c7d1ef7e7dd58bf92364262597272dea79bfdb158b26027f54eb667f28b8"
)
MODEL_3D_NAME = "Hunyuan3D-2"

MODEL_UNAVAILABLE_MESSAGE = (
    "The 3D model is not available. This could be due to API access "
    "restrictions or the model has been removed from Replicate."
)
RESOURCE_NOT_FOUND_MESSAGE = (
    "The image or resource could not be processed. "
    "Please try a different image or prompt."
)
MODEL_3D_TIMEOUT_MESSAGE = (
    "The 3D generation process timed out. The Hunyuan3D-2 model requires "
    "2-3 minutes for complex models. Try again with a simpler image."
)


@dataclass
class GenerationService:
    """Runs the text-to-image and image-to-3D models."""

    client: InferenceClient | None

    async def generate_image(
        self, prompt: str | None, aspect_ratio: str = "1:1"
    ) -> str:
        """Generate an image from a prompt and return its URL."""
        client = self._require_client()
        if not prompt or not prompt.strip():
            raise ValidationError("Prompt is required")
        if aspect_ratio not in ASPECT_RATIOS:
            raise ValidationError(
                f"Unsupported aspect ratio: {aspect_ratio}. "
                f"Use one of {', '.join(ASPECT_RATIOS)}."
            )

        logger.info("Generating image", extra={"aspect_ratio": aspect_ratio})
        try:
            outputs = await client.run(
                IMAGE_MODEL, {"prompt": prompt, "aspect_ratio": aspect_ratio}
            )
        except Exception as exc:
            logger.exception("Image generation failed")
            raise UpstreamServiceError(str(exc)) from exc
        if not outputs or not outputs[0]:
            raise UpstreamServiceError("No image generated")
        return outputs[0]

    async def generate_3d(self, image_url: str | None) -> str:
        """Turn an image into a 3D mesh and return the mesh URL."""
        client = self._require_client()
        if not image_url:
            raise ValidationError("Missing image URL parameter")
        validate_image_url(image_url)

        logger.info(
            "Starting 3D model generation",
            extra={"model": MODEL_3D_NAME, "image_url": image_url},
        )
        try:
            outputs = await client.run(MODEL_3D, {"image": image_url})
        except TimeoutError as exc:
            raise UpstreamTimeoutError(MODEL_3D_TIMEOUT_MESSAGE) from exc
        except Exception as exc:
            logger.exception("3D model generation failed")
            raise _classify_3d_failure(exc) from exc
        if not outputs or not outputs[0]:
            raise UpstreamServiceError(
                "Failed with Replicate client: model returned no mesh URL"
            )
        logger.info("3D model generated", extra={"model_url": outputs[0]})
        return outputs[0]

    def _require_client(self) -> InferenceClient:
        if self.client is None:
            raise ServiceDisabledError(
                "The REPLICATE_API_TOKEN environment variable is not set."
            )
        return self.client


def _classify_3d_failure(exc: Exception) -> Exception:
    message = str(exc)
    lowered = message.lower()
    if "invalid version" in lowered or "not permitted" in lowered:
        return ModelUnavailableError(MODEL_UNAVAILABLE_MESSAGE)
    if "not found" in lowered:
        return ValidationError(RESOURCE_NOT_FOUND_MESSAGE)
    if "timeout" in lowered or "timed out" in lowered:
        return UpstreamTimeoutError(MODEL_3D_TIMEOUT_MESSAGE)
    return UpstreamServiceError(f"Failed with Replicate client: {message}")
