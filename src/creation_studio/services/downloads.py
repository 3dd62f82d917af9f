"""Proxy download of externally hosted images."""

import logging
from dataclasses import dataclass
from typing import Protocol
from urllib.parse import urlsplit

from creation_studio.errors import (
    UpstreamServiceError,
    UpstreamTimeoutError,
    ValidationError,
)

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "image/png"
ALLOWED_SCHEMES = {"http", "https"}


@dataclass(frozen=True)
class FetchedImage:
    """Raw upstream answer for an image request."""

    status_code: int
    reason: str
    content: bytes
    content_type: str | None


class ImageClient(Protocol):
    """Interface for fetching remote images."""

    async def fetch(self, url: str, timeout: float) -> FetchedImage:
        """Fetch a URL; raise TimeoutError when it takes too long."""


@dataclass
class ImageDownloadService:
    """Validates image URLs and re-serves their bytes."""

    client: ImageClient
    timeout_seconds: float = 30.0

    async def download(self, url: str | None) -> FetchedImage:
        """Fetch an HTTP(S) image and return its bytes and content type."""
        validate_image_url(url)
        logger.info("Fetching image", extra={"url": url})
        try:
            fetched = await self.client.fetch(url, timeout=self.timeout_seconds)
        except TimeoutError as exc:
            raise UpstreamTimeoutError(
                "Request timeout - image took too long to download"
            ) from exc
        except Exception as exc:
            logger.exception("Error downloading image", extra={"url": url})
            raise UpstreamServiceError(str(exc) or "Failed to download image") from exc
        if not 200 <= fetched.status_code < 300:
            logger.error(
                "Failed to fetch image",
                extra={"url": url, "status_code": fetched.status_code},
            )
            raise UpstreamServiceError(
                f"Failed to fetch image: {fetched.status_code} {fetched.reason}"
            )
        logger.info(
            "Fetched image",
            extra={"url": url, "size": len(fetched.content)},
        )
        return FetchedImage(
            status_code=fetched.status_code,
            reason=fetched.reason,
            content=fetched.content,
            content_type=fetched.content_type or DEFAULT_CONTENT_TYPE,
        )


def validate_image_url(url: str | None) -> None:
    """Reject missing, blob, malformed and non-HTTP(S) image URLs."""
    if not url:
        raise ValidationError("Image URL is required")
    if url.startswith("blob:"):
        raise ValidationError(
            "Blob URLs cannot be processed server-side. "
            "Please download directly from the client."
        )
    try:
        parts = urlsplit(url)
    except ValueError as exc:
        raise ValidationError("Invalid URL format") from exc
    if not parts.scheme:
        raise ValidationError("Invalid URL format")
    if parts.scheme not in ALLOWED_SCHEMES:
        raise ValidationError(
            "Invalid URL protocol. Only HTTP and HTTPS URLs are supported."
        )
    if not parts.netloc:
        raise ValidationError("Invalid URL format")
