"""HTTP client for fetching remote images."""

from dataclasses import dataclass

import httpx

from creation_studio.services.downloads import FetchedImage, ImageClient

USER_AGENT = "Mozilla/5.0 (compatible; ImageDownloader/1.0)"


@dataclass
class HttpxImageClient(ImageClient):
    """Image client using httpx."""

    http_client: httpx.AsyncClient

    @classmethod
    def create(cls) -> "HttpxImageClient":
        """Create an image client with a managed httpx session."""
        return cls(http_client=httpx.AsyncClient(follow_redirects=True))

    async def fetch(self, url: str, timeout: float) -> FetchedImage:
        """Fetch the URL, translating httpx timeouts to TimeoutError."""
        try:
            response = await self.http_client.get(
                url, headers={"User-Agent": USER_AGENT}, timeout=timeout
            )
        except httpx.TimeoutException as exc:
            raise TimeoutError(str(exc)) from exc
        return FetchedImage(
            status_code=response.status_code,
            reason=response.reason_phrase,
            content=response.content,
            content_type=response.headers.get("content-type"),
        )

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
