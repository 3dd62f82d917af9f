"""Anthropic Messages API client."""

from dataclasses import dataclass

import httpx

from creation_studio.services.prompt_generation import CompletionClient

ANTHROPIC_VERSION = "2023-06-01"


@dataclass
class HttpxAnthropicClient(CompletionClient):
    """HTTPX-backed Anthropic client."""

    api_key: str
    base_url: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, api_key: str, base_url: str) -> "HttpxAnthropicClient":
        """Create an Anthropic client with a managed httpx session."""
        return cls(api_key=api_key, base_url=base_url, http_client=httpx.AsyncClient())

    async def complete(
        self,
        *,
        model: str,
        system: str,
        prompt: str,
        max_tokens: int,
        temperature: float,
    ) -> str:
        """Send a single-turn message and return the concatenated text."""
        response = await self.http_client.post(
            f"{self.base_url}/v1/messages",
            headers={
                "x-api-key": self.api_key,
                "anthropic-version": ANTHROPIC_VERSION,
            },
            json={
                "model": model,
                "system": system,
                "max_tokens": max_tokens,
                "temperature": temperature,
                "messages": [{"role": "user", "content": prompt}],
            },
            timeout=120,
        )
        response.raise_for_status()
        payload = response.json()
        blocks = payload.get("content") or []
        return "".join(
            block.get("text", "") for block in blocks if block.get("type") == "text"
        )

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
