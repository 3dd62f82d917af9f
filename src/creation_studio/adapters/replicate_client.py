"""Replicate client for hosted model runs."""

from collections.abc import Mapping
from dataclasses import dataclass

import replicate

from creation_studio.services.coloring_book import InferenceClient

# Named file outputs, in order of preference, for models returning an object.
FILE_OUTPUT_KEYS = ("mesh", "glb", "output")


@dataclass
class ReplicateInferenceClient(InferenceClient):
    """Inference client backed by the Replicate SDK."""

    client: replicate.Client

    @classmethod
    def create(cls, api_token: str) -> "ReplicateInferenceClient":
        """Create a Replicate client for the given API token."""
        return cls(client=replicate.Client(api_token=api_token))

    async def run(self, model: str, input: dict[str, object]) -> list[str]:
        """Run a model and normalize its output to a list of URLs."""
        output = await self.client.async_run(model, input=input)
        if isinstance(output, Mapping):
            output = next(
                (output[key] for key in FILE_OUTPUT_KEYS if output.get(key)), None
            )
        items = output if isinstance(output, list) else [output]
        return [_to_url(item) for item in items if item is not None]


def _to_url(item: object) -> str:
    url = getattr(item, "url", None)
    if callable(url):
        url = url()
    return str(url if url is not None else item)
