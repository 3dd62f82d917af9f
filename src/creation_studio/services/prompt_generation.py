"""Prompt generation with a hosted language model."""

import logging
from dataclasses import dataclass
from typing import Protocol

from creation_studio.errors import (
    ServiceDisabledError,
    UpstreamServiceError,
    ValidationError,
)

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are an expert prompt engineer for AI image generation. Your task is to "
    "create detailed, professional prompts for 3D model generation that will "
    "produce high-quality, photorealistic results. Focus on technical "
    "specifications, lighting, materials, and visual composition that would be "
    "suitable for commercial use."
)
MAX_TOKENS = 4000
TEMPERATURE = 1.0


class CompletionClient(Protocol):
    """Interface for text completion."""

    async def complete(
        self,
        *,
        model: str,
        system: str,
        prompt: str,
        max_tokens: int,
        temperature: float,
    ) -> str:
        """Return the generated text."""


@dataclass(frozen=True)
class GeneratedPrompt:
    """Generated prompt with the template it came from."""

    generated_prompt: str
    original_template: str
    processed_template: str
    variables: dict[str, object] | None


def render_template(template: str, variables: dict[str, object] | None) -> str:
    """Replace every ``{{name}}`` placeholder with its variable value."""
    rendered = template
    for key, value in (variables or {}).items():
        rendered = rendered.replace("{{" + key + "}}", str(value))
    return rendered


@dataclass
class PromptGenerationService:
    """Expands a prompt template through the completion model."""

    client: CompletionClient | None
    model: str

    async def generate(
        self, template: str | None, variables: dict[str, object] | None = None
    ) -> GeneratedPrompt:
        """Render the template and ask the model for a finished prompt."""
        if self.client is None:
            raise ServiceDisabledError(
                "The ANTHROPIC_API_KEY environment variable is not set or is empty."
            )
        if not template:
            raise ValidationError("Template is required")

        processed = render_template(template, variables)
        logger.info("Generating prompt", extra={"template_length": len(processed)})
        try:
            text = await self.client.complete(
                model=self.model,
                system=SYSTEM_PROMPT,
                prompt=processed,
                max_tokens=MAX_TOKENS,
                temperature=TEMPERATURE,
            )
        except Exception as exc:
            logger.exception("Prompt generation failed")
            raise UpstreamServiceError(str(exc)) from exc
        if not text:
            raise UpstreamServiceError("No prompt generated from Anthropic")
        return GeneratedPrompt(
            generated_prompt=text,
            original_template=template,
            processed_template=processed,
            variables=variables,
        )
