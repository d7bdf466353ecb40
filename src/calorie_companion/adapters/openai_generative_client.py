"""OpenAI Responses API client for structured and free-text generation."""

import json
from dataclasses import dataclass
from typing import Protocol

from openai import AsyncOpenAI


class GenerativeClient(Protocol):
    """Interface for generative-AI text and JSON calls."""

    async def generate_json(  # noqa: PLR0913
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        prompt: str,
        schema: dict[str, object],
        schema_name: str,
    ) -> dict[str, object]:
        """Return a JSON object constrained to the given schema."""

    async def generate_text(
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        prompt: str,
    ) -> str:
        """Return free text for the prompt."""


@dataclass
class OpenAIGenerativeClient(GenerativeClient):
    """Generative client backed by OpenAI Responses API."""

    client: AsyncOpenAI

    @classmethod
    def create(cls, api_key: str) -> "OpenAIGenerativeClient":
        """Create an OpenAI generative client."""
        return cls(client=AsyncOpenAI(api_key=api_key))

    async def generate_json(  # noqa: PLR0913
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        prompt: str,
        schema: dict[str, object],
        schema_name: str,
    ) -> dict[str, object]:
        """Call OpenAI Responses API with structured outputs."""
        request_payload = _base_payload(model, reasoning_effort, store, prompt)
        request_payload["text"] = {
            "format": {
                "type": "json_schema",
                "name": schema_name,
                "strict": True,
                "schema": schema,
            }
        }
        response = await self.client.responses.create(**request_payload)
        output_text = response.output_text
        if not output_text:
            raise RuntimeError("OpenAI returned an empty response")
        parsed = json.loads(output_text.strip())
        if not isinstance(parsed, dict):
            raise TypeError("OpenAI returned a non-object JSON payload")
        return parsed

    async def generate_text(
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        prompt: str,
    ) -> str:
        """Call OpenAI Responses API for a plain text answer."""
        request_payload = _base_payload(model, reasoning_effort, store, prompt)
        response = await self.client.responses.create(**request_payload)
        return response.output_text or ""

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.client.close()


def _base_payload(
    model: str, reasoning_effort: str | None, store: bool, prompt: str
) -> dict[str, object]:
    payload: dict[str, object] = {
        "model": model,
        "input": [
            {
                "role": "user",
                "content": [{"type": "input_text", "text": prompt}],
            }
        ],
        "store": store,
    }
    if reasoning_effort:
        payload["reasoning"] = {"effort": reasoning_effort}
    return payload
