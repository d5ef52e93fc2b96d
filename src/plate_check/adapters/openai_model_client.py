"""OpenAI Responses API client for plate analysis."""

from dataclasses import dataclass

from openai import AsyncOpenAI

from plate_check.services.relay import ModelClient


@dataclass
class OpenAIModelClient(ModelClient):
    """Model client backed by OpenAI Responses API."""

    client: AsyncOpenAI

    @classmethod
    def create(cls, api_key: str) -> "OpenAIModelClient":
        """Create an OpenAI model client."""
        return cls(client=AsyncOpenAI(api_key=api_key))

    async def complete(  # noqa: PLR0913
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        max_output_tokens: int,
        store: bool,
        prompt: str,
        image_data_url: str | None = None,
    ) -> str:
        """Send a prompt, with an optional image, and return the answer text."""
        content: list[dict[str, object]] = [{"type": "input_text", "text": prompt}]
        if image_data_url:
            content.insert(0, {"type": "input_image", "image_url": image_data_url})
        request_payload: dict[str, object] = {
            "model": model,
            "input": [{"role": "user", "content": content}],
            "max_output_tokens": max_output_tokens,
            "store": store,
        }
        if reasoning_effort:
            request_payload["reasoning"] = {"effort": reasoning_effort}

        response = await self.client.responses.create(**request_payload)
        output_text = response.output_text
        if not output_text:
            raise RuntimeError("No text response from model")
        return output_text

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.client.close()
