"""OpenAI-compatible chat completion client for food estimates."""

from dataclasses import dataclass

import httpx
from openai import APITimeoutError, AsyncOpenAI

from calorie_tracker.services.lookup import FoodEstimateClient

_SYSTEM_PROMPT = "You are a nutrition assistant. Answer with a single JSON object."


@dataclass
class OpenAIFoodClient(FoodEstimateClient):
    """Food estimate client backed by an OpenAI-compatible endpoint."""

    client: AsyncOpenAI
    model: str

    @classmethod
    def create(
        cls,
        api_key: str,
        model: str,
        base_url: str | None = None,
        timeout_seconds: float = 20.0,
    ) -> "OpenAIFoodClient":
        """Create a client with a managed httpx session."""
        return cls(
            client=AsyncOpenAI(
                api_key=api_key,
                base_url=base_url,
                max_retries=0,
                http_client=httpx.AsyncClient(timeout=timeout_seconds),
            ),
            model=model,
        )

    async def complete(self, prompt: str) -> str:
        """Return the model's text answer for a prompt."""
        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": _SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
                response_format={"type": "json_object"},
            )
        except APITimeoutError as exc:
            raise TimeoutError(str(exc)) from exc
        if not response.choices:
            return ""
        return response.choices[0].message.content or ""

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.client.close()
